# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/4 09:40
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 翻译 / 回复流水线：缓存 -> 去重 -> 上下文 -> 限速请求 -> 清理 -> 写缓存 -> 交付
"""
import random
import string
from typing import Awaitable, Callable, List, Optional, Protocol

from loguru import logger

from completion import ChatMessage, CompletionClient, CompletionError
from models import MessageRecord, ReplyDraft, ContextMessage, build_cache_key
from prompts import (
    TRANSLATE_PROMPT_TEMPLATE,
    REPLY_PROMPT_HEADER,
    REPLY_PROMPT_STYLE_PRESET,
    REPLY_PROMPT_STYLE_GUIDANCE,
    REPLY_PROMPT_ANTI_TEMPLATE,
    REPLY_PROMPT_VARIATION,
    REPLY_PROMPT_CONTEXT,
    REPLY_PROMPT_EXTRA,
    REPLY_PROMPT_FOOTER,
)
from storage.crud import PersistentStore
from storage.preferences import TranslatorPreferences, load_preferences, save_preferences
from utils import sanitize_text
from .cache import TranslationCache
from .context import ContextAssembler, MessageSource, format_context_lines
from .errors import CompositionError, EmptyContextError, ReplyConfigError
from .normalizer import normalize
from .presets import ReplyPresetSelector
from .scheduler import RequestScheduler, ScheduledTask

# (record, translated_text, from_cache)
TranslationSink = Callable[[MessageRecord, str, bool], Awaitable[None]]
StatusReporter = Callable[[str, bool], None]


class CompositionSink(Protocol):
    async def insert(self, text: str) -> None:
        """把最终文本写入外部输入框，失败时抛出异常"""
        ...


def log_status(message: str, is_error: bool = False):
    if is_error:
        logger.error(message)
    else:
        logger.info(message)


def _variation_token(length: int = 6) -> str:
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))


class TranslationPipeline:
    def __init__(
        self,
        store: PersistentStore,
        preferences: TranslatorPreferences | None = None,
        *,
        client: CompletionClient | None = None,
        cache: TranslationCache | None = None,
        scheduler: RequestScheduler | None = None,
        selector: ReplyPresetSelector | None = None,
        on_status: StatusReporter = log_status,
    ):
        self._store = store
        self._on_status = on_status

        self.preferences = preferences or load_preferences(store)
        self.cache = cache or TranslationCache(store, self.preferences.max_cache_entries).load()
        self.scheduler = scheduler or RequestScheduler(
            self.preferences.request_interval_ms, on_error=self._report_task_error
        )
        self.client = client or CompletionClient()
        self.selector = selector or ReplyPresetSelector()

        self.reply_output = ""

    def set_status(self, message: str, is_error: bool = False):
        try:
            self._on_status(message, is_error)
        except Exception as err:
            logger.error(f"状态上报失败: {err}")

    def _report_task_error(self, key: str, err: BaseException):
        self.set_status(f"翻译失败：{err}", True)

    def cache_key_for(self, record: MessageRecord) -> str:
        return build_cache_key(
            record.channel_id, record.message_id, self.preferences.target_language, self.preferences.model
        )

    async def schedule_translation(
        self, source: MessageSource, record: MessageRecord, sink: TranslationSink
    ) -> Optional[ScheduledTask]:
        """
        为一条消息安排翻译

        缓存命中时直接交付；未命中时通过调度器去重排队。
        返回排队中的任务，命中缓存或消息为空时返回 None。
        """
        if not record or not sanitize_text(record.text):
            return None

        key = self.cache_key_for(record)
        if (cached := self.cache.get(key)) is not None:
            logger.debug(f"翻译缓存命中: {key}")
            await sink(record, cached, True)
            self.set_status("已应用缓存翻译。")
            return None

        # 任务使用排队时的设置快照，保证写入的缓存键与结果一致
        preferences = self.preferences

        async def job():
            return await self._translate(source, record, key, sink, preferences)

        return self.scheduler.schedule(key, job)

    async def translate_visible(
        self, source: MessageSource, sink: TranslationSink, limit: int = 60, force: bool = False
    ) -> List[ScheduledTask]:
        preferences = self.preferences
        if not preferences.enabled or (not preferences.auto_translate and not force):
            return []

        tasks = []
        for record in list(source.messages())[-max(1, limit):]:
            if task := await self.schedule_translation(source, record, sink):
                tasks.append(task)
        return tasks

    async def _translate(
        self,
        source: MessageSource,
        record: MessageRecord,
        key: str,
        sink: TranslationSink,
        preferences: TranslatorPreferences,
    ) -> str:
        window = ContextAssembler(source).collect_window(record, preferences.context_size)
        translated = await self.translate_with_context(record, window, preferences)
        self.cache.set(key, translated)

        # 译文已写入缓存，投递失败不影响任务结果
        try:
            await sink(record, translated, False)
        except Exception as err:
            logger.error(f"译文投递失败 {record.channel_id}:{record.message_id} - {err}")
            self.set_status(f"译文已缓存，但投递失败：{err}", True)
        return translated

    async def translate_with_context(
        self,
        record: MessageRecord,
        context: List[ContextMessage],
        preferences: TranslatorPreferences | None = None,
    ) -> str:
        preferences = preferences or self.preferences
        user_prompt = TRANSLATE_PROMPT_TEMPLATE.format(
            target_language=preferences.target_language,
            context_text=format_context_lines(context),
            message_text=record.text,
        )
        messages = [
            ChatMessage(role="system", content=preferences.system_prompt_translate),
            ChatMessage(role="user", content=user_prompt),
        ]

        self.set_status(f"正在翻译消息 {record.message_id} ...")
        content = await self.client.request_completion(messages, preferences)
        self.set_status(f"消息 {record.message_id} 翻译完成。")
        return normalize(content, record.author)

    async def generate_reply(
        self,
        source: MessageSource,
        preset_id: str | None = None,
        extra_instruction: str | None = None,
    ) -> ReplyDraft:
        """
        根据最近的聊天上下文生成一条回复

        与自动翻译共用同一个调度器，遵守请求间隔；任何错误都直接抛给调用方。
        """
        preferences = self.preferences
        if not preferences.api_endpoint or not preferences.model:
            self.set_status("请先配置接口地址和模型。", True)
            raise ReplyConfigError("请先配置接口地址和模型。")

        context = ContextAssembler(source).collect_latest(max(2, preferences.context_size))
        if not context:
            self.set_status("未找到可见消息上下文。", True)
            raise EmptyContextError("未找到可见消息上下文。")

        instruction = sanitize_text(extra_instruction or preferences.reply_extra_instruction)
        preset = self.selector.resolve(preset_id or preferences.reply_preset_id)

        lines = [
            REPLY_PROMPT_HEADER,
            REPLY_PROMPT_STYLE_PRESET.format(label=preset.label),
            REPLY_PROMPT_STYLE_GUIDANCE.format(instruction=preset.instruction),
            REPLY_PROMPT_ANTI_TEMPLATE,
            REPLY_PROMPT_VARIATION.format(token=_variation_token()),
            REPLY_PROMPT_CONTEXT.format(context_text=format_context_lines(context)),
            REPLY_PROMPT_EXTRA.format(instruction=instruction) if instruction else "",
            REPLY_PROMPT_FOOTER,
        ]
        messages = [
            ChatMessage(role="system", content=preferences.system_prompt_reply),
            ChatMessage(role="user", content="\n".join(filter(None, lines))),
        ]

        self.set_status("正在生成回复...")
        try:
            reply = await self.scheduler.run(
                lambda: self.client.request_completion(messages, preferences)
            )
        except CompletionError as err:
            self.set_status(f"生成回复失败：{err}", True)
            raise

        self.reply_output = sanitize_text(reply)
        self.set_status(f"回复已生成（{preset.label}）。")
        return ReplyDraft(text=self.reply_output, preset=preset)

    async def insert_reply(self, sink: CompositionSink, text: str | None = None) -> str:
        """把回复写入外部输入框；失败只上报，不自动重试"""
        text = sanitize_text(self.reply_output if text is None else text)
        if not text:
            self.set_status("回复输出为空。", True)
            raise CompositionError("回复输出为空。")

        try:
            await sink.insert(text)
        except Exception as err:
            self.set_status("写入失败，请手动复制输出框内容。", True)
            if isinstance(err, CompositionError):
                raise
            raise CompositionError(f"写入失败: {err}") from err

        self.set_status("回复已写入输入框，可直接编辑和发送。")
        return text

    def reset_cache(self):
        self.cache.clear()
        self.set_status("翻译缓存已清空。")

    def save_preferences(self, preferences: TranslatorPreferences):
        """唯一修改设置的入口：持久化并同步到缓存容量与请求间隔"""
        save_preferences(self._store, preferences)
        self.preferences = preferences
        self.cache.resize(preferences.max_cache_entries)
        self.scheduler.set_interval(preferences.request_interval_ms)
        self.set_status("设置已保存。")

    async def close(self):
        self.cache.flush()
        await self.scheduler.close()
        await self.client.aclose()
