# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/4 11:15
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 响应新消息与频道切换，把翻译请求交给流水线
"""
from typing import AsyncIterator, Callable, List, Optional

from loguru import logger

from models import MessageSignal
from settings import settings
from .context import ChatHistory
from .pipeline import TranslationPipeline, TranslationSink
from .scheduler import ScheduledTask

SourceResolver = Callable[[str], ChatHistory]


class ChangeWatcher:
    def __init__(
        self,
        pipeline: TranslationPipeline,
        sink: TranslationSink,
        scan_limit: int = settings.CHANNEL_SCAN_LIMIT,
    ):
        self._pipeline = pipeline
        self._sink = sink
        self._scan_limit = scan_limit
        self.active_channel_id: Optional[str] = None

    def _auto_enabled(self) -> bool:
        preferences = self._pipeline.preferences
        return preferences.enabled and preferences.auto_translate

    async def on_message_added(
        self, source: ChatHistory, message_id: str
    ) -> Optional[ScheduledTask]:
        if not self._auto_enabled():
            return None

        record = source.get(message_id)
        if not record:
            logger.debug(f"消息 {message_id} 不在消息源中，跳过")
            return None
        return await self._pipeline.schedule_translation(source, record, self._sink)

    async def on_channel_observed(self, channel_id: str, source: ChatHistory) -> List[ScheduledTask]:
        """活跃频道变化时，回溯翻译最近的可见消息"""
        if channel_id == self.active_channel_id:
            return []

        self.active_channel_id = channel_id
        self._pipeline.set_status("频道已切换，正在扫描可见消息...")
        return await self._pipeline.translate_visible(source, self._sink, limit=self._scan_limit)

    async def handle_signal(self, signal: MessageSignal, resolve_source: SourceResolver):
        source = resolve_source(signal.channel_id)
        await self.on_channel_observed(signal.channel_id, source)
        if signal.message_id:
            await self.on_message_added(source, signal.message_id)

    async def watch(self, signals: AsyncIterator[MessageSignal], resolve_source: SourceResolver):
        """持续消费消息信号；单个信号出错只记录日志"""
        async for signal in signals:
            try:
                await self.handle_signal(signal, resolve_source)
            except Exception as err:
                logger.exception(f"处理消息信号失败 {signal}: {err}")
