# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/4 16:41
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : /reply 按上下文生成回复，/insert 把回复写入聊天，/presets 列出风格预设
"""
from loguru import logger
from telegram import Update
from telegram.ext import ContextTypes

from completion import CompletionError
from mybot.handlers.message_handler import is_allowed_chat
from mybot.services.runtime import get_runtime
from mybot.services.sinks import TelegramCompositionSink
from mybot.task_manager import non_blocking_handler
from translator import TranslatorError


def _split_preset_args(args: list[str], known_ids: set[str]) -> tuple[str | None, str]:
    """第一个参数是已知预设 id 时视为预设，其余拼成额外要求"""
    if args and args[0].lower() in known_ids:
        return args[0].lower(), " ".join(args[1:])
    return None, " ".join(args)


@non_blocking_handler("reply_command")
async def reply_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    chat_id = update.effective_chat.id
    if not is_allowed_chat(chat_id):
        return

    runtime = get_runtime(context)
    known_ids = {preset_id for preset_id, _ in runtime.pipeline.selector.options()}
    preset_id, extra_instruction = _split_preset_args(context.args or [], known_ids)

    try:
        draft = await runtime.pipeline.generate_reply(
            runtime.histories.get(str(chat_id)),
            preset_id=preset_id,
            extra_instruction=extra_instruction or None,
        )
    except (TranslatorError, CompletionError) as err:
        logger.warning(f"生成回复失败: {err}")
        await update.message.reply_text(f"❌ 生成回复失败：{err}")
        return

    await update.message.reply_text(
        f"💬 {draft.text}\n\n— {draft.preset.label}，使用 /insert 发送到聊天"
    )


@non_blocking_handler("insert_command")
async def insert_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    chat_id = update.effective_chat.id
    if not is_allowed_chat(chat_id):
        return

    runtime = get_runtime(context)
    sink = TelegramCompositionSink(context.bot, chat_id)
    try:
        await runtime.pipeline.insert_reply(sink)
    except TranslatorError as err:
        await update.message.reply_text(f"❌ {err}")


async def presets_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    runtime = get_runtime(context)
    current = runtime.pipeline.preferences.reply_preset_id
    lines = [
        f"{'✅' if preset_id == current else '•'} <code>{preset_id}</code> {label}"
        for preset_id, label in runtime.pipeline.selector.options()
    ]
    await update.message.reply_html("可用的回复风格：\n" + "\n".join(lines))
