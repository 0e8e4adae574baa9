# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/4 16:20
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : /translate 手动翻译最近的消息
"""
from loguru import logger
from telegram import Update
from telegram.ext import ContextTypes

from mybot.handlers.message_handler import is_allowed_chat
from mybot.services.runtime import get_runtime
from mybot.task_manager import non_blocking_handler

MANUAL_SCAN_LIMIT = 100


@non_blocking_handler("translate_command")
async def translate_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """手动扫描：即使关闭了自动翻译也会执行"""
    chat_id = update.effective_chat.id
    if not is_allowed_chat(chat_id):
        return

    limit = MANUAL_SCAN_LIMIT
    if context.args:
        try:
            limit = max(1, int(context.args[0]))
        except ValueError:
            await update.message.reply_text("用法：/translate [条数]")
            return

    runtime = get_runtime(context)
    if not runtime.pipeline.preferences.enabled:
        await update.message.reply_text("🔕 翻译器已停用。")
        return

    history = runtime.histories.get(str(chat_id))
    tasks = await runtime.pipeline.translate_visible(
        history, runtime.translation_sink, limit=limit, force=True
    )
    logger.info(f"手动扫描聊天 {chat_id}：{len(tasks)} 条消息进入队列")
    await update.message.reply_text(f"已开始手动扫描，{len(tasks)} 条消息等待翻译。")
