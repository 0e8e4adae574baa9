# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/4 16:02
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 记录群聊消息并触发自动翻译
"""
from loguru import logger
from telegram import Update
from telegram.ext import ContextTypes

from mybot.services.runtime import get_runtime
from mybot.task_manager import non_blocking_handler
from settings import settings


def is_allowed_chat(chat_id: int) -> bool:
    return not settings.whitelist or chat_id in settings.whitelist


@non_blocking_handler("handle_message")
async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    message = update.effective_message
    if not message or not update.effective_chat:
        return

    if not is_allowed_chat(update.effective_chat.id):
        return

    # 机器人自己发出的译文和回复不进入消息源
    if message.from_user and message.from_user.is_bot:
        return

    runtime = get_runtime(context)
    record = runtime.record_message(message)
    if not record:
        return

    logger.debug(f"记录消息 {record.channel_id}:{record.message_id} from {record.author}")
    await runtime.notify(record)
