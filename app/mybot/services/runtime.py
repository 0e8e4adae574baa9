# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/4 15:40
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 机器人运行时：持有唯一的流水线、消息源与观察器
"""
from telegram import Bot, Message
from telegram.ext import ContextTypes

from models import MessageRecord, MessageSignal
from settings import settings
from translator import ChangeWatcher, ChatHistoryRegistry, TranslationPipeline
from .sinks import TelegramTranslationSink

RUNTIME_KEY = "translator_runtime"


def message_author(message: Message) -> str:
    if message.sender_chat:
        return message.sender_chat.username or message.sender_chat.title or "Channel"
    if message.from_user:
        return message.from_user.username or message.from_user.first_name or "User"
    return "Unknown"


class BotRuntime:
    def __init__(self, pipeline: TranslationPipeline, bot: Bot):
        self.pipeline = pipeline
        self.histories = ChatHistoryRegistry(max_messages=settings.CHAT_HISTORY_LIMIT)
        self.translation_sink = TelegramTranslationSink(bot)
        self.watcher = ChangeWatcher(pipeline, self.translation_sink)

    def record_message(self, message: Message) -> MessageRecord | None:
        text = message.text or message.caption or ""
        if not text:
            return None
        history = self.histories.get(str(message.chat_id))
        return history.append(str(message.message_id), message_author(message), text)

    async def notify(self, record: MessageRecord):
        signal = MessageSignal(channel_id=record.channel_id, message_id=record.message_id)
        await self.watcher.handle_signal(signal, self.histories.get)

    async def close(self):
        await self.pipeline.close()


def get_runtime(context: ContextTypes.DEFAULT_TYPE) -> BotRuntime:
    return context.bot_data[RUNTIME_KEY]
