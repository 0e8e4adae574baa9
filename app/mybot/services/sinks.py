# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/4 15:20
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 把译文与回复投递回 Telegram 聊天
"""
from typing import Set, Tuple

import telegram.error
from loguru import logger
from telegram import Bot

from models import MessageRecord
from translator.errors import CompositionError
from translator.normalizer import normalize

TRANSLATION_PREFIX = "🌐 "


class TelegramTranslationSink:
    """以回复原消息的方式附上译文，同一条消息只附一次"""

    def __init__(self, bot: Bot):
        self._bot = bot
        self._delivered: Set[Tuple[str, str]] = set()

    async def __call__(self, record: MessageRecord, text: str, from_cache: bool) -> None:
        if record.identity in self._delivered:
            return

        await self._bot.send_message(
            chat_id=int(record.channel_id),
            text=f"{TRANSLATION_PREFIX}{normalize(text)}",
            reply_to_message_id=int(record.message_id),
        )
        self._delivered.add(record.identity)
        logger.debug(f"已投递译文 {record.channel_id}:{record.message_id} (cache={from_cache})")


class TelegramCompositionSink:
    """把生成的回复作为一条新消息发送到聊天中"""

    def __init__(self, bot: Bot, chat_id: int):
        self._bot = bot
        self._chat_id = chat_id

    async def insert(self, text: str) -> None:
        try:
            await self._bot.send_message(chat_id=self._chat_id, text=text)
        except telegram.error.TelegramError as err:
            raise CompositionError(f"写入失败: {err}") from err
