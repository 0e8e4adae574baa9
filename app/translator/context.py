# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/3 16:20
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 为每次请求组装有界、按时间排序的上下文
"""
from collections import deque
from typing import Deque, Dict, List, Optional, Protocol, Sequence

from models import ContextMessage, MessageRecord
from prompts import CONTEXT_LINE_TEMPLATE, EMPTY_CONTEXT_PLACEHOLDER
from utils import sanitize_text, truncate

WINDOW_TEXT_LIMIT = 300
LATEST_TEXT_LIMIT = 360


class MessageSource(Protocol):
    def messages(self) -> Sequence[MessageRecord]:
        """按时间从早到晚排列的消息序列"""
        ...


class ChatHistory:
    """单个聊天的内存消息源，只保留最近 max_messages 条"""

    def __init__(self, channel_id: str, max_messages: int = 200):
        self.channel_id = channel_id
        self._records: Deque[MessageRecord] = deque(maxlen=max(1, max_messages))
        self._next_index = 0

    def append(self, message_id: str, author: str, text: str) -> MessageRecord:
        """追加新消息；已存在的消息（被编辑）原位替换文本"""
        for i, existing in enumerate(self._records):
            if existing.message_id == message_id:
                updated = existing.model_copy(update={"author": author or existing.author, "text": text})
                self._records[i] = updated
                return updated

        record = MessageRecord(
            channel_id=self.channel_id,
            message_id=message_id,
            author=author or "Unknown",
            text=text,
            sequence_index=self._next_index,
        )
        self._next_index += 1
        self._records.append(record)
        return record

    def get(self, message_id: str) -> Optional[MessageRecord]:
        for record in self._records:
            if record.message_id == message_id:
                return record
        return None

    def messages(self) -> List[MessageRecord]:
        return list(self._records)

    def __len__(self):
        return len(self._records)


class ChatHistoryRegistry:
    def __init__(self, max_messages: int = 200):
        self._max_messages = max_messages
        self._histories: Dict[str, ChatHistory] = {}

    def get(self, channel_id: str) -> ChatHistory:
        if channel_id not in self._histories:
            self._histories[channel_id] = ChatHistory(channel_id, self._max_messages)
        return self._histories[channel_id]


class ContextAssembler:
    def __init__(self, source: MessageSource):
        self._source = source

    def collect_window(self, target: MessageRecord, max_count: int) -> List[ContextMessage]:
        """
        取目标消息之前（不含目标）的最多 max_count 条消息

        找不到目标时返回空列表；空消息被跳过，顺序保持时间顺序。
        """
        records = list(self._source.messages())
        idx = next((i for i, r in enumerate(records) if r.identity == target.identity), -1)
        if idx < 0:
            return []

        start = max(0, idx - max(1, max_count))
        return self._to_context(records[start:idx], WINDOW_TEXT_LIMIT)

    def collect_latest(self, max_count: int) -> List[ContextMessage]:
        """取整个序列的最后 max_count 条，用于按需生成回复"""
        if max_count <= 0:
            return []
        records = list(self._source.messages())
        return self._to_context(records[-max_count:], LATEST_TEXT_LIMIT)

    @staticmethod
    def _to_context(records: Sequence[MessageRecord], limit: int) -> List[ContextMessage]:
        context = []
        for record in records:
            text = sanitize_text(record.text)
            if not text:
                continue
            context.append(
                ContextMessage(author=record.author or "Unknown", text=truncate(text, limit))
            )
        return context


def format_context_lines(context: Sequence[ContextMessage]) -> str:
    if not context:
        return EMPTY_CONTEXT_PLACEHOLDER
    return "\n".join(
        CONTEXT_LINE_TEMPLATE.format(index=i, author=msg.author, text=msg.text)
        for i, msg in enumerate(context, start=1)
    )
