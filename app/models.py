# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/2 21:10
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 翻译流水线共享的数据模型
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MessageRecord(BaseModel):
    """一条聊天消息的不可变快照，身份由 (channel_id, message_id) 决定"""

    model_config = ConfigDict(frozen=True)

    channel_id: str
    message_id: str
    author: str = Field(default="Unknown")
    text: str = Field(default="")
    sequence_index: int = Field(default=0, description="消息在频道中的时间顺序位置")

    @property
    def identity(self) -> tuple[str, str]:
        return self.channel_id, self.message_id


class ContextMessage(BaseModel):
    author: str
    text: str


class ReplyPreset(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    instruction: str


class ReplyDraft(BaseModel):
    text: str
    preset: ReplyPreset


class MessageSignal(BaseModel):
    """外部通知：某条消息已可用，携带足以重新定位消息的身份信息"""

    channel_id: str
    message_id: str | None = Field(
        default=None, description="为空时表示仅观测到频道切换，没有具体的新消息"
    )


class TranslationState(str, Enum):
    PENDING = "pending"
    """
    尚未调度
    """

    QUEUED = "queued"
    """
    已登记到 PendingSet，等待工作协程
    """

    IN_FLIGHT = "in_flight"
    """
    请求已发出
    """

    CACHED = "cached"
    """
    成功并已写入缓存
    """

    FAILED = "failed"
    """
    失败，已上报，不写缓存
    """


def build_cache_key(channel_id: str, message_id: str, target_language: str, model: str) -> str:
    return f"{channel_id}:{message_id}:{target_language}:{model}"
