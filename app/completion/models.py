# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/3 10:10
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : OpenAI 兼容 Chat Completion 接口的请求与响应模型
"""
from typing import List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

ROLE_TYPE = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    role: ROLE_TYPE
    content: str


class ChatCompletionPayload(BaseModel):
    model: str
    messages: List[ChatMessage]
    temperature: float = 0.2
    stream: bool = False


class ContentPart(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str | None = Field(default=None, description="如 `text`、`image_url`，缺省时按文本处理")
    text: str | None = None

    @property
    def is_text(self) -> bool:
        return self.type in (None, "text", "output_text")


# 服务商返回的 content 可能是纯字符串，也可能是分段列表
MESSAGE_CONTENT = Union[str, List[Union[str, ContentPart]]]


class CompletionMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: str | None = None
    content: MESSAGE_CONTENT | None = None


class CompletionChoice(BaseModel):
    model_config = ConfigDict(extra="allow")

    index: int | None = None
    message: CompletionMessage | None = None


class ChatCompletionResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    choices: List[CompletionChoice] | None = Field(default_factory=list)
    output_text: str | None = Field(default=None, description="部分服务商在顶层直接给出文本")

    def extract_text(self) -> str:
        """取第一个 choice 的文本，缺失时回退到顶层 output_text"""
        if self.choices and self.choices[0].message:
            text = resolve_content(self.choices[0].message.content)
            if text:
                return text
        return self.output_text or ""


def resolve_content(content: MESSAGE_CONTENT | None) -> str:
    if not content:
        return ""
    if isinstance(content, str):
        return content

    pieces = []
    for part in content:
        if isinstance(part, str):
            pieces.append(part)
        elif part.is_text and part.text:
            pieces.append(part.text)
    return "".join(pieces)
