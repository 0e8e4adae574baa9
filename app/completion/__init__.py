# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/3 10:00
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    :
"""
from .client import CompletionClient
from .errors import (
    CompletionError,
    CompletionConfigError,
    CompletionTransportError,
    CompletionTimeoutError,
    CompletionHTTPError,
    CompletionParseError,
    CompletionEmptyError,
)
from .models import ChatMessage

__all__ = [
    "CompletionClient",
    "ChatMessage",
    "CompletionError",
    "CompletionConfigError",
    "CompletionTransportError",
    "CompletionTimeoutError",
    "CompletionHTTPError",
    "CompletionParseError",
    "CompletionEmptyError",
]
