# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/3 14:00
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 聊天消息翻译与回复流水线
"""

from .cache import TranslationCache, DebouncedAction
from .context import ContextAssembler, ChatHistory, ChatHistoryRegistry, MessageSource
from .errors import TranslatorError, ReplyConfigError, EmptyContextError, CompositionError
from .normalizer import normalize
from .pipeline import TranslationPipeline, CompositionSink, TranslationSink
from .presets import ReplyPresetSelector, RANDOM_PRESET_ID
from .scheduler import RequestScheduler, ScheduledTask
from .watcher import ChangeWatcher

__all__ = [
    "TranslationCache",
    "DebouncedAction",
    "ContextAssembler",
    "ChatHistory",
    "ChatHistoryRegistry",
    "MessageSource",
    "TranslatorError",
    "ReplyConfigError",
    "EmptyContextError",
    "CompositionError",
    "normalize",
    "TranslationPipeline",
    "CompositionSink",
    "TranslationSink",
    "ReplyPresetSelector",
    "RANDOM_PRESET_ID",
    "RequestScheduler",
    "ScheduledTask",
    "ChangeWatcher",
]
