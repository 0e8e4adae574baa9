# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/2 21:30
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 设置与翻译缓存的持久化存储
"""

from .crud import PersistentStore, SqlKeyValueStore, MemoryStore
from .preferences import (
    TranslatorPreferences,
    PROVIDER_PRESETS,
    load_preferences,
    save_preferences,
    default_preferences,
)

__all__ = [
    "PersistentStore",
    "SqlKeyValueStore",
    "MemoryStore",
    "TranslatorPreferences",
    "PROVIDER_PRESETS",
    "load_preferences",
    "save_preferences",
    "default_preferences",
]
