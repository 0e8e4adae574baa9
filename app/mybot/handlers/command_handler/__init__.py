# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/4 16:15
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    :
"""
from .translate_command import translate_command
from .reply_command import reply_command, insert_command, presets_command
from .preferences_command import (
    auto_command,
    lang_command,
    provider_command,
    clear_cache_command,
    status_command,
)

__all__ = [
    "translate_command",
    "reply_command",
    "insert_command",
    "presets_command",
    "auto_command",
    "lang_command",
    "provider_command",
    "clear_cache_command",
    "status_command",
]
