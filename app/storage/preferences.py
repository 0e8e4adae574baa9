# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/2 21:52
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 翻译器偏好设置：显式的加载 / 保存生命周期
"""
import json
import math
from typing import Any, Dict, Literal

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator

from prompts import SYSTEM_PROMPT_REPLY, SYSTEM_PROMPT_TRANSLATE
from settings import settings
from .crud import PersistentStore

SETTINGS_KEY = "ai_translator_settings_v1"

ProviderName = Literal["openai", "deepseek", "custom"]

PROVIDER_PRESETS: Dict[str, Dict[str, str]] = {
    "openai": {
        "api_endpoint": "https://api.openai.com/v1/chat/completions",
        "model": "gpt-4o-mini",
    },
    "deepseek": {"api_endpoint": "https://api.deepseek.com/chat/completions", "model": "deepseek-chat"},
    "custom": {"api_endpoint": "", "model": ""},
}

# (min, max) 与原设置面板的取值范围一致
_NUMERIC_BOUNDS = {
    "context_size": (1, 20),
    "temperature": (0.0, 2.0),
    "request_interval_ms": (100, 5000),
}


class TranslatorPreferences(BaseModel):
    enabled: bool = Field(default=True, description="总开关")
    auto_translate: bool = Field(default=True, description="是否自动翻译新出现的消息")
    target_language: str = Field(default="简体中文", description="目标语言")
    context_size: int = Field(default=6, description="翻译时附带的上文条数")

    provider: ProviderName = Field(default="openai")
    api_endpoint: str = Field(default=PROVIDER_PRESETS["openai"]["api_endpoint"])
    api_key: str = Field(default="")
    model: str = Field(default=PROVIDER_PRESETS["openai"]["model"])
    temperature: float = Field(default=0.2)

    request_interval_ms: int = Field(default=900, description="两次请求发起之间的最小间隔")
    max_cache_entries: int = Field(default=1000, ge=1, description="翻译缓存容量")

    reply_preset_id: str = Field(default="random")
    reply_extra_instruction: str = Field(default="")

    system_prompt_translate: str = Field(default=SYSTEM_PROMPT_TRANSLATE)
    system_prompt_reply: str = Field(default=SYSTEM_PROMPT_REPLY)

    @field_validator("context_size", "temperature", "request_interval_ms", mode="before")
    @classmethod
    def clamp_number(cls, value: Any, info: ValidationInfo):
        fallback = cls.model_fields[info.field_name].default
        try:
            num = float(value)
        except (TypeError, ValueError):
            return fallback
        if not math.isfinite(num):
            return fallback

        low, high = _NUMERIC_BOUNDS[info.field_name]
        num = min(high, max(low, num))
        return int(num) if isinstance(fallback, int) else num

    @field_validator("target_language", "model", "api_endpoint", "api_key", mode="before")
    @classmethod
    def strip_text(cls, value: Any):
        return str(value or "").strip()

    @field_validator("reply_preset_id", mode="before")
    @classmethod
    def default_preset(cls, value: Any):
        return str(value or "").strip() or "random"

    def apply_provider_preset(self, provider: ProviderName) -> "TranslatorPreferences":
        """切换服务商；非自定义服务商会同时带出默认接口地址与模型"""
        update: Dict[str, Any] = {"provider": provider}
        if provider != "custom":
            update.update(PROVIDER_PRESETS[provider])
        return self.model_copy(update=update)


def default_preferences() -> TranslatorPreferences:
    preset = PROVIDER_PRESETS[settings.COMPLETION_PROVIDER]
    return TranslatorPreferences(
        provider=settings.COMPLETION_PROVIDER,
        api_endpoint=preset["api_endpoint"],
        model=preset["model"],
        api_key=settings.COMPLETION_API_KEY.get_secret_value(),
    )


def load_preferences(store: PersistentStore) -> TranslatorPreferences:
    """读取持久化设置并覆盖到默认值之上，数据损坏时回退到默认值"""
    defaults = default_preferences()
    raw = store.get(SETTINGS_KEY)
    if not raw:
        return defaults

    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as err:
        logger.warning(f"持久化设置无法解析，已使用默认设置 - {err}")
        return defaults

    if not isinstance(parsed, dict):
        logger.warning("持久化设置格式错误，已使用默认设置")
        return defaults

    merged = {**defaults.model_dump(), **parsed}
    try:
        return TranslatorPreferences.model_validate(merged)
    except ValidationError as err:
        logger.warning(f"持久化设置校验失败，已使用默认设置 - {err}")
        return defaults


def save_preferences(store: PersistentStore, preferences: TranslatorPreferences) -> None:
    store.set(SETTINGS_KEY, preferences.model_dump_json())
    logger.info("设置已保存")
