# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/5 13:55
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 键值存储与偏好设置的加载 / 保存测试
"""
import json

import pytest

from storage import (
    MemoryStore,
    PROVIDER_PRESETS,
    SqlKeyValueStore,
    TranslatorPreferences,
    load_preferences,
    save_preferences,
)
from storage.preferences import SETTINGS_KEY


class TestSqlKeyValueStore:
    @pytest.fixture
    def sql_store(self, tmp_path):
        store = SqlKeyValueStore(f"sqlite:///{tmp_path / 'nested' / 'kv.db'}")
        store.init_database()
        yield store
        store.dispose()

    def test_missing_key(self, sql_store):
        assert sql_store.get("absent") is None

    def test_set_and_overwrite(self, sql_store):
        sql_store.set("k", "v1")
        sql_store.set("k", "v2")
        assert sql_store.get("k") == "v2"

    def test_unicode_value(self, sql_store):
        sql_store.set("k", json.dumps({"a": "你好"}, ensure_ascii=False))
        assert json.loads(sql_store.get("k")) == {"a": "你好"}

    def test_preferences_survive_reopen(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'kv.db'}"
        first = SqlKeyValueStore(url)
        first.init_database()
        save_preferences(first, TranslatorPreferences(target_language="English", model="m1"))
        first.dispose()

        second = SqlKeyValueStore(url)
        loaded = load_preferences(second)
        second.dispose()

        assert loaded.target_language == "English"
        assert loaded.model == "m1"


class TestTranslatorPreferences:
    @pytest.mark.parametrize(
        "field, raw, expected",
        [
            ("context_size", 50, 20),
            ("context_size", 0, 1),
            ("context_size", "7", 7),
            ("context_size", "abc", 6),
            ("temperature", 3.5, 2.0),
            ("temperature", -1, 0.0),
            ("temperature", "nan", 0.2),
            ("request_interval_ms", 10, 100),
            ("request_interval_ms", 99999, 5000),
            ("request_interval_ms", None, 900),
        ],
    )
    def test_numeric_fields_are_clamped(self, field, raw, expected):
        assert getattr(TranslatorPreferences(**{field: raw}), field) == expected

    def test_text_fields_are_stripped(self):
        preferences = TranslatorPreferences(target_language="  English ", model=" gpt ", api_key=None)
        assert preferences.target_language == "English"
        assert preferences.model == "gpt"
        assert preferences.api_key == ""

    def test_blank_preset_defaults_to_random(self):
        assert TranslatorPreferences(reply_preset_id="  ").reply_preset_id == "random"

    def test_apply_provider_preset(self):
        preferences = TranslatorPreferences().apply_provider_preset("deepseek")
        assert preferences.provider == "deepseek"
        assert preferences.api_endpoint == PROVIDER_PRESETS["deepseek"]["api_endpoint"]
        assert preferences.model == "deepseek-chat"

    def test_custom_provider_keeps_endpoint(self):
        preferences = TranslatorPreferences(api_endpoint="https://llm.local/v1", model="local")
        custom = preferences.apply_provider_preset("custom")
        assert custom.api_endpoint == "https://llm.local/v1"
        assert custom.model == "local"


class TestLoadPreferences:
    def test_empty_store_gives_defaults(self):
        preferences = load_preferences(MemoryStore())
        assert preferences.context_size == 6
        assert preferences.request_interval_ms == 900
        assert preferences.max_cache_entries == 1000

    @pytest.mark.parametrize("raw", ["{broken", "[]", '"text"'])
    def test_malformed_data_gives_defaults(self, raw):
        preferences = load_preferences(MemoryStore({SETTINGS_KEY: raw}))
        assert preferences.target_language == "简体中文"

    def test_partial_data_is_merged_over_defaults(self):
        store = MemoryStore({SETTINGS_KEY: json.dumps({"target_language": "English", "context_size": 99})})

        preferences = load_preferences(store)

        assert preferences.target_language == "English"
        assert preferences.context_size == 20
        assert preferences.temperature == 0.2

    def test_invalid_value_gives_defaults(self):
        store = MemoryStore({SETTINGS_KEY: json.dumps({"max_cache_entries": 0})})
        assert load_preferences(store).max_cache_entries == 1000

    def test_save_then_load(self):
        store = MemoryStore()
        saved = TranslatorPreferences(auto_translate=False, reply_preset_id="warm_supportive")

        save_preferences(store, saved)

        assert store.writes == 1
        assert load_preferences(store) == saved
