# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/5 11:30
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 模型输出清理测试
"""
import pytest

from translator import normalize

SAMPLES = [
    "```\n译文: [Alice] Hola\n```",
    "Translation: Hello there",
    "译文：翻译: 你好",
    "[EN] [formal] Good morning",
    "```markdown\n**bold** text\n```",
    "Alice: hi",
    "plain text",
    "   ",
    "译文:",
]


class TestNormalize:
    def test_fence_label_and_author_are_removed(self):
        assert normalize("```\n译文: [Alice] Hola\n```", "Alice") == "Hola"

    def test_fence_with_language_tag(self):
        assert normalize("```text\nBonjour\n```") == "Bonjour"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Translated text: Hi", "Hi"),
            ("translation： Hi", "Hi"),
            ("翻译：你好", "你好"),
            ("[A] [B] hi", "hi"),
            ("  many   spaces\n\nhere ", "many spaces here"),
        ],
    )
    def test_labels_and_whitespace(self, raw, expected):
        assert normalize(raw) == expected

    @pytest.mark.parametrize("raw", ["Bob: hello", "bob：hello", "Bob - hello", "[Bob] hello"])
    def test_author_prefix(self, raw):
        assert normalize(raw, "Bob") == "hello"

    def test_author_is_matched_literally(self):
        assert normalize("axb: hi", "a.b") == "axb: hi"
        assert normalize("a.b: hi", "a.b") == "hi"

    def test_author_prefix_kept_without_author(self):
        assert normalize("Bob: hello") == "Bob: hello"

    def test_falls_back_when_everything_is_stripped(self):
        assert normalize("译文:") == "译文:"
        assert normalize("[note]") == "[note]"

    def test_none_and_blank(self):
        assert normalize(None) == ""
        assert normalize("   ") == ""

    @pytest.mark.parametrize("raw", SAMPLES)
    def test_idempotent(self, raw):
        once = normalize(raw, "Alice")
        assert normalize(once, "Alice") == once
