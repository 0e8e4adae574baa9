# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/5 11:05
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 上下文窗口与消息源测试
"""
from models import MessageRecord
from prompts import EMPTY_CONTEXT_PLACEHOLDER
from translator import ChatHistory, ChatHistoryRegistry, ContextAssembler
from translator.context import format_context_lines


class TestCollectWindow:
    def test_window_precedes_target(self, make_history):
        history = make_history(20)
        target = history.messages()[10]

        window = ContextAssembler(history).collect_window(target, 6)

        assert [m.text for m in window] == ["m4", "m5", "m6", "m7", "m8", "m9"]
        assert [m.author for m in window] == ["u4", "u5", "u6", "u7", "u8", "u9"]

    def test_window_at_start_is_empty(self, make_history):
        history = make_history(5)
        assert ContextAssembler(history).collect_window(history.messages()[0], 6) == []

    def test_window_shorter_than_requested(self, make_history):
        history = make_history(5)
        window = ContextAssembler(history).collect_window(history.messages()[2], 6)
        assert [m.text for m in window] == ["m0", "m1"]

    def test_unknown_target_yields_empty(self, make_history):
        history = make_history(5)
        stranger = MessageRecord(channel_id="10", message_id="999", text="hi")
        assert ContextAssembler(history).collect_window(stranger, 6) == []

    def test_non_positive_count_treated_as_one(self, make_history):
        history = make_history(5)
        window = ContextAssembler(history).collect_window(history.messages()[3], 0)
        assert [m.text for m in window] == ["m2"]

    def test_empty_messages_are_skipped(self):
        history = ChatHistory("10")
        history.append("1", "a", "hello")
        history.append("2", "b", "   \n ")
        history.append("3", "c", "world")
        target = history.append("4", "d", "target")

        window = ContextAssembler(history).collect_window(target, 6)

        assert [m.text for m in window] == ["hello", "world"]

    def test_long_text_is_truncated(self):
        history = ChatHistory("10")
        history.append("1", "a", "x" * 350)
        target = history.append("2", "b", "target")

        (message,) = ContextAssembler(history).collect_window(target, 6)

        assert message.text == "x" * 300 + "..."

    def test_whitespace_is_collapsed(self):
        history = ChatHistory("10")
        history.append("1", "a", "  hello \n\n  there ")
        target = history.append("2", "b", "target")

        (message,) = ContextAssembler(history).collect_window(target, 6)

        assert message.text == "hello there"


class TestCollectLatest:
    def test_latest_includes_tail(self, make_history):
        history = make_history(10)
        latest = ContextAssembler(history).collect_latest(3)
        assert [m.text for m in latest] == ["m7", "m8", "m9"]

    def test_latest_limit_is_larger(self):
        history = ChatHistory("10")
        history.append("1", "a", "y" * 400)

        (message,) = ContextAssembler(history).collect_latest(2)

        assert message.text == "y" * 360 + "..."

    def test_latest_zero(self, make_history):
        assert ContextAssembler(make_history(3)).collect_latest(0) == []


class TestChatHistory:
    def test_edit_replaces_in_place(self, make_history):
        history = make_history(3)
        updated = history.append("1", "u1", "edited")

        assert len(history) == 3
        assert history.get("1").text == "edited"
        assert updated.sequence_index == 1

    def test_bounded_history_drops_oldest(self):
        history = ChatHistory("10", max_messages=2)
        for i in range(4):
            history.append(str(i), "a", f"m{i}")

        assert [r.message_id for r in history.messages()] == ["2", "3"]

    def test_registry_reuses_history(self):
        registry = ChatHistoryRegistry(max_messages=5)
        assert registry.get("1") is registry.get("1")
        assert registry.get("1") is not registry.get("2")


class TestFormatContext:
    def test_numbered_lines(self, make_history):
        context = ContextAssembler(make_history(3)).collect_latest(2)
        assert format_context_lines(context) == "1. [u1] m1\n2. [u2] m2"

    def test_placeholder_when_empty(self):
        assert format_context_lines([]) == EMPTY_CONTEXT_PLACEHOLDER
