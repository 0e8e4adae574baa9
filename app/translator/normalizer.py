# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/3 14:12
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 清理模型输出中的标签、代码围栏与说话人前缀
"""
import re

from utils import sanitize_text

# 模型偶尔会把整段输出包进 ``` 代码围栏
_FENCED_BLOCK = re.compile(r"^```(?:[\w+-]+(?=\s))?\s*(.*?)\s*```$", re.DOTALL)

_LEADING_LABEL = re.compile(
    r"^(?:translated text|translation|译文|翻译)\s*[:：]\s*", re.IGNORECASE
)

_BRACKET_TAGS = re.compile(r"^(?:\[[^\]\r\n]{1,40}\]\s*)+")


def _strip_once(text: str, author: str) -> str:
    cleaned = _FENCED_BLOCK.sub(r"\1", text).strip()
    cleaned = _LEADING_LABEL.sub("", cleaned)
    cleaned = _BRACKET_TAGS.sub("", cleaned)
    if author:
        escaped = re.escape(author)
        cleaned = re.sub(rf"^{escaped}\s*[:：-]\s*", "", cleaned, flags=re.IGNORECASE)
        cleaned = re.sub(rf"^\[{escaped}\]\s*", "", cleaned, flags=re.IGNORECASE)
    return sanitize_text(cleaned)


def normalize(text: str | None, author: str | None = None) -> str:
    """
    清理模型输出

    折叠空白后依次剥离整段代码围栏、`译文:` 一类的标签行、开头的 `[tag]`，
    以及给定作者时的 `Author:` / `[Author]` 前缀，直到没有可剥离的内容。
    剥离后为空时返回剥离前的文本。
    """
    original = sanitize_text(text)
    author = sanitize_text(author)

    cleaned = original
    # 反复剥离直到不再变化，保证 normalize 幂等；不要改回只剥离一次
    while True:
        stripped = _strip_once(cleaned, author)
        if stripped == cleaned:
            break
        cleaned = stripped

    return cleaned or original
