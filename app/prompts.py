# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/2 21:40
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 提示词模板
"""

SYSTEM_PROMPT_TRANSLATE = (
    "You are a precise conversation translator. Use context to disambiguate meaning, "
    "keep names/mentions/emoji, and return only translated message text. "
    "Do not include speaker names, labels, or bracket tags like [name]."
)

SYSTEM_PROMPT_REPLY = (
    "You are an assistant that writes natural chat replies based on conversation context. "
    "Keep tone consistent with context."
)

# 上下文中单条消息的格式
CONTEXT_LINE_TEMPLATE = "{index}. [{author}] {text}"

EMPTY_CONTEXT_PLACEHOLDER = "(No prior context)"

# 单条消息翻译的提示词模板
TRANSLATE_PROMPT_TEMPLATE = """目标语言：{target_language}
对话上下文：
{context_text}
待翻译内容：
{message_text}
只返回译文，不要解释，不要加说话人、括号标签、语言标签。"""

# 按上下文生成回复的提示词，各行按需拼接，空行会被丢弃
REPLY_PROMPT_HEADER = "Generate one chat reply from this context."
REPLY_PROMPT_STYLE_PRESET = "Style preset: {label}"
REPLY_PROMPT_STYLE_GUIDANCE = "Style guidance: {instruction}"
REPLY_PROMPT_ANTI_TEMPLATE = "Avoid repetitive templates and vary wording/sentence openings."
REPLY_PROMPT_VARIATION = "Variation token: {token} (do not output this token)."
REPLY_PROMPT_CONTEXT = "Context:\n{context_text}"
REPLY_PROMPT_EXTRA = "Extra instruction: {instruction}"
REPLY_PROMPT_FOOTER = "Output only reply text."
