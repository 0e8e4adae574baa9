# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/3 14:05
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 翻译流水线的异常类型
"""


class TranslatorError(Exception):
    """翻译 / 回复流水线错误"""


class ReplyConfigError(TranslatorError):
    """生成回复前没有配置接口地址或模型"""


class EmptyContextError(TranslatorError):
    """没有可用的消息上下文"""


class CompositionError(TranslatorError):
    """回复无法写入输入框"""
