# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/3 10:02
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : Chat Completion 调用的异常类型
"""


class CompletionError(Exception):
    """Chat Completion 调用失败"""


class CompletionConfigError(CompletionError):
    """缺少接口地址或模型"""


class CompletionTransportError(CompletionError):
    """网络层失败"""


class CompletionTimeoutError(CompletionTransportError):
    """请求超时"""


class CompletionHTTPError(CompletionError):
    """服务商返回了非 2xx 状态码"""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP {status_code}: {body or 'unknown error'}")
        self.status_code = status_code
        self.body = body


class CompletionParseError(CompletionError):
    """响应体不是合法的 JSON"""


class CompletionEmptyError(CompletionError):
    """响应合法但没有可用的文本"""
