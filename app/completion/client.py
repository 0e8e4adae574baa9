# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/3 10:21
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : OpenAI 兼容的 Chat Completion 客户端
"""
from typing import List

import httpx
from httpx import AsyncClient
from loguru import logger
from pydantic import ValidationError

from settings import settings
from storage.preferences import TranslatorPreferences
from .errors import (
    CompletionConfigError,
    CompletionTransportError,
    CompletionTimeoutError,
    CompletionHTTPError,
    CompletionParseError,
    CompletionEmptyError,
)
from .models import ChatMessage, ChatCompletionPayload, ChatCompletionResponse

ERROR_BODY_LIMIT = 200


class CompletionClient:
    def __init__(
        self,
        timeout: float = settings.COMPLETION_REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = AsyncClient(timeout=timeout, transport=transport)

    async def request_completion(
        self, messages: List[ChatMessage], preferences: TranslatorPreferences
    ) -> str:
        """
        发起一次非流式的 Chat Completion 请求并提取文本

        Args:
            messages: 对话消息列表
            preferences: 提供接口地址、模型、API Key 与温度参数

        Returns:
            第一个 choice 的文本内容

        Raises:
            CompletionError: 配置缺失、网络错误、非 2xx 状态码、响应无法解析或为空
        """
        if not preferences.api_endpoint or not preferences.model:
            raise CompletionConfigError("缺少接口地址或模型")

        payload = ChatCompletionPayload(
            model=preferences.model, messages=messages, temperature=preferences.temperature
        )
        headers = {"Content-Type": "application/json"}
        if preferences.api_key:
            headers["Authorization"] = f"Bearer {preferences.api_key}"

        try:
            response = await self._client.post(
                preferences.api_endpoint, json=payload.model_dump(mode="json"), headers=headers
            )
        except httpx.TimeoutException as err:
            raise CompletionTimeoutError("请求超时") from err
        except httpx.TransportError as err:
            raise CompletionTransportError(f"网络错误: {err}") from err

        if not response.is_success:
            raise CompletionHTTPError(response.status_code, response.text[:ERROR_BODY_LIMIT])

        try:
            result = response.json()
        except ValueError as err:
            raise CompletionParseError("接口返回的 JSON 无效") from err

        text = ""
        if isinstance(result, dict):
            try:
                text = ChatCompletionResponse.model_validate(result).extract_text()
            except ValidationError as err:
                logger.debug(f"无法识别的 Chat Completion 响应结构 - {err}")

        if not text:
            raise CompletionEmptyError("模型返回为空")

        logger.debug(f"completion: model={preferences.model} chars={len(text)}")
        return text

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
