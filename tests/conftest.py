# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/5 10:00
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : Shared fixtures for translator tests
"""
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from storage import MemoryStore, TranslatorPreferences
from translator import ChatHistory, RequestScheduler, TranslationCache, TranslationPipeline


def build_history(count: int, channel_id: str = "10") -> ChatHistory:
    history = ChatHistory(channel_id, max_messages=500)
    for i in range(count):
        history.append(str(i), f"u{i}", f"m{i}")
    return history


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def preferences():
    return TranslatorPreferences(
        api_endpoint="https://api.test/v1/chat/completions",
        api_key="sk-test",
        model="gpt",
        target_language="EN",
    )


@pytest.fixture
def completion_client():
    client = AsyncMock()
    client.request_completion.return_value = "译文: Hola"
    return client


@pytest_asyncio.fixture
async def pipeline(store, preferences, completion_client):
    statuses = []
    pipeline = TranslationPipeline(
        store,
        preferences,
        client=completion_client,
        cache=TranslationCache(store, capacity=10, debounce_seconds=0.01),
        on_status=lambda message, is_error: statuses.append((message, is_error)),
    )
    # 测试中不需要真实的请求间隔
    pipeline.scheduler.set_interval(0)
    pipeline.statuses = statuses
    yield pipeline
    await pipeline.close()


@pytest_asyncio.fixture
async def scheduler():
    scheduler = RequestScheduler(0)
    yield scheduler
    await scheduler.close()


@pytest.fixture
def make_history():
    return build_history
