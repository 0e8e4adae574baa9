# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/3 14:30
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 有界的 LRU 翻译缓存，防抖持久化
"""
import asyncio
import json
from collections import OrderedDict
from typing import Callable, Dict, List, Optional

from loguru import logger

from settings import settings
from storage.crud import PersistentStore

CACHE_KEY = "ai_translator_cache_v1"


class DebouncedAction:
    """
    可取消的延迟动作

    安静窗口内的多次 trigger 只会在窗口结束后执行一次 action。
    没有运行中的事件循环时立即执行。
    """

    def __init__(self, delay: float, action: Callable[[], None]):
        self.delay = delay
        self._action = action
        self._handle: Optional[asyncio.TimerHandle] = None
        self.dirty = False

    def trigger(self):
        self.dirty = True
        self.cancel()

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.fire()
            return

        self._handle = loop.call_later(self.delay, self.fire)

    def cancel(self):
        if self._handle:
            self._handle.cancel()
            self._handle = None

    def fire(self):
        self._handle = None
        if not self.dirty:
            return
        self.dirty = False
        try:
            self._action()
        except Exception as err:
            logger.error(f"延迟写入失败: {err}")

    @property
    def scheduled(self) -> bool:
        return self._handle is not None


class TranslationCache:
    def __init__(
        self,
        store: PersistentStore,
        capacity: int,
        debounce_seconds: float = settings.CACHE_SAVE_DEBOUNCE_SECONDS,
    ):
        self._store = store
        self._capacity = max(1, int(capacity))
        self._entries: OrderedDict[str, str] = OrderedDict()
        self._persist = DebouncedAction(debounce_seconds, self._write_snapshot)

    @property
    def capacity(self) -> int:
        return self._capacity

    def load(self) -> "TranslationCache":
        """从持久化存储恢复，存储顺序即最近使用顺序（最旧在前）"""
        self._entries = OrderedDict(self._read_snapshot())
        self._trim()
        logger.debug(f"已加载翻译缓存 {len(self._entries)} 条")
        return self

    def get(self, key: str) -> Optional[str]:
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def set(self, key: str, value: str):
        self._entries[key] = value
        self._entries.move_to_end(key)
        self._trim()
        self._persist.trigger()

    def clear(self):
        self._entries.clear()
        self._persist.cancel()
        self._persist.dirty = False
        self._write_snapshot()

    def resize(self, capacity: int):
        self._capacity = max(1, int(capacity))
        if self._trim():
            self._persist.trigger()

    def flush(self):
        """立即写入尚未落盘的修改"""
        self._persist.cancel()
        self._persist.fire()

    def size(self) -> int:
        return len(self._entries)

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def snapshot(self) -> Dict[str, str]:
        return dict(self._entries)

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key: str):
        return key in self._entries

    def _trim(self) -> int:
        evicted = 0
        while len(self._entries) > self._capacity:
            self._entries.popitem(last=False)
            evicted += 1
        return evicted

    def _read_snapshot(self) -> Dict[str, str]:
        try:
            raw = self._store.get(CACHE_KEY)
        except Exception as err:
            logger.warning(f"读取翻译缓存失败，已重置为空 - {err}")
            return {}

        if not raw:
            return {}

        try:
            parsed = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("翻译缓存数据损坏，已重置为空")
            return {}

        if not isinstance(parsed, dict):
            logger.warning("翻译缓存数据格式错误，已重置为空")
            return {}

        return {k: v for k, v in parsed.items() if isinstance(v, str)}

    def _write_snapshot(self):
        self._store.set(CACHE_KEY, json.dumps(self._entries, ensure_ascii=False))
