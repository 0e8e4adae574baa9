# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/3 15:02
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 串行请求队列：最小请求间隔 + 按缓存键去重
"""
import asyncio
import time
from contextlib import suppress
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from loguru import logger

from models import TranslationState

TaskFactory = Callable[[], Awaitable[Any]]
ErrorReporter = Callable[[str, BaseException], None]


@dataclass
class ScheduledTask:
    """一次排队的请求；同一键的重复调度共享同一个实例"""

    factory: TaskFactory
    key: Optional[str] = None
    state: TranslationState = TranslationState.QUEUED
    future: asyncio.Future = field(default_factory=lambda: asyncio.get_running_loop().create_future())
    dispatched_at: Optional[float] = None

    async def wait(self) -> Any:
        return await asyncio.shield(self.future)

    @property
    def done(self) -> bool:
        return self.future.done()


class RequestScheduler:
    """
    全局唯一的出站请求调度器

    - 单个工作协程按提交顺序依次执行任务，从不并行
    - 每次派发前等待，直到距离上一次派发开始至少 interval_ms
    - 任务失败会被捕获并上报，不会阻塞后续任务
    - 同一缓存键同时最多只有一个任务在排队或执行
    """

    def __init__(
        self,
        interval_ms: int,
        *,
        on_error: ErrorReporter | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._interval = max(0, interval_ms) / 1000
        self._on_error = on_error
        self._clock = clock

        self._queue: asyncio.Queue[ScheduledTask] | None = None
        self._worker: asyncio.Task | None = None
        self._pending: Dict[str, ScheduledTask] = {}
        self._last_dispatch_at: Optional[float] = None

    @property
    def interval_ms(self) -> int:
        return int(self._interval * 1000)

    def set_interval(self, interval_ms: int):
        self._interval = max(0, interval_ms) / 1000

    def schedule(self, key: str, factory: TaskFactory) -> ScheduledTask:
        """
        为缓存键登记并排队一个任务

        键已在 PendingSet 中时直接返回已有任务，不会重复入队。
        """
        if existing := self._pending.get(key):
            logger.debug(f"跳过重复请求: {key} ({existing.state.value})")
            return existing

        task = ScheduledTask(factory=factory, key=key)
        self._pending[key] = task
        self._enqueue(task)
        return task

    async def run(self, factory: TaskFactory) -> Any:
        """排队执行一个不去重的任务并等待结果，异常直接抛给调用方"""
        task = ScheduledTask(factory=factory)
        self._enqueue(task)
        return await task.wait()

    def state_of(self, key: str) -> TranslationState:
        if task := self._pending.get(key):
            return task.state
        return TranslationState.PENDING

    def pending_keys(self) -> List[str]:
        return list(self._pending.keys())

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    async def join(self):
        """等待当前队列中的任务全部结束"""
        if self._queue:
            await self._queue.join()

    async def close(self):
        if self._worker and not self._worker.done():
            self._worker.cancel()
            with suppress(asyncio.CancelledError):
                await self._worker
        self._worker = None
        self._drain()

    def _drain(self):
        """结束仍在排队的任务：标记为 FAILED、释放键并取消 future"""
        if self._queue is None:
            return
        dropped = 0
        while not self._queue.empty():
            task = self._queue.get_nowait()
            self._settle(task, TranslationState.FAILED)
            task.future.cancel()
            self._queue.task_done()
            dropped += 1
        if dropped:
            logger.debug(f"调度器已关闭，丢弃 {dropped} 个未派发的请求")

    def _enqueue(self, task: ScheduledTask):
        if self._queue is None:
            self._queue = asyncio.Queue()
        self._queue.put_nowait(task)
        self._ensure_worker()

    def _ensure_worker(self):
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._work(), name="request-scheduler")

    async def _work(self):
        while True:
            task = await self._queue.get()
            try:
                await self._dispatch(task)
            finally:
                self._queue.task_done()

    async def _wait_for_rate_limit(self):
        if self._last_dispatch_at is not None:
            while (wait := self._interval - (self._clock() - self._last_dispatch_at)) > 0:
                await asyncio.sleep(wait)
        self._last_dispatch_at = self._clock()

    async def _dispatch(self, task: ScheduledTask):
        await self._wait_for_rate_limit()
        task.dispatched_at = self._last_dispatch_at
        task.state = TranslationState.IN_FLIGHT

        try:
            result = await task.factory()
        except asyncio.CancelledError:
            self._settle(task, TranslationState.FAILED)
            task.future.cancel()
            raise
        except Exception as err:
            self._settle(task, TranslationState.FAILED)
            self._report(task, err)
            if not task.future.done():
                task.future.set_exception(err)
                if task.key is not None:
                    # 带键任务的失败已通过 on_error 上报，标记异常已读取
                    task.future.exception()
        else:
            self._settle(task, TranslationState.CACHED)
            if not task.future.done():
                task.future.set_result(result)

    def _settle(self, task: ScheduledTask, state: TranslationState):
        task.state = state
        if task.key is not None and self._pending.get(task.key) is task:
            del self._pending[task.key]

    def _report(self, task: ScheduledTask, err: BaseException):
        logger.error(f"请求任务失败 [{task.key or 'on-demand'}]: {err}")
        # 不带键的任务由调用方直接处理异常
        if task.key is not None and self._on_error:
            try:
                self._on_error(task.key, err)
            except Exception as report_err:
                logger.error(f"上报任务失败时出错: {report_err}")
