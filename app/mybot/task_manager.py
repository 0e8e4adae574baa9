# -*- coding: utf-8 -*-
"""
Background task registry so bot handlers never block the update loop
"""
import asyncio
import functools
from contextlib import suppress
from typing import Set, Callable

from loguru import logger

_active_tasks: Set[asyncio.Task] = set()


def get_active_tasks_count() -> int:
    return len(_active_tasks)


def non_blocking_handler(handler_name: str = "unknown"):
    """
    Run a bot handler as a background task.

    Usage:
        @non_blocking_handler("reply_command")
        async def reply_command(update, context):
            ...
    """

    def decorator(handler_func: Callable):
        @functools.wraps(handler_func)
        async def wrapper(update, context):
            task = asyncio.create_task(
                _execute_handler_task(handler_func, update, context, handler_name)
            )
            # Hold a reference until the task finishes
            _active_tasks.add(task)
            task.add_done_callback(_active_tasks.discard)
            logger.debug(f"Started {handler_name} task (Active tasks: {len(_active_tasks)})")

        return wrapper

    return decorator


async def _execute_handler_task(handler_func: Callable, update, context, handler_name: str):
    try:
        await handler_func(update, context)
        logger.debug(f"Completed {handler_name} task")
    except Exception as e:
        logger.exception(f"Error in {handler_name} handler: {e}")

        with suppress(Exception):
            if update and update.effective_chat:
                await context.bot.send_message(
                    chat_id=update.effective_chat.id,
                    text="❌ 处理请求时发生错误，请稍后重试",
                    reply_to_message_id=(
                        update.effective_message.message_id if update.effective_message else None
                    ),
                )


async def wait_for_all_tasks(timeout: float = 30.0) -> bool:
    """
    Wait for all active handler tasks to complete, for graceful shutdown.

    Returns:
        True if all tasks completed, False if timeout occurred
    """
    if not _active_tasks:
        return True

    logger.info(f"Waiting for {len(_active_tasks)} active tasks to complete...")
    try:
        await asyncio.wait_for(
            asyncio.gather(*_active_tasks, return_exceptions=True), timeout=timeout
        )
        return True
    except asyncio.TimeoutError:
        logger.warning(
            f"Timeout waiting for tasks to complete, {len(_active_tasks)} tasks still running"
        )
        return False
