"""
Visit Dispatcher

Runs best-effort visit recording off the redirect's critical path.

Semantics:
- submit() never waits for the work in background mode
- failures are logged and dropped, never retried
- no cancellation: once dispatched, a task runs to completion or failure
- no ordering guarantee relative to later analytics reads

flush() is the synchronization point: tests call it before asserting on
analytics, and the application calls it on shutdown.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Set

logger = logging.getLogger(__name__)


class DispatchMode(Enum):
    """How submitted work is run"""
    BACKGROUND = "background"  # Fire-and-forget asyncio task
    INLINE = "inline"  # Awaited before submit() returns (deterministic tests)


class VisitDispatcher:
    """Fire-and-forget executor for visit recording."""

    def __init__(self, mode: DispatchMode = DispatchMode.BACKGROUND):
        self.mode = mode
        # Strong references; the event loop only keeps weak ones to tasks
        self._tasks: Set[asyncio.Task] = set()
        self.failed_count = 0

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def submit(self, func: Callable[..., Awaitable[Any]], *args: Any) -> None:
        """
        Dispatch ``func(*args)``.

        Background mode schedules it and returns immediately. Inline mode
        awaits it. Either way its exceptions never reach the caller.
        """
        if self.mode == DispatchMode.INLINE:
            await self._run(func, *args)
            return

        task = asyncio.create_task(self._run(func, *args))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def flush(self) -> None:
        """Wait until every task submitted so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _run(self, func: Callable[..., Awaitable[Any]], *args: Any) -> None:
        try:
            await func(*args)
        except Exception:
            self.failed_count += 1
            logger.exception("Background visit task %s%r failed", getattr(func, "__name__", func), args)
