"""Fire-and-forget persistence of streamed quiz questions.

Writes are dispatched as asyncio tasks so the streaming loop never waits on
storage. Every task is tracked twice: by the `BackgroundWriter` that issued
it (request scope) and in a process-wide set that keeps a strong reference
until the task finishes, so a write survives the request that started it
and can be drained on application shutdown.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from core.error_handler import structured_logger
from services.quiz.exceptions import PersistenceError


logger = logging.getLogger(__name__)

# Strong references to every in-flight write across all requests
_INFLIGHT_WRITES: set[asyncio.Task[None]] = set()


class BackgroundWriter:
    """Bounded set of background write tasks owned by one generation request.

    ``submit`` never blocks: the task is created immediately and waits on a
    semaphore for a write slot, so at most ``max_concurrency`` writes from
    this request hit storage at once.
    """

    def __init__(self, max_concurrency: int = 4) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._tasks: set[asyncio.Task[None]] = set()
        self.failures = 0

    @property
    def pending(self) -> int:
        """Number of writes submitted by this writer that have not finished."""
        return len(self._tasks)

    def submit(
        self,
        write: Callable[[], Awaitable[Any]],
        *,
        context: dict[str, Any] | None = None,
    ) -> asyncio.Task[None]:
        """Schedule ``write`` without awaiting it.

        ``context`` is attached to the failure log entry (quiz id, position).
        """
        task = asyncio.create_task(self._run(write, context or {}))
        self._tasks.add(task)
        _INFLIGHT_WRITES.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(_INFLIGHT_WRITES.discard)
        return task

    async def _run(
        self, write: Callable[[], Awaitable[Any]], context: dict[str, Any]
    ) -> None:
        async with self._semaphore:
            try:
                await write()
            except Exception as exc:
                self.failures += 1
                error = PersistenceError(str(exc) or exc.__class__.__name__)
                structured_logger.error(
                    "Failed to persist quiz question",
                    error_code=error.error_code,
                    error=error.message,
                    exception_type=exc.__class__.__name__,
                    **context,
                )

    async def join(self, timeout: float | None = None) -> bool:
        """Wait for this writer's outstanding writes.

        Returns True when all finished within ``timeout``.
        """
        return await _wait_for(set(self._tasks), timeout)


async def _wait_for(tasks: set[asyncio.Task[None]], timeout: float | None) -> bool:
    if not tasks:
        return True
    _, pending = await asyncio.wait(tasks, timeout=timeout)
    return not pending


def inflight_write_count() -> int:
    return len(_INFLIGHT_WRITES)


async def drain_inflight_writes(timeout: float | None = None) -> bool:
    """Wait for every outstanding question write in the process.

    Called from the application lifespan on shutdown. Writes still running
    after ``timeout`` are left alone and reported.
    """
    finished = await _wait_for(set(_INFLIGHT_WRITES), timeout)
    if not finished:
        logger.warning(
            "Shutdown with %d quiz question write(s) still in flight",
            len(_INFLIGHT_WRITES),
        )
    return finished
