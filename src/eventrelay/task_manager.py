"""Lifecycle tracking for the background tasks created by ``EventBus.send``."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

LOGGER = logging.getLogger(__name__)


class TaskManager:
    """Hold references to tracked and untracked background asyncio tasks.

    Tracked tasks are visible through ``pending_count`` and are awaited by
    ``drain()``. Untracked tasks are only kept alive until they finish so the
    event loop does not garbage-collect them mid-flight. Both kinds remove
    themselves when they complete.
    """

    def __init__(self) -> None:
        self._pending: set[asyncio.Task[Any]] = set()
        self._background: set[asyncio.Task[Any]] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def background_count(self) -> int:
        return len(self._background)

    def add(self, task: asyncio.Task[Any], *, tracked: bool = False) -> None:
        """Register a task; ``tracked`` tasks become visible to ``drain()``."""
        target = self._pending if tracked else self._background
        target.add(task)
        task.add_done_callback(target.discard)
        task.add_done_callback(self._log_task_exception)

    def _log_task_exception(self, task: asyncio.Task[Any]) -> None:
        """Log unhandled exceptions from background tasks so they are not silently lost."""
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.warning(
                "task.background.exception",
                extra={
                    "event": "task.background.exception",
                    "task": task.get_name(),
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )

    async def drain(self) -> int:
        """Wait for every currently tracked task to settle.

        Tasks added while the drain is in progress are left for the next
        call. Never raises for task failures; returns how many tasks were
        drained.
        """
        snapshot = list(self._pending)
        if not snapshot:
            return 0
        # wait() neither raises task errors nor cancels the tasks if the
        # caller is cancelled.
        await asyncio.wait(snapshot)
        self._pending.difference_update(snapshot)
        return len(snapshot)
