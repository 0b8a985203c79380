"""Tracked fire-and-forget coroutines.

Collaborator calls that the protocol does not wait on (error toasts,
external commands) still need a strong reference until they finish,
and their failures must end up in the log rather than vanish.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any

logger = logging.getLogger(__name__)


class BackgroundTasks:
    """Holds references to scheduled coroutines until they complete."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Future[Any]] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, awaitable: Awaitable[Any], *, name: str | None = None) -> asyncio.Future[Any]:
        """Schedule an awaitable on the running loop without awaiting it."""
        task = asyncio.ensure_future(awaitable)
        if name is not None and isinstance(task, asyncio.Task):
            task.set_name(name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Future[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            name = task.get_name() if isinstance(task, asyncio.Task) else repr(task)
            logger.error(
                f"Background task {name} failed: {exc}",
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    async def drain(self) -> None:
        """Wait until every scheduled task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
