"""
Throttled progress delivery.

The orchestrator reports every internal transition; the caller receives at
most one snapshot per interval. Updates arriving inside a window collapse to
the most recent one, which is delivered when the window elapses.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Union

from .models import ResearchProgress

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ResearchProgress], Union[Awaitable[None], None]]


class ProgressReporter:
    """Forwards progress snapshots to a callback through a single pending timer."""

    def __init__(
        self,
        callback: ProgressCallback | None,
        interval: float = 0.3,
    ) -> None:
        """
        Args:
            callback: Sync or async progress callback (None disables delivery)
            interval: Minimum seconds between deliveries; <= 0 delivers every update
        """
        self.callback = callback
        self.interval = interval
        self._latest: ResearchProgress | None = None
        self._pending = False
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._disposed = False
        self.delivered_count = 0

    @property
    def latest(self) -> ResearchProgress | None:
        return self._latest

    @property
    def disposed(self) -> bool:
        return self._disposed

    def update(self, snapshot: ResearchProgress) -> None:
        """Record a new snapshot, delivering it now or when the window closes."""
        if self._disposed:
            return

        self._latest = snapshot
        self._pending = True

        if self.interval <= 0:
            self._deliver()
            return

        if self._timer is None:
            loop = asyncio.get_running_loop()
            self._timer = loop.call_later(self.interval, self._on_timer)

    def flush(self) -> None:
        """Deliver the newest undelivered snapshot immediately."""
        self._cancel_timer()
        if not self._disposed:
            self._deliver()

    def dispose(self) -> None:
        """Stop all further delivery. Idempotent."""
        self._disposed = True
        self._pending = False
        self._cancel_timer()

    def _on_timer(self) -> None:
        self._timer = None
        if not self._disposed:
            self._deliver()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _deliver(self) -> None:
        if not self._pending or self._latest is None or self.callback is None:
            self._pending = False
            return

        self._pending = False
        snapshot = self._latest
        self.delivered_count += 1

        try:
            outcome = self.callback(snapshot)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")
            return

        if inspect.isawaitable(outcome):
            task = asyncio.ensure_future(outcome)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Progress callback failed: {error}")
