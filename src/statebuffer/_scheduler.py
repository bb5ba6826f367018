"""Deferred removal scheduling.

Owns:
- the timer abstraction (asyncio by default, injectable for tests)
- the removal queue: one task per retained head, ordered by deadline,
  with a single armed timer for the earliest task
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from collections.abc import Callable, Collection
from dataclasses import dataclass, field
from typing import Protocol

_logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle | None:
        """Run *callback* once after *delay_ms* milliseconds."""
        ...


class AsyncioScheduler:
    """Schedule callbacks on an asyncio event loop.

    Without an explicit loop the running loop is looked up on every call, so
    a buffer can be created before the loop starts.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle | None:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                _logger.debug("No running event loop; deferred removal waits for the next push")
                return None
        return loop.call_later(delay_ms / 1000.0, callback)


@dataclass(order=True)
class _RemovalTask:
    deadline: float
    seq: int
    item_id: int = field(compare=False)


class RemovalQueue:
    """Priority queue of ``(deadline, item)`` removal tasks.

    Tasks whose target has left the store are pruned (and their timer
    cancelled) instead of firing against whatever occupies the store later.
    """

    def __init__(
        self,
        *,
        scheduler: Scheduler,
        clock: Callable[[], float],
        on_due: Callable[[frozenset[int]], None],
    ) -> None:
        self._scheduler = scheduler
        self._clock = clock
        self._on_due = on_due
        self._tasks: list[_RemovalTask] = []
        self._seq = itertools.count()
        self._armed: _RemovalTask | None = None
        self._handle: TimerHandle | None = None

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, item_id: object) -> bool:
        return any(task.item_id == item_id for task in self._tasks)

    def schedule(self, item_id: int, deadline: float) -> None:
        if item_id in self:
            # Already queued; a timer may still be missing if no loop was running.
            self._arm()
            return
        heapq.heappush(self._tasks, _RemovalTask(deadline, next(self._seq), item_id))
        _logger.debug("Scheduled removal of item=%d at deadline=%.1f", item_id, deadline)
        self._arm()

    def prune(self, live_ids: Collection[int]) -> None:
        """Drop tasks whose target item is no longer buffered."""
        kept = [task for task in self._tasks if task.item_id in live_ids]
        if len(kept) == len(self._tasks):
            return
        _logger.debug("Cancelled %d removal task(s) for items already gone", len(self._tasks) - len(kept))
        heapq.heapify(kept)
        self._tasks = kept
        self._arm()

    def clear(self) -> None:
        self._tasks = []
        self._disarm()

    def _disarm(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._armed = None

    def _arm(self) -> None:
        head = self._tasks[0] if self._tasks else None
        if head is self._armed and (head is None or self._handle is not None):
            return
        self._disarm()
        if head is None:
            return
        delay = max(0.0, head.deadline - self._clock())
        self._handle = self._scheduler.call_later(delay, self._fire)
        if self._handle is not None:
            self._armed = head

    def _fire(self) -> None:
        self._handle = None
        self._armed = None
        if not self._tasks:
            return
        cutoff = max(self._clock(), self._tasks[0].deadline)
        due: set[int] = set()
        while self._tasks and self._tasks[0].deadline <= cutoff:
            due.add(heapq.heappop(self._tasks).item_id)
        self._on_due(frozenset(due))
        self._arm()
