"""Minimum-duration state buffer.

Every pushed value stays visible for at least its minimum duration, even
when newer values arrive in the meantime. Typical use is a status line
("connecting..." -> "connected" -> "connection lost") that should not
flicker through transitions faster than a user can read them::

    status = StateBuffer(default_min_duration=1000, remove_last_duplicated=True)
    status.register_change_handler(lambda: render(status.first))
    status.push("connecting...", 500)
    status.push("connected", 2000)
    status.push()  # only expire, nothing new to show
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Generic, TypeVar

from statebuffer._notifier import ChangeHandler, ChangeNotifier
from statebuffer._scheduler import AsyncioScheduler, RemovalQueue, Scheduler
from statebuffer.config import BufferConfig
from statebuffer.models import BufferedItem
from statebuffer.policy import duration_left, is_expired, resolve_min_duration

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _now_ms() -> float:
    return time.time() * 1000.0


class StateBuffer(Generic[T]):
    """Buffer of state values, newest first.

    The store is an immutable tuple replaced on every mutation, so change
    handlers only ever see committed states. ``None`` is reserved as the
    "nothing to push" marker and is never buffered.

    Values are compared with ``==`` for duplicate suppression. Cyclic
    containers make ``==`` recurse without bound; that is left to Python.
    """

    def __init__(
        self,
        config: BufferConfig | None = None,
        *,
        default_min_duration: float | timedelta | None = None,
        remove_last_duplicated: bool | None = None,
        clock: Callable[[], float] = _now_ms,
        scheduler: Scheduler | None = None,
    ) -> None:
        if config is None:
            config = BufferConfig(
                default_min_duration=default_min_duration,
                remove_last_duplicated=bool(remove_last_duplicated),
            )
        elif default_min_duration is not None or remove_last_duplicated is not None:
            raise TypeError("pass either config or keyword options, not both")
        self._config = config
        self._clock = clock
        self._items: tuple[BufferedItem, ...] = ()
        self._first: T | None = None
        self._last: T | None = None
        self._notifier = ChangeNotifier()
        self._removals = RemovalQueue(
            scheduler=scheduler if scheduler is not None else AsyncioScheduler(),
            clock=clock,
            on_due=self._remove_due,
        )

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get()!r})"

    @property
    def config(self) -> BufferConfig:
        return self._config

    @property
    def items(self) -> tuple[BufferedItem, ...]:
        """Buffered items with their durations and timestamps, newest first."""
        return self._items

    @property
    def first(self) -> T | None:
        """The most recently accepted value still buffered."""
        return self._first

    @property
    def last(self) -> T | None:
        """The oldest value still buffered: what a UI should display now."""
        return self._last

    def get(self) -> list[T]:
        """Buffered values, newest first."""
        return [item.value for item in self._items]

    def size(self) -> int:
        """Number of buffered items."""
        return len(self._items)

    def register_change_handler(self, handler: ChangeHandler) -> None:
        """Call *handler* with no arguments after every change, in registration order."""
        self._notifier.register(handler)

    def remove_change_handler(self, handler: ChangeHandler) -> None:
        """Stop calling *handler*; unknown handlers are ignored."""
        self._notifier.remove(handler)

    def push(self, value: T | None = None, min_duration: float | timedelta | None = None) -> None:
        """Push a new value, or just expire old ones when *value* is ``None``.

        Parameters
        ----------
        value : T or None
            New state value. ``None`` pushes nothing but still runs expiry.
        min_duration : float, timedelta or None
            Milliseconds the value must stay visible. Falls back to
            ``config.default_min_duration``, then ``0``.
        """
        now = self._clock()
        duration = resolve_min_duration(min_duration, self._config.default_min_duration)

        items = self._items
        if value is not None and self._config.remove_last_duplicated and items and items[0].value == value:
            _logger.debug("Replacing duplicated head item=%d", items[0].item_id)
            items = items[1:]

        retained = tuple(item for item in items if not is_expired(item, now))
        if len(retained) != len(items):
            _logger.debug("Expired %d buffered item(s)", len(items) - len(retained))

        # The previous newest item must still leave on time if nobody pushes again.
        if retained:
            head = retained[0]
            _logger.debug("Retaining item=%d for another %.0f ms", head.item_id, duration_left(head, now))
            self._removals.schedule(head.item_id, head.expires_at)

        if value is not None:
            item = BufferedItem(value=value, min_duration=duration, timestamp=self._clock())
            retained = (item, *retained)

        self._commit(retained)

    def close(self) -> None:
        """Cancel pending deferred removals; lazy expiry on push still applies."""
        self._removals.clear()

    def _remove_due(self, item_ids: frozenset[int]) -> None:
        _logger.debug("Deferred removal of item(s) %s", sorted(item_ids))
        self._commit(tuple(item for item in self._items if item.item_id not in item_ids))

    def _commit(self, items: tuple[BufferedItem, ...]) -> None:
        self._items = items
        self._removals.prune({item.item_id for item in items})
        self._first = items[0].value if items else None
        self._last = items[-1].value if items else None
        self._notifier.notify()


TransitionBuffer = StateBuffer
