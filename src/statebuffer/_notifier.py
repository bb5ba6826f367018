"""Change notification registry."""

from __future__ import annotations

import logging
from collections.abc import Callable

_logger = logging.getLogger(__name__)

ChangeHandler = Callable[[], None]


class ChangeNotifier:
    """Ordered set of zero-argument handlers called after every commit."""

    def __init__(self) -> None:
        # dict keeps registration order and makes re-registration a no-op.
        self._handlers: dict[ChangeHandler, None] = {}

    def __len__(self) -> int:
        return len(self._handlers)

    def register(self, handler: ChangeHandler) -> None:
        self._handlers.setdefault(handler, None)

    def remove(self, handler: ChangeHandler) -> None:
        self._handlers.pop(handler, None)

    def notify(self) -> None:
        for handler in list(self._handlers):
            try:
                handler()
            except Exception:
                _logger.debug("Change handler %r failed", handler, exc_info=True)
