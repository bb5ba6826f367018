from __future__ import annotations

import logging

import pytest

from statebuffer._notifier import ChangeNotifier


def test_handlers_run_in_registration_order() -> None:
    notifier = ChangeNotifier()
    calls: list[str] = []
    notifier.register(lambda: calls.append("first"))
    notifier.register(lambda: calls.append("second"))

    notifier.notify()

    assert calls == ["first", "second"]


def test_register_twice_and_remove_unknown_are_noops() -> None:
    notifier = ChangeNotifier()
    calls: list[int] = []

    def handler() -> None:
        calls.append(1)

    notifier.register(handler)
    notifier.register(handler)
    notifier.remove(lambda: None)
    notifier.notify()

    assert calls == [1]
    assert len(notifier) == 1

    notifier.remove(handler)
    notifier.notify()
    assert calls == [1]


def test_handler_may_unregister_itself_during_notify() -> None:
    notifier = ChangeNotifier()
    calls: list[str] = []

    def once() -> None:
        calls.append("once")
        notifier.remove(once)

    notifier.register(once)
    notifier.register(lambda: calls.append("always"))

    notifier.notify()
    notifier.notify()

    assert calls == ["once", "always", "always"]


def test_failing_handler_does_not_stop_others(caplog: pytest.LogCaptureFixture) -> None:
    notifier = ChangeNotifier()
    calls: list[str] = []

    def broken() -> None:
        raise RuntimeError("render failed")

    notifier.register(broken)
    notifier.register(lambda: calls.append("ok"))

    with caplog.at_level(logging.DEBUG, logger="statebuffer._notifier"):
        notifier.notify()

    assert calls == ["ok"]
    assert "Change handler" in caplog.text
