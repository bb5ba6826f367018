from __future__ import annotations

from datetime import timedelta

import pytest

from statebuffer import BufferConfig, BufferConfigError, StateBufferError


def test_defaults() -> None:
    config = BufferConfig()

    assert config.default_min_duration is None
    assert config.remove_last_duplicated is False


def test_timedelta_default_is_normalised_to_milliseconds() -> None:
    assert BufferConfig(default_min_duration=timedelta(seconds=1.5)).default_min_duration == 1500.0


def test_negative_default_duration_rejected() -> None:
    with pytest.raises(BufferConfigError):
        BufferConfig(default_min_duration=-1)


def test_config_error_is_package_error() -> None:
    assert issubclass(BufferConfigError, StateBufferError)


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STATEBUFFER_DEFAULT_MIN_DURATION", "750")
    monkeypatch.setenv("STATEBUFFER_REMOVE_LAST_DUPLICATED", "yes")

    config = BufferConfig.from_env()

    assert config.default_min_duration == 750.0
    assert config.remove_last_duplicated is True


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STATEBUFFER_DEFAULT_MIN_DURATION", "750")
    monkeypatch.setenv("STATEBUFFER_REMOVE_LAST_DUPLICATED", "on")

    config = BufferConfig.from_env(default_min_duration=100, remove_last_duplicated=False)

    assert config.default_min_duration == 100.0
    assert config.remove_last_duplicated is False


def test_from_env_unknown_bool_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("STATEBUFFER_DEFAULT_MIN_DURATION", raising=False)
    monkeypatch.setenv("STATEBUFFER_REMOVE_LAST_DUPLICATED", "maybe")

    config = BufferConfig.from_env()

    assert config.default_min_duration is None
    assert config.remove_last_duplicated is False


def test_from_env_rejects_non_numeric_duration(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STATEBUFFER_DEFAULT_MIN_DURATION", "soon")

    with pytest.raises(BufferConfigError):
        BufferConfig.from_env()
