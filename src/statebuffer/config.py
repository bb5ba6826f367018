"""Buffer configuration for statebuffer."""

from __future__ import annotations

import dataclasses
import os
from datetime import timedelta
from typing import Any

from statebuffer.exceptions import BufferConfigError
from statebuffer.policy import to_milliseconds


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class BufferConfig:
    """State buffer configuration.

    Parameters
    ----------
    default_min_duration : float, timedelta or None
        Minimum visible duration in milliseconds, used when ``push`` is
        called without an explicit duration. ``None`` means ``0``: a value
        is replaced as soon as a newer one arrives.
    remove_last_duplicated : bool
        If ``True``, pushing a value equal to the current head replaces the
        head instead of stacking a duplicate behind the new item.
    """

    default_min_duration: float | timedelta | None = None
    remove_last_duplicated: bool = False

    def __post_init__(self) -> None:
        duration = to_milliseconds(self.default_min_duration)
        if duration is not None and duration < 0:
            raise BufferConfigError(f"default_min_duration must be >= 0, got {duration}")
        # Normalise timedelta to milliseconds once; frozen needs object.__setattr__.
        object.__setattr__(self, "default_min_duration", duration)

    @classmethod
    def from_env(cls, **overrides: Any) -> BufferConfig:
        """Create configuration from environment variables.

        Reads ``STATEBUFFER_DEFAULT_MIN_DURATION`` (milliseconds) and
        ``STATEBUFFER_REMOVE_LAST_DUPLICATED``. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        BufferConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        duration_env = env.get("STATEBUFFER_DEFAULT_MIN_DURATION")
        if duration_env is not None and "default_min_duration" not in overrides:
            try:
                config_kwargs["default_min_duration"] = float(duration_env)
            except ValueError as exc:
                raise BufferConfigError(
                    f"STATEBUFFER_DEFAULT_MIN_DURATION is not a number: {duration_env!r}"
                ) from exc

        if "remove_last_duplicated" not in overrides:
            config_kwargs["remove_last_duplicated"] = _env_bool(
                env.get("STATEBUFFER_REMOVE_LAST_DUPLICATED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
