"""Data models for buffered state values."""

from __future__ import annotations

import itertools
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Process-wide identity source; removal is by identity, never by value.
_ITEM_IDS = itertools.count(1)


class BufferedItem(BaseModel):
    """A value accepted into the buffer together with its visibility window."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any = Field(..., description="Opaque pushed value, compared with ==")
    min_duration: float = Field(..., description="Milliseconds the value must stay visible")
    timestamp: float = Field(..., description="Clock reading (ms) when the item was accepted")
    item_id: int = Field(default_factory=lambda: next(_ITEM_IDS), description="Unique item identity")

    @property
    def expires_at(self) -> float:
        return self.timestamp + self.min_duration
