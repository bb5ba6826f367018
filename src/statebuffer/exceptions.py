"""Custom exception hierarchy for statebuffer."""

from __future__ import annotations


class StateBufferError(Exception):
    """Base exception for all statebuffer errors."""


class BufferConfigError(StateBufferError):
    """Invalid or missing configuration."""
