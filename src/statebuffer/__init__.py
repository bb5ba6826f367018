"""statebuffer - keep every state value visible for a minimum duration."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("state-transition-buffer")
except PackageNotFoundError:
    __version__ = "0+local"
from statebuffer._scheduler import AsyncioScheduler, Scheduler, TimerHandle
from statebuffer.buffer import StateBuffer, TransitionBuffer
from statebuffer.config import BufferConfig
from statebuffer.exceptions import BufferConfigError, StateBufferError
from statebuffer.models import BufferedItem

__all__ = [
    "__version__",
    "AsyncioScheduler",
    "BufferConfig",
    "BufferConfigError",
    "BufferedItem",
    "Scheduler",
    "StateBuffer",
    "StateBufferError",
    "TimerHandle",
    "TransitionBuffer",
]
