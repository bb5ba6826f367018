#!/usr/bin/env python3
"""Replay a flickering connection status through a StateBuffer.

Usage
-----
    python scripts/demo_connection_status.py
    python scripts/demo_connection_status.py --min-duration 800 --dedup -v
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from statebuffer import BufferConfig, StateBuffer  # noqa: E402

# (seconds after start, raw status); None only expires.
RAW_EVENTS: list[tuple[float, str | None]] = [
    (0.00, "connecting..."),
    (0.05, "connected"),
    (0.10, "connection lost"),
    (0.12, "re-connecting..."),
    (0.15, "re-connecting..."),
    (0.30, "connected"),
    (2.50, None),
]


async def run(config: BufferConfig) -> None:
    status: StateBuffer[str] = StateBuffer(config)
    started = time.monotonic()

    def render() -> None:
        elapsed = time.monotonic() - started
        print(f"  {elapsed:6.3f}s  showing={status.last!s:<18} buffered={status.get()}")

    status.register_change_handler(render)

    for at, raw in RAW_EVENTS:
        await asyncio.sleep(max(0.0, at - (time.monotonic() - started)))
        status.push(raw)

    status.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Connection status buffering demo")
    parser.add_argument(
        "--min-duration",
        type=float,
        default=None,
        help="Default minimum duration (ms); falls back to STATEBUFFER_DEFAULT_MIN_DURATION",
    )
    parser.add_argument("--dedup", action="store_true", default=None, help="Replace a duplicated head instead of stacking it")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.min_duration is not None:
        overrides["default_min_duration"] = args.min_duration
    if args.dedup is not None:
        overrides["remove_last_duplicated"] = args.dedup
    config = BufferConfig.from_env(**overrides)
    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
