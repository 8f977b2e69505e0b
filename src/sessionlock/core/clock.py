"""Time source used by the acquisition loop."""

from __future__ import annotations

import asyncio
import time
from typing import Protocol


class Clock(Protocol):
    """Monotonic millisecond clock with a cooperative sleep."""

    def now_ms(self) -> float: ...

    async def sleep_ms(self, ms: float) -> None: ...


class SystemClock:
    """Wall-clock implementation backed by ``time.monotonic`` and ``asyncio.sleep``."""

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0

    async def sleep_ms(self, ms: float) -> None:
        await asyncio.sleep(ms / 1000.0)
