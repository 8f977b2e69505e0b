"""In-memory lock store for tests and single-process deployments."""

from __future__ import annotations

import asyncio
from typing import Dict, Optional, Tuple

from sessionlock.core.clock import Clock, SystemClock


class InMemoryLockStore:
    """Process-local ``LockStore`` with TTL expiry driven by a ``Clock``."""

    def __init__(self, *, clock: Optional[Clock] = None) -> None:
        self._clock = clock or SystemClock()
        self._entries: Dict[str, Tuple[str, float]] = {}  # key -> (value, expires_at_ms)
        self._lock = asyncio.Lock()

    def _live_value(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock.now_ms() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set_if_not_exists(self, key: str, value: str, ttl_ms: int) -> bool:
        async with self._lock:
            if self._live_value(key) is not None:
                return False
            self._entries[key] = (value, self._clock.now_ms() + ttl_ms)
            return True

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            return self._live_value(key)

    async def delete(self, key: str) -> int:
        async with self._lock:
            if self._live_value(key) is None:
                return 0
            del self._entries[key]
            return 1

    async def compare_and_delete(self, key: str, value: str) -> bool:
        async with self._lock:
            if self._live_value(key) != value:
                return False
            del self._entries[key]
            return True
