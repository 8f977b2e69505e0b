from __future__ import annotations

import asyncio
from typing import Any, List, Optional, Sequence, Tuple

import pytest

from sessionlock.core.memory import InMemoryLockStore


class ManualClock:
    """Virtual millisecond clock; sleeping advances time instantly."""

    def __init__(self, start_ms: float = 0) -> None:
        self.now = start_ms
        self.sleeps: List[float] = []

    def now_ms(self) -> float:
        return self.now

    async def sleep_ms(self, ms: float) -> None:
        self.sleeps.append(ms)
        self.now += ms
        await asyncio.sleep(0)

    def advance(self, ms: float) -> None:
        self.now += ms


class RecordingStore:
    """In-memory store that records calls and can script conditional-set outcomes."""

    def __init__(
        self,
        *,
        clock: ManualClock,
        set_results: Optional[Sequence[bool]] = None,
        fail_with: Optional[BaseException] = None,
    ) -> None:
        self.inner = InMemoryLockStore(clock=clock)
        self.calls: List[Tuple[Any, ...]] = []
        self._set_results = list(set_results or [])
        self.fail_with = fail_with

    @property
    def set_calls(self) -> List[Tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == "set"]

    async def set_if_not_exists(self, key: str, value: str, ttl_ms: int) -> bool:
        self.calls.append(("set", key, value, ttl_ms))
        if self.fail_with is not None:
            raise self.fail_with
        if self._set_results:
            if not self._set_results.pop(0):
                return False
        return await self.inner.set_if_not_exists(key, value, ttl_ms)

    async def get(self, key: str) -> Optional[str]:
        self.calls.append(("get", key))
        return await self.inner.get(key)

    async def delete(self, key: str) -> int:
        self.calls.append(("delete", key))
        return await self.inner.delete(key)

    async def compare_and_delete(self, key: str, value: str) -> bool:
        self.calls.append(("compare_and_delete", key, value))
        return await self.inner.compare_and_delete(key, value)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()
