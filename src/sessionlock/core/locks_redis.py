"""Redis-backed lock store using SET NX PX semantics."""

from __future__ import annotations

from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from .errors import StoreUnavailableError
from .locks import SessionLockManager
from .settings import LockSettings


_COMPARE_AND_DELETE = """
if redis.call('get', KEYS[1]) == ARGV[1] then
    return redis.call('del', KEYS[1])
else
    return 0
end
"""

_UNAVAILABLE = (RedisConnectionError, RedisTimeoutError)


def _decode(value: object) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


class RedisLockStore:
    """Adapts ``redis.asyncio.Redis`` replies to the strict ``LockStore`` contract."""

    def __init__(self, redis: Redis) -> None:
        self._redis = redis

    @classmethod
    def from_url(cls, url: str) -> "RedisLockStore":
        return cls(Redis.from_url(url))

    async def set_if_not_exists(self, key: str, value: str, ttl_ms: int) -> bool:
        try:
            # redis-py returns True on success and None when NX blocks the write
            reply = await self._redis.set(key, value, px=ttl_ms, nx=True)
        except _UNAVAILABLE as exc:
            raise StoreUnavailableError(f"Redis SET failed for {key}") from exc
        return bool(reply)

    async def get(self, key: str) -> Optional[str]:
        try:
            reply = await self._redis.get(key)
        except _UNAVAILABLE as exc:
            raise StoreUnavailableError(f"Redis GET failed for {key}") from exc
        return _decode(reply)

    async def delete(self, key: str) -> int:
        try:
            return int(await self._redis.delete(key))
        except _UNAVAILABLE as exc:
            raise StoreUnavailableError(f"Redis DEL failed for {key}") from exc

    async def compare_and_delete(self, key: str, value: str) -> bool:
        try:
            removed = await self._redis.eval(_COMPARE_AND_DELETE, 1, key, value)
        except _UNAVAILABLE as exc:
            raise StoreUnavailableError(f"Redis compare-and-delete failed for {key}") from exc
        return bool(removed)

    async def close(self) -> None:
        await self._redis.aclose()


def build_lock_manager(settings: Optional[LockSettings] = None) -> SessionLockManager:
    """Wire a ``SessionLockManager`` to the Redis instance named in ``settings``."""
    settings = settings or LockSettings.from_env()
    store = RedisLockStore.from_url(settings.redis_url)
    return SessionLockManager(store, atomic_release=settings.atomic_release)
