"""CLI entrypoint that races concurrent workers for a single session lock."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from sessionlock.core.locks import LockStore, SessionLockManager
from sessionlock.core.locks_redis import RedisLockStore
from sessionlock.core.memory import InMemoryLockStore
from sessionlock.core.settings import LockSettings
from sessionlock.utils.logging import get_logger


logger = get_logger("ContentionCLI")


class _Stats:
    def __init__(self) -> None:
        self.holders = 0
        self.max_holders = 0
        self.acquired = 0
        self.rejected = 0


async def _worker(
    manager: SessionLockManager,
    stats: _Stats,
    *,
    session_id: str,
    settings: LockSettings,
    hold_ms: int,
) -> None:
    handle = await manager.acquire(
        session_id,
        ttl_ms=settings.ttl_ms,
        wait_ms=settings.wait_ms,
        retry_ms=settings.retry_ms,
    )
    if handle is None:
        stats.rejected += 1
        return
    async with handle:
        stats.acquired += 1
        stats.holders += 1
        stats.max_holders = max(stats.max_holders, stats.holders)
        await asyncio.sleep(hold_ms / 1000)
        stats.holders -= 1


async def main() -> None:
    parser = argparse.ArgumentParser(description="Race concurrent acquirers for one session id.")
    parser.add_argument("--config", type=Path, default=None, help="Optional lock settings YAML")
    parser.add_argument("--backend", choices=("memory", "redis"), default="memory")
    parser.add_argument("--session-id", default="session-id-1")
    parser.add_argument("--workers", type=int, default=20)
    parser.add_argument("--hold-ms", type=int, default=25, help="Time each winner holds the lock")
    args = parser.parse_args()

    settings = LockSettings.from_file(args.config) if args.config else LockSettings.from_env()
    store: LockStore
    if args.backend == "redis":
        store = RedisLockStore.from_url(settings.redis_url)
    else:
        store = InMemoryLockStore()
    manager = SessionLockManager(store, atomic_release=settings.atomic_release)

    stats = _Stats()
    logger.info(
        "Starting %d workers on %s (ttl=%dms wait=%dms retry=%dms)",
        args.workers,
        args.session_id,
        settings.ttl_ms,
        settings.wait_ms,
        settings.retry_ms,
    )
    try:
        await asyncio.gather(
            *(
                _worker(manager, stats, session_id=args.session_id, settings=settings, hold_ms=args.hold_ms)
                for _ in range(args.workers)
            )
        )
    finally:
        if isinstance(store, RedisLockStore):
            await store.close()

    logger.info(
        "acquired=%d rejected=%d max_concurrent_holders=%d",
        stats.acquired,
        stats.rejected,
        stats.max_holders,
    )
    if stats.max_holders > 1:
        raise SystemExit("Mutual exclusion violated")


if __name__ == "__main__":
    asyncio.run(main())
