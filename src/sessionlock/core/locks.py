"""Session lock handle and acquisition loop over a shared key-value store."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Protocol, runtime_checkable

from pydantic import ValidationError

from sessionlock.core.clock import Clock, SystemClock
from sessionlock.core.errors import InvalidLockRequestError
from sessionlock.core.keys import build_lock_key, generate_token
from sessionlock.core.models import LockRequest
from sessionlock.utils.logging import get_logger


@runtime_checkable
class LockStore(Protocol):
    """Minimal store contract consumed by the lock.

    Implementations must normalize raw client replies: ``set_if_not_exists``
    returns a plain ``bool`` and ``get`` returns ``str`` or ``None``.
    Connectivity failures are raised, never reported as ``False``.
    """

    async def set_if_not_exists(self, key: str, value: str, ttl_ms: int) -> bool: ...

    async def get(self, key: str) -> Optional[str]: ...

    async def delete(self, key: str) -> int: ...


def _short(token: str) -> str:
    return token[:8]


class SessionLock:
    """Handle returned to the caller that won the lease for a session."""

    def __init__(
        self,
        *,
        store: LockStore,
        session_id: str,
        key: str,
        token: str,
        atomic_release: bool = False,
    ) -> None:
        self._store = store
        self._session_id = session_id
        self._key = key
        self._token = token
        self._atomic_release = atomic_release
        self.logger = get_logger("SessionLock")

    @property
    def token(self) -> str:
        return self._token

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def key(self) -> str:
        return self._key

    async def release(self) -> None:
        """Delete the lease if it still carries this handle's token.

        Safe to call more than once. A lease that already expired, or that
        now belongs to another holder, is left untouched.
        """
        if self._atomic_release:
            removed = await self._store.compare_and_delete(self._key, self._token)  # type: ignore[attr-defined]
        else:
            # get + delete is not atomic; a lease re-acquired between the two
            # calls can still be removed. Use atomic_release to close the gap.
            current = await self._store.get(self._key)
            removed = current == self._token and bool(await self._store.delete(self._key))

        if removed:
            self.logger.debug("Released lock for session %s", self._session_id)
        else:
            self.logger.debug(
                "Lease for session %s not owned by token %s; nothing to release",
                self._session_id,
                _short(self._token),
            )

    async def __aenter__(self) -> "SessionLock":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.release()

    def __repr__(self) -> str:
        return f"SessionLock(session_id={self._session_id!r}, token={_short(self._token)}...)"


class SessionLockManager:
    """Acquires TTL-bound, token-owned leases keyed by session id."""

    def __init__(
        self,
        store: LockStore,
        *,
        clock: Optional[Clock] = None,
        atomic_release: bool = False,
    ) -> None:
        self.store = store
        self.clock = clock or SystemClock()
        self.logger = get_logger("SessionLockManager")
        if atomic_release and not callable(getattr(store, "compare_and_delete", None)):
            self.logger.warning(
                "%s has no compare_and_delete; falling back to get-then-delete release",
                type(store).__name__,
            )
            atomic_release = False
        self.atomic_release = atomic_release

    async def acquire(
        self,
        session_id: str,
        *,
        ttl_ms: int,
        wait_ms: int = 0,
        retry_ms: int = 10,
    ) -> Optional[SessionLock]:
        """Try to take the lock for ``session_id``.

        The first conditional set always happens, even with ``wait_ms=0``.
        Later attempts are made every ``retry_ms`` while the deadline has not
        been reached, so an always-contended call makes ``ceil(wait_ms /
        retry_ms)`` attempts (one when ``wait_ms`` is zero) and returns
        ``None`` once ``wait_ms`` has elapsed. Store errors propagate.
        """
        try:
            request = LockRequest(
                session_id=session_id,
                ttl_ms=ttl_ms,
                wait_ms=wait_ms,
                retry_ms=retry_ms,
            )
        except ValidationError as exc:
            raise InvalidLockRequestError(f"Invalid lock request: {exc}") from exc

        key = build_lock_key(request.session_id)
        token = generate_token()
        deadline = self.clock.now_ms() + request.wait_ms
        attempts = 0

        while True:
            attempts += 1
            if await self.store.set_if_not_exists(key, token, request.ttl_ms):
                self.logger.info(
                    "Acquired lock for session %s after %d attempt(s)",
                    request.session_id,
                    attempts,
                )
                return SessionLock(
                    store=self.store,
                    session_id=request.session_id,
                    key=key,
                    token=token,
                    atomic_release=self.atomic_release,
                )

            self.logger.debug("Lock for session %s is held; attempt %d failed", request.session_id, attempts)
            if self.clock.now_ms() >= deadline:
                break
            await self.clock.sleep_ms(request.retry_ms)
            if self.clock.now_ms() >= deadline:
                break

        self.logger.info(
            "Gave up on lock for session %s after %d attempt(s) within %dms",
            request.session_id,
            attempts,
            request.wait_ms,
        )
        return None

    @asynccontextmanager
    async def lock(
        self,
        session_id: str,
        *,
        ttl_ms: int,
        wait_ms: int = 0,
        retry_ms: int = 10,
    ) -> AsyncIterator[Optional[SessionLock]]:
        """Async context manager yielding the lock (or ``None``) and releasing it on exit."""
        handle = await self.acquire(session_id, ttl_ms=ttl_ms, wait_ms=wait_ms, retry_ms=retry_ms)
        try:
            yield handle
        finally:
            if handle is not None:
                await handle.release()
