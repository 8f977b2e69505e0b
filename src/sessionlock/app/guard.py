"""FastAPI dependency serializing request handling per session."""

import math
from typing import AsyncIterator

from fastapi import HTTPException, Request, status

from sessionlock.core.locks import SessionLock, SessionLockManager
from sessionlock.core.settings import LockSettings
from sessionlock.utils.logging import get_logger


class SessionLockGuard:
    """Holds the session lock for the duration of a request.

    Use as ``Depends(guard)``. The session id is read from a request header;
    a request that cannot get the lock within ``wait_ms`` is rejected with
    409 Conflict and a ``Retry-After`` hint instead of running concurrently.
    """

    def __init__(
        self,
        manager: SessionLockManager,
        *,
        ttl_ms: int,
        wait_ms: int = 0,
        retry_ms: int = 10,
        header: str = "X-Session-ID",
    ) -> None:
        self.manager = manager
        self.ttl_ms = ttl_ms
        self.wait_ms = wait_ms
        self.retry_ms = retry_ms
        self.header = header
        self.logger = get_logger("SessionLockGuard")

    @classmethod
    def from_settings(cls, manager: SessionLockManager, settings: LockSettings) -> "SessionLockGuard":
        return cls(
            manager,
            ttl_ms=settings.ttl_ms,
            wait_ms=settings.wait_ms,
            retry_ms=settings.retry_ms,
            header=settings.session_header,
        )

    def _retry_after(self) -> str:
        return str(max(1, math.ceil(self.retry_ms / 1000)))

    async def __call__(self, request: Request) -> AsyncIterator[SessionLock]:
        session_id = request.headers.get(self.header)
        if not session_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Missing {self.header} header",
            )

        handle = await self.manager.acquire(
            session_id,
            ttl_ms=self.ttl_ms,
            wait_ms=self.wait_ms,
            retry_ms=self.retry_ms,
        )
        if handle is None:
            self.logger.warning("Rejecting concurrent request for session %s", session_id)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Another request for this session is in progress",
                headers={"Retry-After": self._retry_after()},
            )

        try:
            yield handle
        finally:
            await handle.release()
