"""Settings loader for the session lock and its consumers."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from sessionlock.utils.env import get_bool_env, get_int_env


class LockSettings(BaseModel):
    """Store connection and default lock timings for request guards.

    ``SessionLockManager.acquire`` never reads these; callers pass timings
    explicitly and may take them from here.
    """

    redis_url: str = "redis://localhost:6379/0"
    ttl_ms: int = Field(default=5000, gt=0)
    wait_ms: int = Field(default=0, ge=0)
    retry_ms: int = Field(default=10, gt=0)
    atomic_release: bool = False
    session_header: str = Field(default="X-Session-ID", min_length=1)

    @classmethod
    def from_file(cls, path: Path) -> "LockSettings":
        data = yaml.safe_load(path.read_text()) or {}
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Invalid lock settings: {exc}") from exc

    @classmethod
    def from_env(cls) -> "LockSettings":
        defaults = cls.model_fields
        data = {
            "redis_url": os.getenv("REDIS_URL", defaults["redis_url"].default),
            "ttl_ms": get_int_env("SESSIONLOCK_TTL_MS", default=defaults["ttl_ms"].default),
            "wait_ms": get_int_env("SESSIONLOCK_WAIT_MS", default=defaults["wait_ms"].default),
            "retry_ms": get_int_env("SESSIONLOCK_RETRY_MS", default=defaults["retry_ms"].default),
            "atomic_release": get_bool_env("SESSIONLOCK_ATOMIC_RELEASE", default=False),
            "session_header": os.getenv("SESSIONLOCK_SESSION_HEADER", defaults["session_header"].default),
        }
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Invalid lock settings: {exc}") from exc
