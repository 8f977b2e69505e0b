"""Data models for lock requests."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LockRequest(BaseModel):
    """Call-time parameters of a single ``acquire()`` call."""

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(min_length=1)
    ttl_ms: int = Field(gt=0)
    wait_ms: int = Field(ge=0)
    retry_ms: int = Field(gt=0)
