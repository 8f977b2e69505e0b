"""Web framework integrations for the session lock."""

from .guard import SessionLockGuard

__all__ = ["SessionLockGuard"]
