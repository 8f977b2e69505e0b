"""Distributed per-session locking for stateless web workers."""

from .core import (
    LockSettings,
    SessionLock,
    SessionLockManager,
    build_lock_key,
    generate_token,
)

__all__ = [
    "__version__",
    "LockSettings",
    "SessionLock",
    "SessionLockManager",
    "build_lock_key",
    "generate_token",
]

__version__ = "0.1.0"
