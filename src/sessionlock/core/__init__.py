"""Core locking primitives for the sessionlock package."""

from .clock import Clock, SystemClock
from .errors import InvalidLockRequestError, SessionLockError, StoreUnavailableError
from .keys import LOCK_KEY_PREFIX, build_lock_key, generate_token
from .locks import LockStore, SessionLock, SessionLockManager
from .memory import InMemoryLockStore
from .models import LockRequest
from .settings import LockSettings

__all__ = [
    "Clock",
    "SystemClock",
    "InvalidLockRequestError",
    "SessionLockError",
    "StoreUnavailableError",
    "LOCK_KEY_PREFIX",
    "build_lock_key",
    "generate_token",
    "LockStore",
    "SessionLock",
    "SessionLockManager",
    "InMemoryLockStore",
    "LockRequest",
    "LockSettings",
]
