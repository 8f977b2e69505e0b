"""Exceptions raised by the session lock."""

from __future__ import annotations


class SessionLockError(Exception):
    """Base class for session lock errors."""


class InvalidLockRequestError(SessionLockError, ValueError):
    """Call-time lock parameters failed validation."""


class StoreUnavailableError(SessionLockError):
    """The shared store could not be reached."""
