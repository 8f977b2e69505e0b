"""Lock key and ownership token helpers."""

from __future__ import annotations

import secrets


LOCK_KEY_PREFIX = "SESSION_LOCK:"
MIN_TOKEN_BYTES = 16


def build_lock_key(session_id: str) -> str:
    """Return the store key guarding ``session_id``."""
    if not isinstance(session_id, str) or not session_id:
        raise ValueError("session_id must be a non-empty string")
    return f"{LOCK_KEY_PREFIX}{session_id}"


def generate_token(nbytes: int = MIN_TOKEN_BYTES) -> str:
    """Return a fresh, unguessable ownership token."""
    if nbytes < MIN_TOKEN_BYTES:
        raise ValueError(f"token must carry at least {MIN_TOKEN_BYTES} random bytes")
    return secrets.token_hex(nbytes)
