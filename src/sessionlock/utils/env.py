"""Environment helper utilities."""

from __future__ import annotations

import os


_FALSE_VALUES = {"0", "false", "no", "off"}


def get_bool_env(name: str, *, default: bool = False) -> bool:
    """Return True/False for an environment flag."""
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if not value:
        return default
    return value not in _FALSE_VALUES


def get_int_env(name: str, *, default: int) -> int:
    """Read an integer from the environment, falling back to ``default`` when unset or blank."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
