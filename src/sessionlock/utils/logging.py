"""Logging helpers with consistent formatting."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from rich.logging import RichHandler

from sessionlock.utils.env import get_bool_env


LOGGER_NAMESPACE = "sessionlock"


def _level_from_env(default: int) -> int:
    raw = os.getenv("SESSIONLOCK_LOG_LEVEL")
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


def get_logger(name: str, level: Optional[int] = None, *, rich: Optional[bool] = None) -> logging.Logger:
    """Configure and return a logger under the ``sessionlock`` namespace.

    ``level`` defaults to ``SESSIONLOCK_LOG_LEVEL`` (INFO when unset) and
    ``rich`` to ``SESSIONLOCK_RICH_LOGS`` (on when unset).
    """
    logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
    if logger.handlers:
        return logger

    level = level if level is not None else _level_from_env(logging.INFO)
    use_rich = rich if rich is not None else get_bool_env("SESSIONLOCK_RICH_LOGS", default=True)
    logger.setLevel(level)

    if use_rich:
        handler: logging.Handler = RichHandler(
            level=level,
            markup=False,
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(name)s %(levelname)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    logger.addHandler(handler)
    logger.propagate = False
    return logger
