from __future__ import annotations

import logging

from rich.logging import RichHandler

from sessionlock.utils.logging import get_logger


def test_loggers_live_under_package_namespace():
    logger = get_logger("NamespaceCheck", rich=False)

    assert logger.name == "sessionlock.NamespaceCheck"
    assert logger.propagate is False
    assert len(logger.handlers) == 1


def test_handlers_are_not_duplicated():
    first = get_logger("Repeated")
    second = get_logger("Repeated")

    assert first is second
    assert len(second.handlers) == 1
    assert isinstance(second.handlers[0], RichHandler)


def test_level_comes_from_environment(monkeypatch):
    monkeypatch.setenv("SESSIONLOCK_LOG_LEVEL", "debug")

    assert get_logger("EnvLevel", rich=False).level == logging.DEBUG


def test_unknown_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("SESSIONLOCK_LOG_LEVEL", "chatty")

    assert get_logger("BadLevel", rich=False).level == logging.INFO
