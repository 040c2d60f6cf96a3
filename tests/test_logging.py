"""Tests for logging setup."""

from __future__ import annotations

import logging
from typing import Iterator

import pytest
from rich.logging import RichHandler

from prdforge.logging import _ContextFilter, configure_logging, session_context


@pytest.fixture
def root_logger() -> Iterator[logging.Logger]:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    root.handlers = [h for h in saved_handlers if not isinstance(h, RichHandler)]
    yield root
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_repeated_configuration_keeps_one_handler_and_filter(root_logger: logging.Logger) -> None:
    """It should reuse the installed handler instead of stacking handlers or filters."""

    for level in ("INFO", "DEBUG", "WARNING"):
        configure_logging(level)

    handlers = [h for h in root_logger.handlers if isinstance(h, RichHandler)]
    assert len(handlers) == 1
    assert sum(isinstance(f, _ContextFilter) for f in handlers[0].filters) == 1
    assert root_logger.level == logging.WARNING


def test_session_context_tags_records() -> None:
    """It should stamp records with the bound session and stage, then restore the defaults."""

    inside = logging.LogRecord("prdforge", logging.INFO, __file__, 1, "msg", None, None)
    outside = logging.LogRecord("prdforge", logging.INFO, __file__, 1, "msg", None, None)

    with session_context(session_id="abc123", stage="export"):
        _ContextFilter().filter(inside)
    _ContextFilter().filter(outside)

    assert (inside.session, inside.stage) == ("abc123", "export")  # type: ignore[attr-defined]
    assert (outside.session, outside.stage) == ("-", "-")  # type: ignore[attr-defined]
