"""Logging utilities."""

from __future__ import annotations

import contextlib
import contextvars
import logging
from typing import Any

from rich.logging import RichHandler


_session_var: contextvars.ContextVar[str] = contextvars.ContextVar("prdforge_session", default="-")
_stage_var: contextvars.ContextVar[str] = contextvars.ContextVar("prdforge_stage", default="-")

_FORMATTER = logging.Formatter(
    fmt="%(asctime)s %(levelname)s session=%(session)s stage=%(stage)s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


class _ContextFilter(logging.Filter):
    """Inject session context into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.session = _session_var.get()  # type: ignore[attr-defined]
        record.stage = _stage_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def session_context(*, session_id: str, stage: str | None = None) -> Any:
    """Temporarily bind session context for structured logging.

    Args:
        session_id: Workspace session identifier.
        stage: Optional stage name (e.g. ``generate``, ``export``).
    """

    token_session = _session_var.set(session_id)
    token_stage = _stage_var.set(stage or _stage_var.get())
    try:
        yield
    finally:
        _session_var.reset(token_session)
        _stage_var.reset(token_stage)


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Logging level name.
    """

    root = logging.getLogger()
    root.setLevel(level)

    # runs once per CLI command and once per app factory call; reuse the installed handler
    handler = next((h for h in root.handlers if isinstance(h, RichHandler)), None)
    if handler is None:
        handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
        root.addHandler(handler)
    if not any(isinstance(f, _ContextFilter) for f in handler.filters):
        handler.addFilter(_ContextFilter())
    handler.setFormatter(_FORMATTER)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)


def log_exception(logger: logging.Logger, msg: str, **context: Any) -> None:
    """Log an exception with optional structured context."""

    if context:
        logger.exception("%s | context=%s", msg, context)
    else:
        logger.exception("%s", msg)
