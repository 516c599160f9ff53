"""Logging utilities: rich console output stamped with the active document and refresh generation."""

from __future__ import annotations

import contextlib
import contextvars
import logging
from typing import Any

from rich.logging import RichHandler


_uri_var: contextvars.ContextVar[str] = contextvars.ContextVar("docoutline_uri", default="-")
_generation_var: contextvars.ContextVar[str] = contextvars.ContextVar("docoutline_generation", default="-")


class _OutlineContextFilter(logging.Filter):
    """Copy the bound uri and generation onto each record as ``doc`` and ``gen``."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.doc = _uri_var.get()  # type: ignore[attr-defined]
        record.gen = _generation_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def document_context(*, uri: str, generation: int | None = None) -> Any:
    """Temporarily bind the active document (and refresh generation) for logging.

    Args:
        uri: Document identifier.
        generation: Optional refresh generation stamp.
    """

    token_uri = _uri_var.set(uri)
    token_generation = _generation_var.set(str(generation) if generation is not None else _generation_var.get())
    try:
        yield
    finally:
        _uri_var.reset(token_uri)
        _generation_var.reset(token_generation)


@contextlib.contextmanager
def generation_context(generation: int) -> Any:
    """Bind only a refresh generation, for work not tied to one document (clears, skipped retries)."""

    token = _generation_var.set(str(generation))
    try:
        yield
    finally:
        _generation_var.reset(token)


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Logging level name.
    """

    handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
    handler.addFilter(_OutlineContextFilter())

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s doc=%(doc)s gen=%(gen)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(handler)
    else:
        for h in root.handlers:
            if isinstance(h, RichHandler):
                h.addFilter(_OutlineContextFilter())
                h.setFormatter(formatter)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)


def log_exception(logger: logging.Logger, msg: str, **context: Any) -> None:
    """Log an exception with optional structured context."""

    if context:
        logger.exception("%s | context=%s", msg, context)
    else:
        logger.exception("%s", msg)
