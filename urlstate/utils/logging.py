"""Logging for urlstate.

Every logger lives under the ``urlstate`` namespace. While
:func:`urlstate.core.extract.extract_params` decodes a value it records the
query parameter name in a context variable; :class:`ParamContextFilter` copies
it onto log records so a codec warning says which parameter was malformed.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, TextIO

from urlstate._serialization import encode_json

if TYPE_CHECKING:
    from collections.abc import Iterator
    from logging import LogRecord

__all__ = (
    "ParamContextFilter",
    "StructuredFormatter",
    "configure_logging",
    "current_param",
    "get_logger",
    "param_context",
)

ROOT_LOGGER_NAME = "urlstate"
SIMPLE_FORMAT = "%(levelname)s %(name)s: %(message)s"

_current_param: ContextVar[str | None] = ContextVar("urlstate_current_param", default=None)


@contextmanager
def param_context(name: str) -> Iterator[None]:
    """Mark ``name`` as the query parameter being processed."""
    token = _current_param.set(name)
    try:
        yield
    finally:
        _current_param.reset(token)


def current_param() -> str | None:
    """Name of the query parameter being processed, if any."""
    return _current_param.get()


class ParamContextFilter(logging.Filter):
    """Attach the current query parameter name to records as ``param``."""

    def filter(self, record: LogRecord) -> bool:
        record.param = current_param()
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record.

    Carries the parameter name from :class:`ParamContextFilter` and any
    ``extra_fields`` mapping passed through ``extra=``.
    """

    def format(self, record: LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        param = getattr(record, "param", None)
        if param is not None:
            entry["param"] = param
        entry.update(getattr(record, "extra_fields", None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return encode_json(entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the ``urlstate`` namespace with the parameter filter attached.

    Args:
        name: Dotted name, with or without the ``urlstate.`` prefix.

    Returns:
        The logger.
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    if not any(isinstance(f, ParamContextFilter) for f in logger.filters):
        logger.addFilter(ParamContextFilter())
    return logger


def configure_logging(level: str = "WARNING", format_style: str = "simple", stream: TextIO | None = None) -> None:
    """Send urlstate diagnostics to a stream.

    Replaces any handlers on the ``urlstate`` logger and stops propagation to
    the root logger.

    Args:
        level: Level name, e.g. ``"WARNING"``.
        format_style: ``"simple"`` for one line of text, ``"structured"`` for JSON.
        stream: Destination, standard error by default.
    """
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(StructuredFormatter() if format_style == "structured" else logging.Formatter(SIMPLE_FORMAT))

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.handlers[:] = [handler]
    logger.setLevel(level.upper())
    logger.propagate = False
