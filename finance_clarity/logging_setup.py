"""Logging for ``finance_clarity``.

Everything in the package logs through children of the ``"finance_clarity"``
logger. Until an entrypoint opts in, that logger only carries a
``NullHandler``, so importing the package as a library prints nothing.

The CLI opts in by calling :func:`configure_logging` once at startup; tests
undo that with :func:`reset_logging`. Modules obtain their logger with
``get_logger("finance_clarity.<module>")`` and never add handlers themselves.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "finance_clarity"
_LEVEL_ENV_VAR = "FINANCE_CLARITY_LOG_LEVEL"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False


def _level_from_name(name: str) -> int | None:
    # "20", "info" and "INFO" all resolve; anything else is None.
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        parsed = _level_from_name(level)
        if parsed is not None:
            return parsed
    env_val = os.getenv(_LEVEL_ENV_VAR)
    if env_val:
        parsed = _level_from_name(env_val)
        if parsed is not None:
            return parsed
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Send package log records to ``stream``; later calls are no-ops.

    Parameters
    ----------
    level:
        Threshold as a number or a level name. When missing or not a known
        name, ``FINANCE_CLARITY_LOG_LEVEL`` is consulted, then ``INFO``.
    fmt:
        ``logging.Formatter`` pattern; timestamp, logger name, level and
        message when omitted.
    stream:
        Destination text stream. ``None`` means whatever ``sys.stderr`` is
        at the time of the call.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    # Our handler is the only output; the root logger must not repeat records.
    logger.propagate = False

    _CONFIGURED = True


def reset_logging() -> None:
    """Detach every handler and return the package logger to its defaults."""

    global _CONFIGURED
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    _CONFIGURED = False


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``.

    While :func:`configure_logging` has not run and the package logger has no
    handlers, a ``NullHandler`` is attached to it first.
    """

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "reset_logging"]
