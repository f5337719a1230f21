"""Logging setup shared by every tsconduit module.

Modules call ``get_logger(__name__)`` once at import time. All loggers live
under the ``tsconduit`` namespace, write to a single stream handler and do
not propagate to the root logger, so library output never depends on the
host application's logging configuration.

The starting level is read from the ``TSCONDUIT_LOG_LEVEL`` environment
variable (a level name such as ``INFO`` or a number) and defaults to WARNING.
Order selection reports its choice at INFO and estimator details at DEBUG;
CSS runs that stop without converging are reported at WARNING.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional

_ENV_VAR = "TSCONDUIT_LOG_LEVEL"
_ROOT = "tsconduit"
_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _resolve_level(level: int | str | None, fallback: int = logging.WARNING) -> int:
    if level is None:
        return fallback
    if isinstance(level, int):
        return level
    text = str(level).strip()
    if text.isdigit():
        return int(text)
    resolved = logging.getLevelName(text.upper())
    return resolved if isinstance(resolved, int) else fallback


class _Settings:
    level: int = _resolve_level(os.environ.get(_ENV_VAR))
    format_string: str = _DEFAULT_FORMAT
    stream: Optional[IO[str]] = None


_loggers: dict[str, logging.Logger] = {}


def _install_handler(logger: logging.Logger) -> None:
    for old in list(logger.handlers):
        logger.removeHandler(old)
    handler = logging.StreamHandler(_Settings.stream or sys.stderr)
    handler.setLevel(_Settings.level)
    handler.setFormatter(logging.Formatter(_Settings.format_string))
    logger.addHandler(handler)
    logger.setLevel(_Settings.level)
    logger.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the cached logger for ``name`` inside the tsconduit namespace.

    Args:
        name: Usually ``__name__``. Names outside the package are prefixed
            with ``tsconduit.``; None gives the package logger.

    Example:
        >>> from tsconduit.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("Fitting AR(2)")
    """
    if not name:
        full_name = _ROOT
    elif name == _ROOT or name.startswith(_ROOT + "."):
        full_name = name
    else:
        full_name = f"{_ROOT}.{name}"

    logger = _loggers.get(full_name)
    if logger is None:
        logger = logging.getLogger(full_name)
        _install_handler(logger)
        _loggers[full_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Change the level of every tsconduit logger and of loggers created later.

    Args:
        level: A ``logging`` constant, a level name such as ``"DEBUG"``, or a
            numeric string.
    """
    _Settings.level = _resolve_level(level)
    for logger in _loggers.values():
        logger.setLevel(_Settings.level)
        for handler in logger.handlers:
            handler.setLevel(_Settings.level)


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Replace the handler of every tsconduit logger.

    Usually called once at application startup; the settings also apply to
    loggers created afterwards.

    Args:
        level: Logging level (default: WARNING).
        format_string: ``logging.Formatter`` format. None restores the default
            ``[LEVEL] name: message`` layout.
        stream: Output stream. None means ``sys.stderr``.

    Example:
        >>> import logging
        >>> from tsconduit.logging import configure_logging
        >>> configure_logging(level=logging.INFO)
    """
    _Settings.level = _resolve_level(level)
    _Settings.format_string = format_string or _DEFAULT_FORMAT
    _Settings.stream = stream
    for logger in _loggers.values():
        _install_handler(logger)


__all__ = ["get_logger", "set_log_level", "configure_logging"]
