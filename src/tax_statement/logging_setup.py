"""Logging for the ``tax_statement`` package.

Modules log through ``get_logger(__name__)`` and never attach handlers, so the
package stays silent inside a host application. Entry points such as the dump
tool call ``configure_logging()`` to send the package log to a stream.
"""

from __future__ import annotations

import logging
import os
from typing import IO

PACKAGE_LOGGER = "tax_statement"
LEVEL_ENV_VAR = "TAX_STATEMENT_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


class _PackageHandler(logging.StreamHandler):
    """The handler configure_logging() installs on the package logger."""


def parse_level(level: int | str | None) -> int:
    """Convert a level name, a numeric string or an int to a logging level.

    None falls back to the TAX_STATEMENT_LOG_LEVEL environment variable, then
    to INFO.
    """
    if level is None:
        level = os.environ.get(LEVEL_ENV_VAR) or logging.INFO
    if isinstance(level, int):
        return level

    name = level.strip().upper()
    if name.isdigit():
        return int(name)

    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        raise ValueError(f"Invalid log level: {level!r}")
    return numeric


def is_configured() -> bool:
    """Check whether configure_logging() has installed its handler."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    return any(isinstance(handler, _PackageHandler) for handler in logger.handlers)


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str = DEFAULT_FORMAT,
    stream: IO[str] | None = None,
) -> None:
    """Send the package log to `stream` (stderr when not given).

    Only the first call has an effect; later calls leave the existing
    handler in place.
    """
    if is_configured():
        return

    numeric_level = parse_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in logger.handlers[:]:
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = _PackageHandler(stream)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the package logger."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        package_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
