"""Logging for ``ledger_import``.

Library modules log through ``get_logger("ledger_import.<module>")`` and never
attach handlers. The ``ledger-import`` CLI (or any host application) calls
:func:`configure_logging` once; until then records go to a ``NullHandler``.

Levels used across the package: WARNING for every skipped row and shared
import-id template, INFO for per-stage counts and ledger round trips, DEBUG
for dropped balance rows and request URLs. Access tokens are never logged.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "ledger_import"
LEVEL_ENV_VAR = "LEDGER_IMPORT_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_configured = False


def _level_from_name(value: str) -> int | None:
    value = value.strip().upper()
    if value.isdigit():
        return int(value)
    return logging.getLevelNamesMapping().get(value)


def resolve_level(level: int | str | None = None) -> int:
    """Explicit ``level`` first, then ``LEDGER_IMPORT_LOG_LEVEL``, then INFO.

    An unknown level name falls through to the next source.
    """

    if isinstance(level, int):
        return level
    for candidate in (level, os.getenv(LEVEL_ENV_VAR)):
        if candidate:
            parsed = _level_from_name(candidate)
            if parsed is not None:
                return parsed
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Attach one stream handler (stderr by default) to the package logger.

    Only the first call has an effect.
    """

    global _configured
    if _configured:
        return

    logger = logging.getLogger(PACKAGE_LOGGER)
    for h in [h for h in logger.handlers if isinstance(h, logging.NullHandler)]:
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolve_level(level))
    # Output belongs to this handler only, not to the root logger as well.
    logger.propagate = False

    _configured = True


def reset_logging() -> None:
    """Undo :func:`configure_logging` (used by tests and long-lived hosts)."""

    global _configured
    logger = logging.getLogger(PACKAGE_LOGGER)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _configured = False


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``, keeping the package silent until configured."""

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if not _configured and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = [
    "PACKAGE_LOGGER",
    "LEVEL_ENV_VAR",
    "resolve_level",
    "configure_logging",
    "reset_logging",
    "get_logger",
]
