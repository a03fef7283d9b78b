"""Logging setup shared by the tools/ scripts.

The splice package itself only creates module loggers; handlers are
installed here, once per process, by whichever script runs.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def _level_from_name(name: str) -> int | None:
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else None


def configure_logging(fallback: str = "WARNING") -> int:
    """Install a stderr handler at the level named by ``LOG_LEVEL``.

    An unknown name falls back to ``fallback`` and logs a warning naming
    the rejected value. Returns the numeric level in effect.
    """
    requested = os.environ.get("LOG_LEVEL", fallback)
    level = _level_from_name(requested)
    rejected = level is None
    if rejected:
        level = _level_from_name(fallback) or logging.WARNING

    # stdout carries the rendered reports
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    if rejected:
        logging.getLogger("splice").warning(
            "Invalid LOG_LEVEL '%s'; using %s",
            requested.upper(),
            logging.getLevelName(level),
        )
    return level
