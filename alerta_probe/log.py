"""Logging bootstrap for the probe's CLI entry points."""

from __future__ import annotations

import logging
import os

# httpx/httpcore log every request at INFO; one line per target per cycle
# drowns out the probe's own warnings.
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str | None = None) -> int:
    """Configure root logging and return the effective level.

    ``level`` wins over ``$LOG_LEVEL``; unknown names fall back to INFO. The
    HTTP client loggers stay at WARNING unless DEBUG is requested.
    """
    name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    lvl = logging.getLevelName(name)
    if not isinstance(lvl, int):
        lvl = logging.INFO

    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        force=True,
    )
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(lvl if lvl <= logging.DEBUG else logging.WARNING)
    return lvl
