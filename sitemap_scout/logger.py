# === FILE: sitemap_scout/logger.py ===
"""Logging for SitemapScout.

Every module logs through one named logger::

    from sitemap_scout.logger import logger
    logger.debug("Fetched %s", url)

Records go to stderr, so JSON printed by ``sitemap-scout map`` on stdout stays
machine readable. :func:`configure` swaps the level, format and optional
rotating log file at runtime; the CLI calls it once per invocation.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

LOGGER_NAME: Final[str] = "SitemapScout"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024


def configure(
    level: Union[int, str] = "WARNING",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Reset the project logger: stderr always, plus *log_file* when given (rotated at 5 MiB)."""
    formatter = logging.Formatter(log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=_MAX_LOG_BYTES, backupCount=3, encoding="utf-8")
        )

    lg = logging.getLogger(LOGGER_NAME)
    for old in lg.handlers[:]:
        lg.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        lg.addHandler(handler)
    lg.setLevel(level)
    # the CLI owns output; do not double-print through the root logger
    lg.propagate = False
    return lg


logger: logging.Logger = configure()

__all__ = ["DEFAULT_FORMAT", "LOGGER_NAME", "configure", "logger"]
