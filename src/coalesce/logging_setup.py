"""Logging for the coalesce package: console plus an optional rotating file."""

from __future__ import annotations

import logging
import sys
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path

APP_NAME = "coalesce"
SESSION_ID = uuid.uuid4().hex[:8]
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s | sid=%(session)s"


class EnsureSessionFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session"):
            record.session = SESSION_ID
        return True


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> logging.Logger:
    """
    Configure the ``coalesce`` logger hierarchy.

    Console output goes to stderr at ``level``; stdout is left to command
    output. With ``log_file`` every record down to DEBUG is also written to a
    rotating file. Calling this again replaces the handlers.
    """
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fmt = logging.Formatter(LOG_FORMAT)
    session_filter = EnsureSessionFilter()

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level.upper())
    ch.setFormatter(fmt)
    ch.addFilter(session_filter)
    logger.addHandler(ch)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            log_file, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        fh.addFilter(session_filter)
        logger.addHandler(fh)

    logger.debug("Logging initialized. level=%s log_file=%s", level, log_file)
    return logger
