"""Tests for logging configuration."""

import logging
import tempfile
from pathlib import Path

from coalesce.logging_setup import APP_NAME, SESSION_ID, setup_logging


def reset_logger():
    logger = logging.getLogger(APP_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def test_setup_logging_writes_session_stamped_file():
    """Test the rotating file handler and session filter."""
    with tempfile.TemporaryDirectory() as tmpdir:
        log_file = Path(tmpdir) / "logs" / "coalesce.log"
        try:
            logger = setup_logging("WARNING", log_file)
            logging.getLogger("coalesce.core.test").debug("hello %s", "there")
            for handler in logger.handlers:
                handler.flush()

            text = log_file.read_text(encoding="utf-8")
            assert "hello there" in text
            assert f"sid={SESSION_ID}" in text
            assert "| DEBUG | coalesce.core.test |" in text
        finally:
            reset_logger()


def test_setup_logging_replaces_handlers():
    """Test that repeated setup does not stack handlers."""
    try:
        setup_logging("INFO")
        logger = setup_logging("DEBUG")

        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.DEBUG
        assert logger.propagate is False
    finally:
        reset_logger()
