"""
Tests for package logger setup.
"""

import logging

import pytest

from filtern.logging_config import setup_logging


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("filtern")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_repeat_calls_replace_handlers(self):
        setup_logging()
        logger = setup_logging(logging.DEBUG)

        assert logger.name == "filtern"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        log_path = tmp_path / "filtern.log"

        logger = setup_logging(logging.INFO, str(log_path))
        logging.getLogger("filtern.simulation").info("Loaded level")
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        assert "filtern.simulation - INFO - Loaded level" in log_path.read_text()
