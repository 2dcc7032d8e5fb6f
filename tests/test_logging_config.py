"""Tests for overlap_wfc.logging_config."""
import logging

import pytest

from overlap_wfc.logging_config import setup_logging


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("overlap_wfc")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


class TestSetupLogging:
    """Handlers on the package logger."""

    def test_console_only(self):
        logger = setup_logging(logging.INFO)
        assert logger.name == "overlap_wfc"
        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.INFO

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "wfc.log"
        setup_logging(logging.WARNING, log_file=log_file)
        logging.getLogger("overlap_wfc.solver").debug("hello from the solver")
        for handler in logging.getLogger("overlap_wfc").handlers:
            handler.flush()
        assert "hello from the solver" in log_file.read_text()

    def test_reinitialising_replaces_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1
