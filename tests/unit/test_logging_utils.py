#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_logging_utils.py
"""Unit tests for the logging setup helper."""

import io
import logging

import pytest

from mdcompose.logging_utils import configure_logging


@pytest.fixture
def package_logger():
    """Restore the mdcompose logger after each test."""
    logger = logging.getLogger("mdcompose")
    saved_handlers, saved_level = list(logger.handlers), logger.level
    yield logger
    for handler in list(logger.handlers):
        if handler not in saved_handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(saved_level)


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for ``configure_logging``."""

    def test_level_by_name(self, package_logger):
        """Test that level names are accepted."""
        logger = configure_logging("debug", stream=io.StringIO())
        assert logger is package_logger
        assert logger.level == logging.DEBUG

    def test_child_loggers_reach_stream(self, package_logger):
        """Test that module loggers inside the package are captured."""
        stream = io.StringIO()
        configure_logging(logging.WARNING, stream=stream)
        logging.getLogger("mdcompose.resources").warning("Could not resolve image")
        assert stream.getvalue() == "WARNING: Could not resolve image\n"

    def test_trace_format(self, package_logger):
        """Test that trace mode adds the logger name."""
        stream = io.StringIO()
        configure_logging(logging.INFO, trace_mode=True, stream=stream)
        logging.getLogger("mdcompose.api").info("Wrote PDF")
        assert "[INFO] [mdcompose.api] Wrote PDF" in stream.getvalue()

    def test_reconfigure_replaces_own_handlers(self, package_logger):
        """Test that a second call does not stack handlers."""
        configure_logging(logging.INFO, stream=io.StringIO())
        configure_logging(logging.INFO, stream=io.StringIO())
        own = [h for h in package_logger.handlers if getattr(h, "_mdcompose_handler", False)]
        assert len(own) == 1

    def test_log_file(self, package_logger, tmp_path):
        """Test that records are appended to the log file."""
        log_file = tmp_path / "mdcompose.log"
        configure_logging(logging.INFO, log_file=str(log_file), stream=io.StringIO())
        logging.getLogger("mdcompose.renderer").info("composed")
        for handler in package_logger.handlers:
            handler.flush()
        assert "composed" in log_file.read_text(encoding="utf-8")
