"""
Test cases for logging utilities.
"""

import io
import logging
import os
import unittest
from unittest.mock import patch

from .logging import (
    BatcherLogger,
    ColorFormatter,
    PerformanceLogger,
    get_logger,
    level_from_env,
    setup_logging,
    time_operation,
)


def _record(level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestColorFormatter(unittest.TestCase):
    """Test cases for ColorFormatter class."""

    def test_init_without_colors(self):
        """Test ColorFormatter initialization with colors disabled."""
        formatter = ColorFormatter(use_colors=False, include_timestamp=False)
        self.assertFalse(formatter.use_colors)
        self.assertFalse(formatter.include_timestamp)
        self.assertTrue(formatter.include_thread)

    def test_format_with_timestamp(self):
        """Test formatting with timestamp."""
        formatter = ColorFormatter(use_colors=False, include_timestamp=True)

        formatted = formatter.format(_record(logging.INFO, "Test message"))
        self.assertIn("INFO: Test message", formatted)
        self.assertRegex(formatted, r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}")

    def test_format_with_thread_name(self):
        """Test formatting includes the emitting thread."""
        formatter = ColorFormatter(use_colors=False, include_timestamp=False)

        formatted = formatter.format(_record(logging.ERROR, "Error message"))
        self.assertEqual(formatted, "[MainThread] ERROR: Error message")

    def test_format_plain(self):
        """Test formatting without timestamp and thread."""
        formatter = ColorFormatter(
            use_colors=False, include_timestamp=False, include_thread=False
        )

        formatted = formatter.format(_record(logging.WARNING, "Warning message"))
        self.assertEqual(formatted, "WARNING: Warning message")

    def test_color_codes_defined(self):
        """Test that color codes are properly defined."""
        formatter = ColorFormatter()

        expected_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
        for level in expected_levels:
            self.assertIn(level, formatter.COLORS)


class TestBatcherLogger(unittest.TestCase):
    """Test cases for BatcherLogger class."""

    def setUp(self):
        """Set up test fixtures."""
        self.stream = io.StringIO()

    @patch.dict(os.environ, {}, clear=True)
    def test_init_default(self):
        """Test BatcherLogger initialization with defaults."""
        logger = BatcherLogger(stream=self.stream)
        self.assertEqual(logger.name, "batcher")
        self.assertEqual(logger.logger.level, logging.INFO)

    @patch.dict(os.environ, {"BATCHER_LOG_LEVEL": "debug"})
    def test_init_level_from_env(self):
        """Test the default level is taken from BATCHER_LOG_LEVEL."""
        logger = BatcherLogger(name="env_level", stream=self.stream)
        self.assertEqual(logger.logger.level, logging.DEBUG)

    def test_error_logging_with_exception(self):
        """Test error logging with exception."""
        logger = BatcherLogger(name="errors", stream=self.stream)
        logger.error("Batch failed", error=ValueError("test error"))

        self.assertIn("ERROR: Batch failed: test error", self.stream.getvalue())

    def test_critical_logging_with_exception(self):
        """Test critical logging with exception."""
        logger = BatcherLogger(name="critical", stream=self.stream)
        logger.critical("System failure", error=RuntimeError("critical error"))

        self.assertIn(
            "CRITICAL: System failure: critical error", self.stream.getvalue()
        )

    def test_logging_with_context(self):
        """Test logging with context information."""
        logger = BatcherLogger(name="context", level=logging.INFO, stream=self.stream)
        logger.info("Batch done", jobs=100, workers=3)

        self.assertIn("INFO: Batch done | jobs=100 workers=3", self.stream.getvalue())

    def test_set_level(self):
        """Test setting log level."""
        logger = BatcherLogger(name="levels", level=logging.INFO, stream=self.stream)

        logger.debug("Debug message")
        self.assertEqual(self.stream.getvalue(), "")

        logger.set_level(logging.DEBUG)
        logger.debug("Debug message")
        self.assertIn("DEBUG: Debug message", self.stream.getvalue())

    def test_no_duplicate_handlers(self):
        """Test that no duplicate handlers are added."""
        logger1 = BatcherLogger(name="dupes", stream=self.stream)
        logger2 = BatcherLogger(name="dupes", stream=self.stream)

        self.assertEqual(len(logger1.logger.handlers), 1)
        self.assertEqual(len(logger2.logger.handlers), 1)


class TestLoggerFunctions(unittest.TestCase):
    """Test cases for module-level logger functions."""

    def test_get_logger_singleton(self):
        """Test that get_logger returns same instance for same name."""
        self.assertIs(get_logger("same"), get_logger("same"))

    def test_get_logger_different_names(self):
        """Test that get_logger returns different instances for different names."""
        self.assertIsNot(get_logger("name1"), get_logger("name2"))

    def test_setup_logging_applies_level(self):
        """Test setup_logging registers the logger and applies the level."""
        other = get_logger("existing")
        logger = setup_logging(level=logging.WARNING, use_colors=False, name="setup")

        self.assertIs(get_logger("setup"), logger)
        self.assertEqual(other.logger.level, logging.WARNING)
        setup_logging(level=logging.INFO, use_colors=False, name="setup")

    @patch.dict(os.environ, {"BATCHER_LOG_LEVEL": "nonsense"})
    def test_level_from_env_unknown(self):
        """Test an unknown level name falls back to the default."""
        self.assertEqual(level_from_env(logging.ERROR), logging.ERROR)

    @patch.dict(os.environ, {"BATCHER_LOG_LEVEL": "30"})
    def test_level_from_env_numeric(self):
        """Test a numeric level is accepted."""
        self.assertEqual(level_from_env(), logging.WARNING)


class TestPerformanceLogging(unittest.TestCase):
    """Test cases for timing helpers."""

    def setUp(self):
        self.stream = io.StringIO()
        self.logger = BatcherLogger(
            name="perf", level=logging.DEBUG, use_colors=False, stream=self.stream
        )

    def test_timer(self):
        """Test start and end timer log the operation."""
        perf = PerformanceLogger(self.logger)
        perf.start_timer("batch")
        duration = perf.end_timer("batch")

        self.assertGreaterEqual(duration, 0.0)
        self.assertIn("Completed batch", self.stream.getvalue())

    def test_end_without_start(self):
        """Test ending a timer that never started."""
        perf = PerformanceLogger(self.logger)
        self.assertEqual(perf.end_timer("batch"), 0.0)
        self.assertIn("Timer not started for batch", self.stream.getvalue())

    def test_time_operation_decorator(self):
        """Test the decorator passes results and errors through."""

        @time_operation("double", self.logger)
        def double(x):
            return x * 2

        @time_operation("explode", self.logger)
        def explode():
            raise ValueError("exploded")

        self.assertEqual(double(21), 42)
        self.assertEqual(double.__name__, "double")
        with self.assertRaises(ValueError):
            explode()
        self.assertIn("Failed explode: exploded", self.stream.getvalue())


if __name__ == "__main__":
    unittest.main()
