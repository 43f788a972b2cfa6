"""
Pretty logging utilities for the batcher.
Colored console output with key=value context, shared by every component.
"""

import logging
import os
import sys
from typing import Any, Callable, Dict, Optional, TextIO
from datetime import datetime


class ColorFormatter(logging.Formatter):
    """
    Colored log formatter for console output.
    The thread name is included so interleaved worker output stays readable.
    """

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[95m",  # Magenta
        "INFO": "\033[94m",  # Blue
        "WARNING": "\033[93m",  # Yellow
        "ERROR": "\033[91m",  # Red
        "CRITICAL": "\033[95m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def __init__(
        self,
        use_colors: bool = True,
        include_timestamp: bool = True,
        include_thread: bool = True,
    ):
        """
        Initialize the color formatter.

        :param use_colors: Whether to use colors in the output.
        :param include_timestamp: Whether to include timestamps in log messages.
        :param include_thread: Whether to include the emitting thread's name.
        """
        self.use_colors = use_colors and sys.stdout.isatty()
        self.include_timestamp = include_timestamp
        self.include_thread = include_thread

        fmt = "%(levelname)s: %(message)s"
        if include_thread:
            fmt = "[%(threadName)s] " + fmt
        if include_timestamp:
            fmt = "%(asctime)s " + fmt

        super().__init__(fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record with colors.

        :param record: The log record to format.
        :returns: The formatted log message string.
        """
        formatted = super().format(record)

        if self.use_colors and record.levelname in self.COLORS:
            color = self.COLORS[record.levelname]
            reset = self.COLORS["RESET"]
            parts = formatted.split(": ", 1)
            if len(parts) == 2:
                level_part, message_part = parts
                formatted = f"{color}{level_part}: {reset}{message_part}"

        return formatted


def level_from_env(default: int = logging.INFO) -> int:
    """
    Read the log level from BATCHER_LOG_LEVEL (name or number).

    :param default: Level used when the variable is unset or unknown.
    :returns: The logging level.
    """
    raw = os.getenv("BATCHER_LOG_LEVEL", "").strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


class BatcherLogger:
    """
    Logger for batch operations.
    Wraps a stdlib logger and appends keyword context to each message.
    """

    def __init__(
        self,
        name: str = "batcher",
        level: Optional[int] = None,
        use_colors: bool = True,
        stream: Optional[TextIO] = None,
    ):
        """
        Initialize the batcher logger.

        :param name: Logger name.
        :param level: Logging level, defaults to BATCHER_LOG_LEVEL or INFO.
        :param use_colors: Whether to use colored output.
        :param stream: Output stream (defaults to sys.stderr).
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level if level is not None else level_from_env())

        # Remove existing handlers to avoid duplicates
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(ColorFormatter(use_colors=use_colors))

        self.logger.addHandler(handler)
        self.logger.propagate = False

    @property
    def name(self) -> str:
        return self.logger.name

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message with optional context."""
        self.log_with_context(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message with optional context."""
        self.log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message with optional context."""
        self.log_with_context(logging.WARNING, message, **kwargs)

    def error(
        self, message: str, error: Optional[BaseException] = None, **kwargs: Any
    ) -> None:
        """
        Log error message with optional exception and context.

        :param message: The log message.
        :param error: Optional exception to include in the log.
        :param kwargs: Additional context to include in the log.
        """
        if error:
            message = f"{message}: {error}"
        self.log_with_context(logging.ERROR, message, **kwargs)

    def critical(
        self, message: str, error: Optional[BaseException] = None, **kwargs: Any
    ) -> None:
        """Log critical message with optional exception and context."""
        if error:
            message = f"{message}: {error}"
        self.log_with_context(logging.CRITICAL, message, **kwargs)

    def log_with_context(self, level: int, message: str, **kwargs: Any) -> None:
        """
        Log message with additional context information.

        :param level: Logging level.
        :param message: The log message.
        :param kwargs: Additional context to include in the log.
        """
        if not self.logger.isEnabledFor(level):
            return

        if kwargs:
            context_parts = [f"{k}={v}" for k, v in kwargs.items()]
            message += " | " + " ".join(context_parts)

        self.logger.log(level, message)

    def set_level(self, level: int) -> None:
        """Set the logging level."""
        self.logger.setLevel(level)


# Loggers by name, so each module keeps its own handler setup
_loggers: Dict[str, BatcherLogger] = {}


def get_logger(name: str = "batcher") -> BatcherLogger:
    """
    Get or create the logger registered under name.

    :param name: Logger name.
    :returns: BatcherLogger instance.
    """
    if name not in _loggers:
        _loggers[name] = BatcherLogger(name)
    return _loggers[name]


def setup_logging(
    level: int = logging.INFO,
    use_colors: bool = True,
    name: str = "batcher",
    stream: Optional[TextIO] = None,
) -> BatcherLogger:
    """
    Setup logging for a batcher program and apply the level to every
    logger created so far.

    :param level: Logging level.
    :param use_colors: Whether to use colors in logs.
    :param name: Logger name.
    :param stream: Output stream for the new logger.
    :returns: Configured BatcherLogger instance.
    """
    logger = BatcherLogger(name, level, use_colors, stream)
    _loggers[name] = logger

    for other in _loggers.values():
        other.set_level(level)

    return logger


class PerformanceLogger:
    """Logger for timing operations."""

    def __init__(self, logger: BatcherLogger):
        self.logger = logger
        self.start_time: Optional[datetime] = None

    def start_timer(self, operation: str) -> None:
        """Start timing an operation."""
        self.start_time = datetime.now()
        self.logger.debug(f"Started {operation}")

    def end_timer(self, operation: str) -> float:
        """End timing and log duration."""
        if self.start_time is None:
            self.logger.warning(f"Timer not started for {operation}")
            return 0.0

        duration = (datetime.now() - self.start_time).total_seconds()
        self.logger.debug(
            f"Completed {operation}", duration_seconds=duration, operation=operation
        )
        self.start_time = None
        return duration


def time_operation(
    operation: str, logger: Optional[BatcherLogger] = None
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator to time function execution.

    @time_operation("run_batch")
    def my_function():
        pass
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            perf_logger = PerformanceLogger(logger or get_logger())
            perf_logger.start_timer(operation)
            try:
                result = func(*args, **kwargs)
                perf_logger.end_timer(operation)
                return result
            except Exception as e:
                perf_logger.logger.error(f"Failed {operation}", error=e)
                raise

        wrapper.__name__ = func.__name__
        wrapper.__doc__ = func.__doc__
        return wrapper

    return decorator
