"""
Helper package for the batcher.
Provides error types, logging and function validation utilities.
"""

from .task import (
    check_valid_function,
    check_single_argument,
    get_function_name,
    is_async_function,
)

from .error import (
    BatcherError,
    ClosedQueueError,
    InvalidConfigurationError,
)

from .logging import (
    BatcherLogger,
    ColorFormatter,
    PerformanceLogger,
    get_logger,
    setup_logging,
    time_operation,
)

__all__ = [
    # Function utilities
    "check_valid_function",
    "check_single_argument",
    "get_function_name",
    "is_async_function",
    # Error handling
    "BatcherError",
    "ClosedQueueError",
    "InvalidConfigurationError",
    # Logging utilities
    "BatcherLogger",
    "ColorFormatter",
    "PerformanceLogger",
    "get_logger",
    "setup_logging",
    "time_operation",
]
