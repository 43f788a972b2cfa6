"""
Error handling utilities for the batcher.
Provides a trace-carrying wrapper error and the batch error taxonomy.
"""

import inspect
from types import FrameType
from typing import Optional


class BatcherError(Exception):
    """
    Error wrapper with trace information.
    Each re-wrap appends "<calling function> - <context>" to the trace while
    keeping the first original exception.
    """

    def __init__(self, trace: str, original: BaseException):
        """Initialize BatcherError with original error and trace."""
        traceWithFunction = trace
        current_frame = inspect.currentframe()

        frame: Optional[FrameType] = None
        if current_frame is not None:
            frame = current_frame.f_back

        if frame:
            traceWithFunction = f"{frame.f_code.co_name} - {trace}"

        if isinstance(original, BatcherError):
            self.original = original.original
            self.trace = original.trace + [traceWithFunction]
        else:
            self.original = original
            self.trace = [traceWithFunction]

        super().__init__(str(self.original))

    def __str__(self) -> str:
        """Return formatted error message with trace."""
        return f"{str(self.original)} | Trace: {', '.join(self.trace)}"


class InvalidConfigurationError(ValueError):
    """
    Raised synchronously for invalid batch input, before any worker starts.
    The caller can fix the input and retry.
    """


class ClosedQueueError(RuntimeError):
    """
    Raised when an item is put into a channel that was already closed.
    Signals broken shutdown ordering and is fatal for the batch.
    """
