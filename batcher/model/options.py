"""
Options model for the batcher.
Explicit batch configuration, with loading from BATCHER_* environment variables.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..helper.error import InvalidConfigurationError
from .options_on_error import FailurePolicy, OnError

DEFAULT_JOB_COUNT = 100
DEFAULT_WORKER_COUNT = 3


@dataclass
class Options:
    """
    Options for one batch run.

    capacity bounds both the job source and the result sink. When it is None
    the dispatcher sizes them to the batch so producers never block.
    """

    job_count: int = DEFAULT_JOB_COUNT
    worker_count: int = DEFAULT_WORKER_COUNT
    capacity: Optional[int] = None
    on_error: Optional[OnError] = None

    def is_valid(self) -> bool:
        """
        Validate the options.

        :return: True if valid, False otherwise.
        """
        try:
            self.validate()
        except InvalidConfigurationError:
            return False
        return True

    def validate(self) -> None:
        """
        Validate the options.

        :raises InvalidConfigurationError: If any option is out of range.
        """
        if not isinstance(self.job_count, int) or self.job_count < 0:
            raise InvalidConfigurationError(
                f"job count must be a non-negative integer, got {self.job_count!r}"
            )
        if not isinstance(self.worker_count, int) or self.worker_count < 1:
            raise InvalidConfigurationError(
                f"worker count must be at least 1, got {self.worker_count!r}"
            )
        if self.capacity is not None and (
            not isinstance(self.capacity, int) or self.capacity < 1
        ):
            raise InvalidConfigurationError(
                f"queue capacity must be at least 1, got {self.capacity!r}"
            )
        if self.on_error is not None and not self.on_error.is_valid():
            raise InvalidConfigurationError("OnError options are invalid")

    def queue_capacity(self) -> int:
        """
        Capacity used for the job source and result sink.

        :return: The configured capacity, or the batch size (at least 1).
        """
        if self.capacity is not None:
            return self.capacity
        return max(self.job_count, 1)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert options to dictionary for serialization.

        :return: Dictionary representation of the Options.
        """
        return {
            "job_count": self.job_count,
            "worker_count": self.worker_count,
            "capacity": self.capacity,
            "on_error": self.on_error.to_dict() if self.on_error else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Options":
        """
        Create options from dictionary.

        :param data: Dictionary containing options data.
        :return: Options instance.
        """
        options = cls()
        options.job_count = data.get("job_count", DEFAULT_JOB_COUNT)
        options.worker_count = data.get("worker_count", DEFAULT_WORKER_COUNT)
        options.capacity = data.get("capacity")
        if data.get("on_error"):
            options.on_error = OnError.from_dict(data["on_error"])
        return options

    @classmethod
    def from_env(cls) -> "Options":
        """
        Create options from environment variables.
        - BATCHER_JOB_COUNT (optional, defaults to 100)
        - BATCHER_WORKER_COUNT (optional, defaults to 3)
        - BATCHER_QUEUE_CAPACITY (optional, defaults to the job count)
        - BATCHER_ON_ERROR (optional, "isolate" or "fail_fast")

        :return: Options instance.
        :raises InvalidConfigurationError: If a variable cannot be parsed.
        """
        job_count = _int_from_env("BATCHER_JOB_COUNT", DEFAULT_JOB_COUNT)
        worker_count = _int_from_env("BATCHER_WORKER_COUNT", DEFAULT_WORKER_COUNT)
        capacity = _int_from_env("BATCHER_QUEUE_CAPACITY", None)

        on_error: Optional[OnError] = None
        policy = os.getenv("BATCHER_ON_ERROR", "").strip().lower()
        if policy:
            try:
                on_error = OnError(FailurePolicy(policy))
            except ValueError as e:
                raise InvalidConfigurationError(
                    f"BATCHER_ON_ERROR must be one of "
                    f"{[p.value for p in FailurePolicy]}, got {policy!r}"
                ) from e

        return cls(
            job_count=job_count,
            worker_count=worker_count,
            capacity=capacity,
            on_error=on_error,
        )


def _int_from_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def new_options(
    job_count: int = DEFAULT_JOB_COUNT,
    worker_count: int = DEFAULT_WORKER_COUNT,
    capacity: Optional[int] = None,
    on_error: Optional[OnError] = None,
) -> Options:
    """
    Create new validated options.

    :param job_count: Total number of jobs in the batch.
    :param worker_count: Number of concurrent workers.
    :param capacity: Optional bound for the job source and result sink.
    :param on_error: Optional work function failure policy.
    :return: Options instance.
    :raises InvalidConfigurationError: If the options are invalid.
    """
    options = Options(
        job_count=job_count,
        worker_count=worker_count,
        capacity=capacity,
        on_error=on_error,
    )
    options.validate()
    return options
