"""
Simple example running one batch with the default configuration:
100 jobs on 3 workers, squaring each value and printing each result.

Options can be overridden through the environment:
    BATCHER_JOB_COUNT, BATCHER_WORKER_COUNT, BATCHER_QUEUE_CAPACITY,
    BATCHER_ON_ERROR, BATCHER_LOG_LEVEL

Usage:
    python example.py
"""

import logging
import sys
import time

from batcher import (
    BatcherError,
    InvalidConfigurationError,
    Result,
    new_batcher_from_env,
)
from batcher.helper.logging import level_from_env, setup_logging


def slow_square(value: int) -> int:
    """
    Example work function: square the value after a short pause so jobs
    overlap across workers.
    """
    time.sleep(0.01)
    return value * value


def print_result(result: Result) -> None:
    print(f"job {result.job_id}: {result.value}^2 = {result.output} ({result.worker_name})")


def main() -> int:
    """Run the example batch and return the process exit code."""
    logger = setup_logging(level=level_from_env(logging.INFO), name="example")

    try:
        batcher = new_batcher_from_env(slow_square, print_result)
        batcher.run()
    except InvalidConfigurationError as e:
        logger.error("Invalid batch configuration", error=e)
        return 1
    except BatcherError as e:
        logger.error("Batch failed", error=e)
        return 1

    logger.info(
        "Example finished",
        jobs=batcher.jobs_dispatched,
        results=batcher.results_handled,
        duration_seconds=round(batcher.duration_seconds, 3),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
