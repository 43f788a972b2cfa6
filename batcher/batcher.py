"""
Main Batcher class: the dispatcher that owns a batch from start to finish.

It fills the job source, runs the worker pool and the result collector, and
returns only after every job was processed and every result was handled.
"""

import threading
from typing import Any, Callable, List, Optional

from .core.channel import Channel
from .core.collector import ResultCollector
from .core.worker_pool import WorkerPool
from .helper.error import BatcherError
from .helper.logging import PerformanceLogger, get_logger
from .helper.task import check_single_argument
from .model.job import Job, generate_jobs
from .model.options import Options
from .model.options_on_error import OnError
from .model.result import Result
from .model.worker import WorkerInfo

logger = get_logger(__name__)

# Poll interval for the job feed while the job source is full.
DISPATCH_POLL_INTERVAL = 0.05


def square(value: int) -> int:
    """Default work function."""
    return value * value


def print_result(result: Result) -> None:
    """Default sink function: print job id, input value and output."""
    if result.is_success:
        print(f"Job {result.job_id}: {result.value} -> {result.output}")
    else:
        print(f"Job {result.job_id}: {result.value} -> failed ({result.error})")


# Batch state constants
class BatchState:
    IDLE = "IDLE"
    JOBS_QUEUED = "JOBS_QUEUED"
    WORKERS_RUNNING = "WORKERS_RUNNING"
    JOBS_EXHAUSTED = "JOBS_EXHAUSTED"
    WORKERS_DRAINED = "WORKERS_DRAINED"
    RESULTS_EXHAUSTED = "RESULTS_EXHAUSTED"
    DONE = "DONE"
    FAILED = "FAILED"


def new_batcher(
    job_count: int,
    worker_count: int,
    work_fn: Callable[[int], Any] = square,
    sink_fn: Callable[[Result], Any] = print_result,
    capacity: Optional[int] = None,
    on_error: Optional[OnError] = None,
) -> "Batcher":
    """
    Create a new Batcher for job_count jobs on worker_count workers.
    """
    options = Options(
        job_count=job_count,
        worker_count=worker_count,
        capacity=capacity,
        on_error=on_error,
    )
    return Batcher(options, work_fn, sink_fn)


def new_batcher_from_env(
    work_fn: Callable[[int], Any] = square,
    sink_fn: Callable[[Result], Any] = print_result,
) -> "Batcher":
    """
    Create a new Batcher with options taken from environment variables.
    - BATCHER_JOB_COUNT (optional, defaults to 100)
    - BATCHER_WORKER_COUNT (optional, defaults to 3)
    - BATCHER_QUEUE_CAPACITY (optional, defaults to the job count)
    - BATCHER_ON_ERROR (optional, "isolate" or "fail_fast")
    """
    return Batcher(Options.from_env(), work_fn, sink_fn)


def run_batch(
    job_count: int,
    worker_count: int,
    work_fn: Callable[[int], Any] = square,
    sink_fn: Callable[[Result], Any] = print_result,
    *,
    capacity: Optional[int] = None,
    on_error: Optional[OnError] = None,
) -> None:
    """
    Run one batch and block until all jobs are processed and all results handled.

    :param job_count: Total number of jobs, ids 1..job_count.
    :param worker_count: Number of concurrent workers, at least 1.
    :param work_fn: Function applied to each job value.
    :param sink_fn: Function applied to each result.
    :param capacity: Optional bound for the job source and result sink.
    :param on_error: Work function failure policy.
    :raises InvalidConfigurationError: Before any thread starts, for invalid input.
    :raises BatcherError: If the batch failed while running.
    """
    new_batcher(job_count, worker_count, work_fn, sink_fn, capacity, on_error).run()


class Batcher:
    """
    Dispatcher for a single batch.

    State machine:
    IDLE -> JOBS_QUEUED -> WORKERS_RUNNING -> JOBS_EXHAUSTED -> WORKERS_DRAINED
    -> RESULTS_EXHAUSTED -> DONE (or FAILED).
    The result sink is closed only after every worker exited.
    """

    def __init__(
        self,
        options: Optional[Options] = None,
        work_fn: Callable[[int], Any] = square,
        sink_fn: Callable[[Result], Any] = print_result,
        name: str = "batch",
    ):
        self.name: str = name
        self.options: Options = options or Options()
        self.work_fn = work_fn
        self.sink_fn = sink_fn

        self.state: str = BatchState.IDLE
        self.state_history: List[str] = [BatchState.IDLE]
        self._state_lock = threading.Lock()
        self._started: bool = False

        self.job_source: Optional[Channel[Job]] = None
        self.result_sink: Optional[Channel[Result]] = None
        self.pool = WorkerPool(f"{name}-pool")
        self.collector = ResultCollector(f"{name}-collector")

        # Statistics, filled in by run()
        self.jobs_dispatched: int = 0
        self.duration_seconds: float = 0.0

    @property
    def results_handled(self) -> int:
        return self.collector.handled

    @property
    def failed_results(self) -> int:
        return self.collector.failed

    @property
    def workers(self) -> List[WorkerInfo]:
        return self.pool.infos()

    def run(self) -> None:
        """
        Run the batch to completion.

        :raises InvalidConfigurationError: If options or functions are invalid.
        :raises RuntimeError: If this batcher already ran.
        :raises BatcherError: If a worker or the collector failed; the batch
            is then in state FAILED and no partial success is reported.
        """
        self.options.validate()
        check_single_argument(self.work_fn, "work function")
        check_single_argument(self.sink_fn, "sink function")

        with self._state_lock:
            if self._started:
                raise RuntimeError(f"batch {self.name} already ran, state {self.state}")
            self._started = True

        perf_logger = PerformanceLogger(logger)
        perf_logger.start_timer(f"batch {self.name}")

        capacity = self.options.queue_capacity()
        job_source = Channel[Job](capacity, f"{self.name}-jobs")
        result_sink = Channel[Result](capacity, f"{self.name}-results")
        self.job_source = job_source
        self.result_sink = result_sink
        self._set_state(BatchState.JOBS_QUEUED)

        # The collector runs before any worker can emit a result.
        collector_done = self.collector.start(result_sink, self.sink_fn)
        try:
            workers_done = self.pool.start(
                self.options.worker_count,
                job_source,
                result_sink,
                self.work_fn,
                self.options.on_error,
            )
        except Exception:
            # Workers spawned before the failure still hold the job source.
            job_source.close()
            self.pool.join()
            result_sink.close()
            collector_done.wait()
            self.collector.join()
            self._set_state(BatchState.FAILED)
            raise
        self._set_state(BatchState.WORKERS_RUNNING)

        try:
            self._dispatch_jobs(job_source)
        finally:
            job_source.close()
            self._set_state(BatchState.JOBS_EXHAUSTED)

            workers_done.wait()
            self.pool.join()
            self._set_state(BatchState.WORKERS_DRAINED)

            result_sink.close()
            self._set_state(BatchState.RESULTS_EXHAUSTED)

            collector_done.wait()
            self.collector.join()
            self.duration_seconds = perf_logger.end_timer(f"batch {self.name}")

        error = self._first_error()
        if error is not None:
            self._set_state(BatchState.FAILED)
            logger.error(
                f"Batch {self.name} failed",
                error=error,
                jobs_dispatched=self.jobs_dispatched,
                results_handled=self.results_handled,
            )
            raise BatcherError(f"running batch {self.name}", error)

        self._set_state(BatchState.DONE)
        logger.info(
            f"Batch {self.name} done",
            jobs=self.jobs_dispatched,
            results=self.results_handled,
            failed=self.failed_results,
            workers=self.options.worker_count,
            duration_seconds=round(self.duration_seconds, 3),
        )

    def _dispatch_jobs(self, job_source: Channel[Job]) -> None:
        """Feed jobs 1..job_count into the job source, in ascending id order."""
        for job in generate_jobs(self.options.job_count):
            while True:
                if self.pool.aborted:
                    logger.warning(
                        f"Batch {self.name}: worker pool aborted, stopping dispatch",
                        jobs_dispatched=self.jobs_dispatched,
                    )
                    return
                try:
                    job_source.put(job, timeout=DISPATCH_POLL_INTERVAL)
                    break
                except TimeoutError:
                    continue
            self.jobs_dispatched += 1

    def _first_error(self) -> Optional[BaseException]:
        errors = self.pool.errors
        if errors:
            return errors[0]
        return self.collector.error

    def _set_state(self, state: str) -> None:
        with self._state_lock:
            previous = self.state
            self.state = state
            self.state_history.append(state)
        logger.debug(f"Batch {self.name}: {previous} -> {state}")
