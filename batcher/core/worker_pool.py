"""
WorkerPool - a fixed-size set of workers draining one job source into one result sink.
"""

import threading
from typing import Any, Callable, List, Optional

from .channel import Channel
from .completion_group import CompletionGroup
from .runner import Runner
from .worker import Worker
from ..helper.error import InvalidConfigurationError
from ..helper.logging import get_logger
from ..helper.task import check_single_argument
from ..model.job import Job
from ..model.options_on_error import OnError
from ..model.result import Result
from ..model.worker import WorkerInfo

logger = get_logger(__name__)


class WorkerPool:
    """
    Starts all workers together and hands back one completion handle for them.
    Which worker processes which job is not specified.
    """

    def __init__(self, name: str = "pool"):
        self.name: str = name
        self.workers: List[Worker] = []
        self.runners: List[Runner] = []
        self.abort_event = threading.Event()
        self._started: bool = False

    @property
    def aborted(self) -> bool:
        """True once a worker hit a fatal error."""
        return self.abort_event.is_set()

    @property
    def errors(self) -> List[BaseException]:
        """Fatal errors of failed workers, in worker order."""
        return [w.error for w in self.workers if w.error is not None]

    def start(
        self,
        worker_count: int,
        job_source: Channel[Job],
        result_sink: Channel[Result],
        work_fn: Callable[[int], Any],
        on_error: Optional[OnError] = None,
    ) -> CompletionGroup:
        """
        Spawn worker_count workers immediately.

        :param worker_count: Number of workers, at least 1.
        :param job_source: Shared channel the workers take jobs from.
        :param result_sink: Shared channel the workers put results into.
        :param work_fn: Function applied to each job value.
        :param on_error: Work function failure policy.
        :returns: Completion handle whose wait() returns once every worker exited.
        :raises InvalidConfigurationError: If worker_count < 1 or work_fn is invalid.
        :raises RuntimeError: If the pool was already started.
        """
        if self._started:
            raise RuntimeError(f"worker pool {self.name} already started")
        if not isinstance(worker_count, int) or worker_count < 1:
            raise InvalidConfigurationError(
                f"worker count must be at least 1, got {worker_count!r}"
            )
        check_single_argument(work_fn, "work function")

        self._started = True
        completion = CompletionGroup(f"{self.name}-workers")
        completion.add(worker_count)

        spawned = 0
        try:
            for index in range(1, worker_count + 1):
                worker = Worker(
                    index,
                    job_source,
                    result_sink,
                    work_fn,
                    completion,
                    on_error=on_error,
                    abort_event=self.abort_event,
                    pool_name=self.name,
                )
                self.workers.append(worker)
                self.runners.append(worker.start())
                spawned += 1
        except Exception:
            # Release the slots of workers that never started so wait() cannot hang.
            for _ in range(worker_count - spawned):
                completion.done()
            self.abort_event.set()
            raise

        logger.debug(f"Worker pool {self.name} started", workers=worker_count)
        return completion

    def join(self, timeout: Optional[float] = None) -> None:
        """Join the worker threads after their completion handle fired."""
        for runner in self.runners:
            runner.join(timeout=timeout)

    def infos(self) -> List[WorkerInfo]:
        """Snapshots of all workers."""
        return [w.info() for w in self.workers]

    def jobs_processed(self) -> int:
        """Total number of results emitted by all workers."""
        return sum(w.jobs_processed for w in self.workers)
