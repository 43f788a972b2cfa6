"""
Worker - takes jobs from the shared job source until end-of-stream and
emits exactly one result per job into the shared result sink.
"""

import asyncio
import threading
from datetime import datetime
from typing import Any, Callable, Optional

from .channel import END_OF_STREAM, Channel
from .completion_group import CompletionGroup
from .runner import Runner, go_func
from ..helper.error import BatcherError
from ..helper.logging import get_logger
from ..helper.task import get_function_name, is_async_function
from ..model.job import Job
from ..model.options_on_error import OnError
from ..model.result import Result
from ..model.worker import WorkerInfo, WorkerStatus

logger = get_logger(__name__)


class Worker:
    """
    A single concurrent execution unit of the worker pool.

    The worker signals its completion group exactly once when it exits,
    whether it processed zero jobs, many jobs, or stopped on a fatal error.
    """

    def __init__(
        self,
        index: int,
        job_source: Channel[Job],
        result_sink: Channel[Result],
        work_fn: Callable[[int], Any],
        completion: CompletionGroup,
        on_error: Optional[OnError] = None,
        abort_event: Optional[threading.Event] = None,
        pool_name: str = "pool",
    ):
        self.index: int = index
        self.name: str = f"{pool_name}-worker-{index}"
        self.job_source = job_source
        self.result_sink = result_sink
        self.work_fn = work_fn
        self.is_async: bool = is_async_function(work_fn)
        self.completion = completion
        self.on_error: OnError = on_error or OnError()
        self.abort_event: threading.Event = abort_event or threading.Event()

        self.status: str = WorkerStatus.READY
        self.jobs_processed: int = 0
        self.jobs_failed: int = 0
        self.error: Optional[BaseException] = None
        self.started_at: Optional[datetime] = None
        self.stopped_at: Optional[datetime] = None

    def start(self) -> Runner:
        """Start the worker loop on its own thread."""
        return go_func(self.run, name=self.name)

    def run(self) -> None:
        """
        Worker loop: take, compute, put, repeat until end-of-stream.

        :raises ClosedQueueError: If the result sink was closed while this
            worker still had a result to emit.
        :raises BatcherError: If the work function failed under FAIL_FAST.
        """
        self.status = WorkerStatus.RUNNING
        self.started_at = datetime.now()
        loop = asyncio.new_event_loop() if self.is_async else None
        logger.debug(f"Worker {self.name} started")

        try:
            while True:
                if self.abort_event.is_set():
                    logger.debug(f"Worker {self.name}: batch aborted, stopping")
                    break

                job = self.job_source.take()
                if job is END_OF_STREAM:
                    break

                result = self._process(job, loop)
                self.result_sink.put(result)
                self.jobs_processed += 1

            self.status = WorkerStatus.STOPPED
        except BaseException as e:
            # Includes SystemExit and CancelledError from the work function,
            # which no policy turns into a result.
            self.status = WorkerStatus.FAILED
            self.error = e
            self.abort_event.set()
            raise
        finally:
            if loop is not None:
                loop.close()
            self.stopped_at = datetime.now()
            logger.debug(
                f"Worker {self.name} exited",
                status=self.status,
                jobs_processed=self.jobs_processed,
            )
            self.completion.done()

    def _process(self, job: Job, loop: Optional[asyncio.AbstractEventLoop]) -> Result:
        try:
            if loop is not None:
                output = loop.run_until_complete(self.work_fn(job.value))
            else:
                output = self.work_fn(job.value)
        except Exception as e:
            if self.on_error.fail_fast:
                raise BatcherError(f"processing job {job.id}", e)

            self.jobs_failed += 1
            logger.warning(
                f"Work function {get_function_name(self.work_fn)} failed",
                job_id=job.id,
                worker=self.name,
                error=e,
            )
            return Result.failed(job, e, self.name)

        return Result.succeeded(job, output, self.name)

    def info(self) -> WorkerInfo:
        """Return a snapshot of this worker's state."""
        return WorkerInfo(
            index=self.index,
            name=self.name,
            status=self.status,
            jobs_processed=self.jobs_processed,
            jobs_failed=self.jobs_failed,
            started_at=self.started_at,
            stopped_at=self.stopped_at,
            error=str(self.error) if self.error is not None else None,
        )
