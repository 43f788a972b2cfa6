"""
ResultCollector - the single consumer draining the result sink.
"""

import asyncio
from typing import Any, Callable, Optional

from .channel import END_OF_STREAM, Channel
from .completion_group import CompletionGroup
from .runner import Runner, go_func
from ..helper.logging import get_logger
from ..helper.task import check_single_argument, get_function_name, is_async_function
from ..model.result import Result

logger = get_logger(__name__)


class ResultCollector:
    """
    Applies the sink function to every result, one at a time, in the order
    the results arrive in the sink.

    If the sink function raises, the error is kept and the collector keeps
    draining the sink without calling the sink function again, so no worker
    blocks on a full sink.
    """

    def __init__(self, name: str = "collector"):
        self.name: str = name
        self.handled: int = 0
        self.failed: int = 0
        self.drained: int = 0
        self.error: Optional[BaseException] = None
        self._runner: Optional[Runner] = None

    def start(
        self, result_sink: Channel[Result], sink_fn: Callable[[Result], Any]
    ) -> CompletionGroup:
        """
        Start the collector thread.

        :param result_sink: Channel the workers put results into.
        :param sink_fn: Function applied to each result.
        :returns: Completion handle signalled once end-of-stream was observed.
        :raises InvalidConfigurationError: If sink_fn is invalid.
        :raises RuntimeError: If the collector was already started.
        """
        if self._runner is not None:
            raise RuntimeError(f"result collector {self.name} already started")
        check_single_argument(sink_fn, "sink function")

        completion = CompletionGroup(f"{self.name}-done")
        completion.add(1)
        try:
            self._runner = go_func(
                self._collect, result_sink, sink_fn, completion, name=self.name
            )
        except Exception:
            completion.done()
            raise
        return completion

    def _collect(
        self,
        result_sink: Channel[Result],
        sink_fn: Callable[[Result], Any],
        completion: CompletionGroup,
    ) -> None:
        loop = asyncio.new_event_loop() if is_async_function(sink_fn) else None
        logger.debug(f"Result collector {self.name} started")

        try:
            while True:
                result = result_sink.take()
                if result is END_OF_STREAM:
                    break

                self.drained += 1
                if self.error is not None:
                    continue

                try:
                    if loop is not None:
                        loop.run_until_complete(sink_fn(result))
                    else:
                        sink_fn(result)
                except BaseException as e:
                    self.error = e
                    logger.error(
                        f"Sink function {get_function_name(sink_fn)} failed",
                        error=e,
                        job_id=result.job_id,
                    )
                    continue

                self.handled += 1
                if not result.is_success:
                    self.failed += 1
        finally:
            if loop is not None:
                loop.close()
            logger.debug(
                f"Result collector {self.name} exited",
                handled=self.handled,
                drained=self.drained,
            )
            completion.done()

    def join(self, timeout: Optional[float] = None) -> None:
        """
        Join the collector thread after its completion handle fired.

        :raises TimeoutError: If the thread is still alive after timeout.
        """
        if self._runner is not None:
            self._runner.get_results(timeout=timeout)
