"""
Threadsafe Runner - Go-like background execution with a result slot.
"""

import threading
import asyncio
import queue
from typing import Callable, Any, Optional

from ..helper.logging import get_logger
from ..helper.task import get_function_name, is_async_function

logger = get_logger(__name__)


class Runner(threading.Thread):
    """
    Runs a single task on its own thread and keeps its outcome.
    Every concurrent flow of a batch (workers, collector) runs on a Runner.

    :param task: The synchronous or asynchronous function to execute.
    :param args: Arguments to pass to the task function.
    :param name: Thread name, defaults to the task name.
    """

    def __init__(
        self,
        task: Callable[..., Any],
        *args: Any,
        name: Optional[str] = None,
        **kwargs: Any,
    ):
        """
        Initializes the Runner thread.

        :param task: The synchronous or asynchronous function to execute.
        :param args: Arguments to pass to the task function.
        """
        super().__init__(name=name or get_function_name(task), daemon=True)
        self.task = task
        self.args = args
        self.kwargs = kwargs
        self.is_async = is_async_function(task)
        self._result_queue: queue.Queue[Any] = queue.Queue(maxsize=1)

    def go(self) -> None:
        """Starts the Runner thread in the background."""
        self.start()

    def run(self) -> None:
        """
        The main execution method for the thread.
        Async tasks get a fresh event loop that is closed afterwards.
        """
        try:
            if self.is_async:
                result = asyncio.run(self.task(*self.args, **self.kwargs))
            else:
                result = self.task(*self.args, **self.kwargs)

            self._result_queue.put(result)
        except BaseException as e:
            logger.error(f"Runner {self.name} task failed", error=e)
            self._result_queue.put(e)

    def get_results(self, timeout: Optional[float] = None) -> Any:
        """
        Waits for the thread to complete and returns the result.

        :param timeout: Time in seconds to wait for the result. If None, waits indefinitely.
        :returns: The result returned by the executed task function.
        :raises TimeoutError: If the result is not available within the specified timeout.
        :raises Exception: If the task execution in the thread failed.
        """
        self.join(timeout=timeout)

        if self.is_alive():
            raise TimeoutError(f"runner {self.name} timed out after {timeout} seconds")

        try:
            result = self._result_queue.get(block=False)
        except queue.Empty:
            return None

        if isinstance(result, BaseException):
            raise result

        return result


def go_func(
    func: Callable[..., Any], *args: Any, name: Optional[str] = None, **kwargs: Any
) -> Runner:
    """
    Go-like async function execution: create a Runner and start it.

    :param func: The function to execute.
    :param args: Positional arguments for the function.
    :param name: Optional thread name.
    :param kwargs: Keyword arguments for the function.
    :returns: A running Runner instance.
    """
    runner = Runner(func, *args, name=name, **kwargs)
    runner.go()
    return runner
