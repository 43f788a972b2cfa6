"""
batcherPy - a concurrent batch dispatch engine

Distributes a fixed batch of jobs across a bounded pool of worker threads and
collects their results:
- Bounded, closable job source and result sink channels
- Fixed-size worker pool with one completion handle
- Single sequential result collector
- Deterministic, leak-free shutdown ordering
- Tagged success/failure results for failing work functions
"""

from ._version import __version__

# Core exports
from .batcher import (
    Batcher,
    BatchState,
    new_batcher,
    new_batcher_from_env,
    print_result,
    run_batch,
    square,
)

from .core.channel import (
    END_OF_STREAM,
    Channel,
)

from .core.completion_group import (
    CompletionGroup,
)

from .core.worker_pool import (
    WorkerPool,
)

from .core.collector import (
    ResultCollector,
)

from .model.job import (
    Job,
    new_job,
)

from .model.result import (
    Result,
    ResultStatus,
)

from .model.worker import (
    WorkerInfo,
    WorkerStatus,
)

from .model.options import (
    Options,
    new_options,
)

from .model.options_on_error import (
    FailurePolicy,
    OnError,
)

from .helper.error import (
    BatcherError,
    ClosedQueueError,
    InvalidConfigurationError,
)

# Import submodules for direct access
from . import core
from . import helper
from . import model

__all__ = [
    # Dispatcher
    "Batcher",
    "BatchState",
    "new_batcher",
    "new_batcher_from_env",
    "run_batch",
    "square",
    "print_result",
    # Concurrency primitives
    "Channel",
    "END_OF_STREAM",
    "CompletionGroup",
    "WorkerPool",
    "ResultCollector",
    # Models
    "Job",
    "new_job",
    "Result",
    "ResultStatus",
    "WorkerInfo",
    "WorkerStatus",
    # Configuration
    "Options",
    "new_options",
    "OnError",
    "FailurePolicy",
    # Exceptions
    "BatcherError",
    "ClosedQueueError",
    "InvalidConfigurationError",
    # Submodules
    "core",
    "helper",
    "model",
    # Version info
    "__version__",
]
