"""
Model package for batcherPy.

Contains the data records and configuration objects of a batch.
"""

from .job import Job, new_job, generate_jobs
from .result import Result, ResultStatus
from .worker import WorkerInfo, WorkerStatus
from .options import Options, new_options
from .options_on_error import FailurePolicy, OnError

__all__ = [
    # Job related
    "Job",
    "new_job",
    "generate_jobs",
    # Result related
    "Result",
    "ResultStatus",
    # Worker related
    "WorkerInfo",
    "WorkerStatus",
    # Options
    "Options",
    "new_options",
    "OnError",
    "FailurePolicy",
]
