"""
Result model for the batcher.
A Result carries the outcome of exactly one Job, tagged as success or failure.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .job import Job


# Result status constants
class ResultStatus:
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class Result:
    """
    Result represents the output of one processed Job.
    job_id correlates back to the originating Job.
    """

    job_id: int
    output: Optional[int] = None
    value: Optional[int] = None
    status: str = ResultStatus.SUCCEEDED
    error: Optional[str] = None
    worker_name: str = ""

    @property
    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCEEDED

    @classmethod
    def succeeded(cls, job: Job, output: int, worker_name: str = "") -> "Result":
        """Create the result of a job whose work function returned."""
        return cls(
            job_id=job.id,
            output=output,
            value=job.value,
            status=ResultStatus.SUCCEEDED,
            worker_name=worker_name,
        )

    @classmethod
    def failed(cls, job: Job, error: BaseException, worker_name: str = "") -> "Result":
        """Create the result of a job whose work function raised."""
        return cls(
            job_id=job.id,
            output=None,
            value=job.value,
            status=ResultStatus.FAILED,
            error=f"{error.__class__.__name__}: {error}",
            worker_name=worker_name,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "job_id": self.job_id,
            "output": self.output,
            "value": self.value,
            "status": self.status,
            "error": self.error,
            "worker_name": self.worker_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Result":
        """Create result from dictionary."""
        return cls(
            job_id=data.get("job_id", 0),
            output=data.get("output"),
            value=data.get("value"),
            status=data.get("status", ResultStatus.SUCCEEDED),
            error=data.get("error"),
            worker_name=data.get("worker_name", ""),
        )
