"""
Job model for the batcher.
A Job is one immutable unit of input work with a batch-unique id.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional


@dataclass(frozen=True)
class Job:
    """
    Job represents one unit of work in a batch.
    Ids are assigned sequentially by the dispatcher, starting at 1.
    """

    id: int
    value: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert job to dictionary for serialization."""
        return {
            "id": self.id,
            "value": self.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Job":
        """Create job from dictionary."""
        return cls(id=int(data["id"]), value=int(data.get("value", data["id"])))


def new_job(id: int, value: Optional[int] = None) -> Job:
    """
    Create a new job. The value defaults to the id.

    :param id: The job id, unique within the batch.
    :param value: The input value handed to the work function.
    :returns: New job instance.
    :raises ValueError: If the id is negative.
    """
    if id < 0:
        raise ValueError("job id cannot be negative")

    return Job(id=id, value=id if value is None else value)


def generate_jobs(job_count: int) -> Iterator[Job]:
    """
    Generate the jobs of a batch in ascending id order (1..job_count).

    :param job_count: Number of jobs to generate.
    :returns: Iterator over the jobs.
    """
    for i in range(1, job_count + 1):
        yield new_job(i)
