"""
Worker model for the batcher.
Status constants and a read-only snapshot of a running worker.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


# Worker status constants
class WorkerStatus:
    READY = "READY"
    RUNNING = "RUNNING"
    FAILED = "FAILED"
    STOPPED = "STOPPED"


@dataclass(frozen=True)
class WorkerInfo:
    """
    Snapshot of a worker's state, as reported by the worker pool.
    """

    index: int
    name: str
    status: str = WorkerStatus.READY
    jobs_processed: int = 0
    jobs_failed: int = 0
    started_at: Optional[datetime] = None
    stopped_at: Optional[datetime] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert worker info to dictionary for serialization."""
        return {
            "index": self.index,
            "name": self.name,
            "status": self.status,
            "jobs_processed": self.jobs_processed,
            "jobs_failed": self.jobs_failed,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "stopped_at": self.stopped_at.isoformat() if self.stopped_at else None,
            "error": self.error,
        }
