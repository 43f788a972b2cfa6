"""
Error policy options for the batcher.

Decides what a worker does when the work function raises.
"""

from enum import Enum
from typing import Dict, Any


class FailurePolicy(str, Enum):
    """Work function failure policies."""

    ISOLATE = "isolate"
    FAIL_FAST = "fail_fast"


class OnError:
    """Options for handling work function failures.

    ISOLATE turns a failing job into a FAILED result and keeps the batch going.
    FAIL_FAST aborts the whole batch on the first failing job.
    """

    def __init__(self, policy: str = FailurePolicy.ISOLATE):
        """Initialize OnError options.

        Args:
            policy: Failure policy (isolate, fail_fast)
        """
        if policy not in [FailurePolicy.ISOLATE, FailurePolicy.FAIL_FAST]:
            raise ValueError("invalid failure policy")

        self.policy = FailurePolicy(policy)

    @property
    def fail_fast(self) -> bool:
        return self.policy == FailurePolicy.FAIL_FAST

    def is_valid(self) -> bool:
        """Check if the OnError options are valid."""
        return self.policy in [FailurePolicy.ISOLATE, FailurePolicy.FAIL_FAST]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"policy": self.policy.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OnError":
        """Create OnError from dictionary."""
        return cls(policy=data.get("policy", FailurePolicy.ISOLATE))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OnError):
            return NotImplemented
        return self.policy == other.policy

    def __repr__(self) -> str:
        return f"OnError(policy={self.policy.value!r})"

