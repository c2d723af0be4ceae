"""Executor statistics snapshot."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StatsSnapshot:
    """
    Cumulative command counters at one moment.

    Every attempt increments ``total`` and exactly one of ``success``,
    ``failure`` or ``timeouts``. Timeouts are not also counted as failures.
    """

    total: int
    timeouts: int
    success: int
    failure: int
    is_closed: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "requests": {
                "total": self.total,
                "timeouts": self.timeouts,
                "success": self.success,
                "failure": self.failure,
            },
            "breaker": {"isClosed": self.is_closed},
        }
