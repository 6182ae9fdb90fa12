"""Refresh statistics domain model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class RefreshStats:
    """Running success/failure counters for occupancy fetches."""

    success_count: int = 0
    failure_count: int = 0
    last_success_time: datetime | None = None
    last_failure_time: datetime | None = None

    def record_success(self, when: datetime) -> None:
        self.success_count += 1
        self.last_success_time = when

    def record_failure(self, when: datetime) -> None:
        self.failure_count += 1
        self.last_failure_time = when

    @property
    def success_rate(self) -> float:
        """Share of successful fetches, 0.0 before any attempt."""
        total = self.success_count + self.failure_count
        return self.success_count / total if total > 0 else 0.0

    @property
    def description(self) -> str:
        return f"{self.success_count} success, {self.failure_count} failed"
