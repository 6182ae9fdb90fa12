"""Scheduler settings domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SchedulerSettings:
    """Tunables of the refresh scheduler."""

    nearest_count: int = 5  # Facilities refreshed when there are no favourites
    remaining_phase_delay_seconds: float = 1.0  # Extra pause per fetch in the remaining phase
    stale_after_seconds: float = 30.0  # Age after which an on-demand refresh is made
