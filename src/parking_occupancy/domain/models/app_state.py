"""Application lifecycle state domain model."""

from enum import Enum


class AppState(Enum):
    """Foreground/background state that drives the refresh cadence."""

    ACTIVE = "active"
    BACKGROUND = "background"

    @property
    def refresh_interval(self) -> float:
        """Seconds between refresh cycles in this state."""
        if self is AppState.ACTIVE:
            return 30.0
        return 300.0
