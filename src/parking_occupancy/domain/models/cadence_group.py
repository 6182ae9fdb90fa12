"""Cadence group domain model."""

from __future__ import annotations

from enum import Enum

from parking_occupancy.domain.models.app_state import AppState

# Busy commuter car parks that fill up within minutes of the morning peak
DEFAULT_HIGH_CADENCE_NAMES: tuple[str, ...] = (
    "Tallawong",
    "Kellyville",
    "Bella Vista",
    "Hills Showground",
    "Cherrybrook",
    "Edmondson Park",
    "Leppington",
)


class CadenceGroup(Enum):
    """Static classification controlling how often a facility is refreshed."""

    HIGH = "high"
    STANDARD = "standard"

    @property
    def active_interval(self) -> float:
        """Refresh interval in seconds while the app is in the foreground."""
        return 15.0 if self is CadenceGroup.HIGH else 60.0

    @property
    def background_interval(self) -> float:
        """Refresh interval in seconds while the app is in the background."""
        return 300.0 if self is CadenceGroup.HIGH else 600.0

    def interval_for(self, app_state: AppState) -> float:
        """Return the base interval for the given lifecycle state."""
        if app_state is AppState.ACTIVE:
            return self.active_interval
        return self.background_interval

    @classmethod
    def classify(
        cls, name: str, high_cadence_names: tuple[str, ...] | list[str] | None = None
    ) -> CadenceGroup:
        """Classify a facility by name against the high-cadence allow-list.

        Matching is a case-insensitive substring match, so "Tallawong" covers
        "Park&Ride - Tallawong P1" through "P3".
        """
        allow_list = (
            DEFAULT_HIGH_CADENCE_NAMES if high_cadence_names is None else high_cadence_names
        )
        lowered = name.lower()
        if any(entry.lower() in lowered for entry in allow_list if entry):
            return cls.HIGH
        return cls.STANDARD
