"""Availability status domain model."""

from __future__ import annotations

from enum import Enum


class AvailabilityStatus(Enum):
    """Coarse availability of a facility.

    Thresholds follow the TfNSW recommendation: full when no spot is left,
    almost full when fewer than 10% of spots are left.
    """

    AVAILABLE = "available"
    ALMOST_FULL = "almost_full"
    FULL = "full"
    NO_DATA = "no_data"

    @property
    def text(self) -> str:
        """Human readable label."""
        return {
            AvailabilityStatus.AVAILABLE: "Available",
            AvailabilityStatus.ALMOST_FULL: "Almost Full",
            AvailabilityStatus.FULL: "Full",
            AvailabilityStatus.NO_DATA: "No Data",
        }[self]

    @classmethod
    def classify(cls, available_spots: int | None, total_spaces: int) -> AvailabilityStatus:
        """Classify availability from spot counts.

        Args:
            available_spots: Available spots, or None when there is no valid data.
            total_spaces: Total capacity of the facility.

        Returns:
            The availability status.
        """
        if available_spots is None:
            return cls.NO_DATA
        if available_spots <= 0:
            return cls.FULL
        if available_spots < total_spaces // 10:
            return cls.ALMOST_FULL
        return cls.AVAILABLE
