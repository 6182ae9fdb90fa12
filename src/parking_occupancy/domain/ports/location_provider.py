"""Location provider port."""

from typing import Protocol

from parking_occupancy.domain.models.coordinate import Coordinate


class LocationProvider(Protocol):
    """Port for a best-effort current coordinate."""

    def current_coordinate(self) -> Coordinate:
        """Return the device location or a fixed fallback; never fails."""
        ...
