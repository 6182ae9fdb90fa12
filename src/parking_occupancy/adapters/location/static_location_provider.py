"""Location provider backed by the last known device fix."""

from __future__ import annotations

import logging

from parking_occupancy.domain.models.coordinate import Coordinate
from parking_occupancy.domain.ports.location_provider import LocationProvider

logger = logging.getLogger(__name__)

SYDNEY_CBD = Coordinate(latitude=-33.8688, longitude=151.2093)


class StaticLocationProvider(LocationProvider):
    """Returns the device location, or the centre of all known facilities."""

    def __init__(
        self,
        known_coordinates: list[Coordinate] | None = None,
        device_location: Coordinate | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            known_coordinates: Facility coordinates used to compute the fallback centre.
            device_location: Initial device fix, if any.
        """
        self.default_location = self.calculate_centre(known_coordinates or [])
        self._device_location = device_location
        logger.info(f"Location provider initialised. Default centre: {self.default_location}")

    @staticmethod
    def calculate_centre(coordinates: list[Coordinate]) -> Coordinate:
        """Average of the given coordinates, Sydney CBD when there are none."""
        if not coordinates:
            return SYDNEY_CBD
        return Coordinate(
            latitude=sum(c.latitude for c in coordinates) / len(coordinates),
            longitude=sum(c.longitude for c in coordinates) / len(coordinates),
        )

    @property
    def is_location_available(self) -> bool:
        return self._device_location is not None

    def current_coordinate(self) -> Coordinate:
        return self._device_location or self.default_location
