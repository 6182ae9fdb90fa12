"""Occupancy client port."""

from typing import Protocol

from parking_occupancy.domain.models.occupancy_snapshot import OccupancySnapshot


class OccupancyClient(Protocol):
    """Port for fetching live occupancy from the remote API."""

    async def fetch_facility(self, facility_id: str) -> OccupancySnapshot:
        """Fetch occupancy for one facility.

        Raises:
            OccupancyClientError: On any failure (see ``domain.errors``).
        """
        ...

    async def fetch_all_facilities(self) -> dict[str, str]:
        """Enumerate all facilities as a mapping of id to display name."""
        ...
