"""Occupancy snapshot domain model."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ZoneOccupancy:
    """Occupancy of a single zone (level or section) within a facility."""

    zone_id: str
    zone_name: str
    total_spaces: int
    occupied: int
    parent_zone_id: str = ""


@dataclass(frozen=True)
class OccupancySnapshot:
    """Occupancy of one facility as returned by the occupancy API."""

    facility_id: str
    facility_name: str
    total_spaces: int
    occupied: int
    message_date: datetime | None = None
    suburb: str = ""
    address: str = ""
    latitude: float | None = None
    longitude: float | None = None
    tsn: str = ""
    tfnsw_facility_id: str = ""
    zones: list[ZoneOccupancy] = field(default_factory=list)

    @property
    def available_spots(self) -> int:
        """Available spots, never negative."""
        return max(0, self.total_spaces - self.occupied)
