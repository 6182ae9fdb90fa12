"""Static facility metadata domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StaticFacilityInfo:
    """Metadata known about a facility before any occupancy is fetched."""

    facility_id: str
    name: str
    suburb: str
    address: str
    latitude: float
    longitude: float
    total_spaces: int
    tsn: str = ""
    tfnsw_facility_id: str = ""
