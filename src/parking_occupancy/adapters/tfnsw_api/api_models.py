"""Wire schema of the TfNSW car park API.

Numbers arrive as strings; conversion to domain types happens in
``to_snapshot`` so that a malformed count is a decode failure rather than a
silent zero.
"""

from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field

from parking_occupancy.adapters.tfnsw_api.constants import TFNSW_FEED_TIMEZONE
from parking_occupancy.domain.models.occupancy_snapshot import OccupancySnapshot, ZoneOccupancy


def _parse_int(value: str | None, default: int = 0) -> int:
    if value is None or value == "":
        return default
    return int(value)


def _parse_float(value: str | None) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def _to_utc(value: datetime | None) -> datetime | None:
    """Convert a feed timestamp to UTC, reading naive values as feed-local time."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo(TFNSW_FEED_TIMEZONE))
    return value.astimezone(UTC)


class ParkingOccupancyApi(BaseModel):
    """Occupancy counters of a facility or zone."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    loop: str | None = None
    total: str | None = None
    monthlies: str | None = None
    open_gate: str | None = None
    transients: str | None = None


class ParkingLocationApi(BaseModel):
    """Location block of a facility."""

    model_config = ConfigDict(extra="ignore")

    suburb: str = ""
    address: str = ""
    latitude: str | None = None
    longitude: str | None = None


class ParkingZoneApi(BaseModel):
    """One zone within a facility."""

    model_config = ConfigDict(extra="ignore")

    zone_id: str
    zone_name: str = ""
    spots: str = "0"
    occupancy: ParkingOccupancyApi = Field(default_factory=ParkingOccupancyApi)
    parent_zone_id: str = ""


class ParkingApiResponse(BaseModel):
    """Response of ``GET /carpark?facility={id}``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    facility_id: str
    facility_name: str
    tsn: str = ""
    spots: str
    zones: list[ParkingZoneApi] = Field(default_factory=list)
    park_id: str | None = Field(default=None, alias="ParkID")
    location: ParkingLocationApi = Field(default_factory=ParkingLocationApi)
    occupancy: ParkingOccupancyApi = Field(default_factory=ParkingOccupancyApi)
    message_date: datetime | None = Field(default=None, alias="MessageDate")
    tfnsw_facility_id: str = ""

    def to_snapshot(self) -> OccupancySnapshot:
        """Convert to the domain snapshot.

        Raises:
            ValueError: If a numeric field is not a number.
        """
        return OccupancySnapshot(
            facility_id=self.facility_id,
            facility_name=self.facility_name,
            total_spaces=_parse_int(self.spots),
            occupied=_parse_int(self.occupancy.total),
            message_date=_to_utc(self.message_date),
            suburb=self.location.suburb,
            address=self.location.address,
            latitude=_parse_float(self.location.latitude),
            longitude=_parse_float(self.location.longitude),
            tsn=self.tsn,
            tfnsw_facility_id=self.tfnsw_facility_id,
            zones=[
                ZoneOccupancy(
                    zone_id=zone.zone_id,
                    zone_name=zone.zone_name,
                    total_spaces=_parse_int(zone.spots),
                    occupied=_parse_int(zone.occupancy.total),
                    parent_zone_id=zone.parent_zone_id,
                )
                for zone in self.zones
            ],
        )
