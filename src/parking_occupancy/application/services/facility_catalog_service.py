"""Service for loading static facility metadata into the store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from parking_occupancy.domain.models.coordinate import Coordinate
from parking_occupancy.domain.models.facility_record import FacilityRecord
from parking_occupancy.domain.models.facility_stats import FacilityStats

if TYPE_CHECKING:
    from datetime import datetime

    from parking_occupancy.domain.models.static_facility_info import StaticFacilityInfo
    from parking_occupancy.domain.ports import FacilityStore, LocationProvider, OccupancyClient

logger = logging.getLogger(__name__)

HISTORICAL_MARKER = "historical only"


class FacilityCatalogService:
    """Creates facility records from static metadata, without occupancy."""

    def __init__(
        self,
        store: FacilityStore,
        location_provider: LocationProvider,
        client: OccupancyClient | None = None,
        high_cadence_names: tuple[str, ...] | list[str] | None = None,
    ) -> None:
        """Initialize the catalog service.

        Args:
            store: Facility record store to populate.
            location_provider: Used to insert the nearest facilities first.
            client: Optional occupancy client for enumerating remote facilities.
            high_cadence_names: Allow-list for the high cadence group (None for the default).
        """
        self.store = store
        self.location_provider = location_provider
        self.client = client
        self.high_cadence_names = high_cadence_names
        self.is_loading_static_data = False

    def load_static_facilities_if_needed(self, catalog: list[StaticFacilityInfo]) -> int:
        """Insert one record per catalog entry unless the store already has records.

        Returns:
            Number of records inserted.
        """
        if self.store.fetch_all():
            logger.info("Facilities already loaded")
            return 0

        if self.is_loading_static_data:
            logger.info("Static data loading already in progress")
            return 0

        self.is_loading_static_data = True
        try:
            location = self.location_provider.current_coordinate()
            ordered = sorted(
                catalog,
                key=lambda info: location.distance_km(Coordinate(info.latitude, info.longitude)),
            )
            seen: set[str] = set()
            for info in ordered:
                if info.facility_id in seen:
                    logger.warning(f"Duplicate facility id {info.facility_id} in catalog, skipped")
                    continue
                seen.add(info.facility_id)
                self.store.insert(FacilityRecord.from_static_info(info, self.high_cadence_names))
            self.store.save()
            logger.info(f"Saved {len(seen)} static facilities")
        finally:
            self.is_loading_static_data = False

        return len(seen)

    def reload_static_facilities(self, catalog: list[StaticFacilityInfo]) -> int:
        """Discard every record and load the catalog again."""
        self.store.delete_all()
        self.store.save()
        logger.info("Cleared all facilities")
        return self.load_static_facilities_if_needed(catalog)

    def facility_stats(self, now: datetime) -> FacilityStats:
        records = self.store.fetch_all()
        with_data = [record for record in records if record.is_occupancy_cache_valid(now)]
        return FacilityStats(
            total_count=len(records),
            with_occupancy_data=len(with_data),
            favourite_count=sum(1 for record in records if record.is_favourite),
        )

    async def enumerate_remote_facilities(self) -> dict[str, str]:
        """List facilities known to the remote API, excluding historical-only entries."""
        if self.client is None:
            raise ValueError("An occupancy client is required to enumerate facilities")

        facilities = await self.client.fetch_all_facilities()
        current = {
            facility_id: name
            for facility_id, name in facilities.items()
            if HISTORICAL_MARKER not in name.lower()
        }
        logger.info(
            f"Enumerated {len(current)} facilities "
            f"({len(facilities) - len(current)} historical entries excluded)"
        )
        return current
