"""Facility catalog loader."""

import logging

from parking_occupancy.adapters.config.app_config import AppConfig
from parking_occupancy.domain.models.static_facility_info import StaticFacilityInfo

logger = logging.getLogger(__name__)


class FacilityCatalogLoader:
    """Loads static facility metadata from app config."""

    @staticmethod
    def load(config: AppConfig) -> list[StaticFacilityInfo]:
        """Load the facility catalog, skipping incomplete entries."""
        catalog: list[StaticFacilityInfo] = []

        for facility_data in config.get_facilities_config():
            if not isinstance(facility_data, dict):
                continue

            facility_id = facility_data.get("facility_id")
            name = facility_data.get("name")
            if facility_id is None or not name:
                logger.warning(f"Skipping facility without id or name: {facility_data}")
                continue

            try:
                latitude = float(facility_data["latitude"])
                longitude = float(facility_data["longitude"])
                total_spaces = int(facility_data.get("total_spaces", 0))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping facility {facility_id} with invalid numbers: {e}")
                continue

            catalog.append(
                StaticFacilityInfo(
                    facility_id=str(facility_id),
                    name=str(name),
                    suburb=str(facility_data.get("suburb", "")),
                    address=str(facility_data.get("address", "")),
                    latitude=latitude,
                    longitude=longitude,
                    total_spaces=max(0, total_spaces),
                    tsn=str(facility_data.get("tsn", "")),
                    tfnsw_facility_id=str(facility_data.get("tfnsw_facility_id", "")),
                )
            )

        return catalog
