"""Application services."""

from parking_occupancy.application.services.facility_catalog_service import (
    FacilityCatalogService,
)
from parking_occupancy.application.services.refresh_scheduler import RefreshScheduler

__all__ = ["FacilityCatalogService", "RefreshScheduler"]
