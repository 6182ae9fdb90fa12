"""Domain layer - core business logic and models."""

from parking_occupancy.domain.models import (
    AppState,
    AvailabilityStatus,
    CadenceGroup,
    FacilityRecord,
    OccupancySnapshot,
    StaticFacilityInfo,
)
from parking_occupancy.domain.ports import (
    Clock,
    FacilityStore,
    LocationProvider,
    OccupancyClient,
    RateLimiter,
)

__all__ = [
    "AppState",
    "AvailabilityStatus",
    "CadenceGroup",
    "Clock",
    "FacilityRecord",
    "FacilityStore",
    "LocationProvider",
    "OccupancyClient",
    "OccupancySnapshot",
    "RateLimiter",
    "StaticFacilityInfo",
]
