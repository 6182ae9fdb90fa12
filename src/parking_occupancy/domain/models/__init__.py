"""Domain models for parking occupancy."""

from parking_occupancy.domain.models.app_state import AppState
from parking_occupancy.domain.models.availability_status import AvailabilityStatus
from parking_occupancy.domain.models.cadence_group import CadenceGroup
from parking_occupancy.domain.models.coordinate import Coordinate
from parking_occupancy.domain.models.error_details import ErrorDetails
from parking_occupancy.domain.models.facility_record import (
    OCCUPANCY_CACHE_VALIDITY,
    FacilityRecord,
    failure_backoff_seconds,
    success_interval_seconds,
)
from parking_occupancy.domain.models.facility_stats import FacilityStats
from parking_occupancy.domain.models.initial_load_progress import InitialLoadProgress, LoadPhase
from parking_occupancy.domain.models.occupancy_snapshot import OccupancySnapshot, ZoneOccupancy
from parking_occupancy.domain.models.refresh_state import RefreshState
from parking_occupancy.domain.models.refresh_stats import RefreshStats
from parking_occupancy.domain.models.scheduler_settings import SchedulerSettings
from parking_occupancy.domain.models.static_facility_info import StaticFacilityInfo

__all__ = [
    "OCCUPANCY_CACHE_VALIDITY",
    "AppState",
    "AvailabilityStatus",
    "CadenceGroup",
    "Coordinate",
    "ErrorDetails",
    "FacilityRecord",
    "FacilityStats",
    "InitialLoadProgress",
    "LoadPhase",
    "OccupancySnapshot",
    "RefreshState",
    "RefreshStats",
    "SchedulerSettings",
    "StaticFacilityInfo",
    "ZoneOccupancy",
    "failure_backoff_seconds",
    "success_interval_seconds",
]
