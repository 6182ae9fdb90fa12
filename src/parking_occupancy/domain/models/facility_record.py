"""Facility record domain model with refresh and backoff bookkeeping."""

from __future__ import annotations

import math
from dataclasses import InitVar, dataclass, field
from datetime import UTC, datetime, timedelta

from parking_occupancy.domain.models.app_state import AppState
from parking_occupancy.domain.models.availability_status import AvailabilityStatus
from parking_occupancy.domain.models.cadence_group import CadenceGroup
from parking_occupancy.domain.models.coordinate import Coordinate
from parking_occupancy.domain.models.occupancy_snapshot import OccupancySnapshot, ZoneOccupancy
from parking_occupancy.domain.models.static_facility_info import StaticFacilityInfo

OCCUPANCY_CACHE_VALIDITY = timedelta(minutes=15)
FAR_PAST = datetime.min.replace(tzinfo=UTC)

FAVOURITE_INTERVAL_MULTIPLIER = 0.5
MAX_SUCCESS_BACKOFF_EXPONENT = 4
FAILURE_BACKOFF_BASE_SECONDS = 120.0
FAILURE_BACKOFF_CAP_SECONDS = 1800.0


def success_interval_seconds(
    cadence_group: CadenceGroup,
    app_state: AppState,
    is_favourite: bool,
    consecutive_failures: int,
) -> float:
    """Interval until the next refresh after a successful fetch."""
    interval = cadence_group.interval_for(app_state)
    interval *= FAVOURITE_INTERVAL_MULTIPLIER if is_favourite else 1.0
    if consecutive_failures > 0:
        interval *= 2 ** min(consecutive_failures, MAX_SUCCESS_BACKOFF_EXPONENT)
    return interval


def failure_backoff_seconds(consecutive_failures: int) -> float:
    """Backoff after a failed fetch, doubling per failure and capped at 30 minutes."""
    return min(
        FAILURE_BACKOFF_BASE_SECONDS * 2**consecutive_failures, FAILURE_BACKOFF_CAP_SECONDS
    )


@dataclass(eq=False)
class FacilityRecord:
    """One physical parking facility and its occupancy/refresh state.

    Records are mutated in place by the refresh scheduler. Identity is the
    object itself; two records with the same id are still distinct objects.
    """

    facility_id: str
    name: str
    suburb: str
    address: str
    latitude: float
    longitude: float
    total_spaces: int
    tsn: str = ""
    tfnsw_facility_id: str = ""
    is_favourite: bool = False
    last_visited: datetime | None = None
    last_updated: datetime | None = None
    cadence: InitVar[CadenceGroup] = CadenceGroup.STANDARD

    cached_occupied: int | None = None
    cached_available: int | None = None
    occupancy_cached_at: datetime | None = None
    zones: list[ZoneOccupancy] = field(default_factory=list)

    last_refreshed_at: datetime | None = None
    next_scheduled_refresh_at: datetime = FAR_PAST
    consecutive_failures: int = 0
    last_failure_at: datetime | None = None
    _cadence_group: CadenceGroup = field(default=CadenceGroup.STANDARD, init=False, repr=False)

    def __post_init__(self, cadence: CadenceGroup) -> None:
        self._cadence_group = cadence

    @classmethod
    def from_static_info(
        cls,
        info: StaticFacilityInfo,
        high_cadence_names: tuple[str, ...] | list[str] | None = None,
    ) -> FacilityRecord:
        """Create a record with no occupancy data yet."""
        return cls(
            facility_id=info.facility_id,
            name=info.name,
            suburb=info.suburb,
            address=info.address,
            latitude=info.latitude,
            longitude=info.longitude,
            total_spaces=info.total_spaces,
            tsn=info.tsn,
            tfnsw_facility_id=info.tfnsw_facility_id,
            cadence=CadenceGroup.classify(info.name, high_cadence_names),
        )

    @property
    def cadence_group(self) -> CadenceGroup:
        """Cadence group assigned at creation."""
        return self._cadence_group

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    # Occupancy cache

    def is_occupancy_cache_valid(self, now: datetime) -> bool:
        """Whether cached occupancy is younger than the validity window."""
        if self.occupancy_cached_at is None or self.cached_available is None:
            return False
        return now - self.occupancy_cached_at < OCCUPANCY_CACHE_VALIDITY

    def available_spots(self, now: datetime) -> int | None:
        """Available spots, or None when there is no valid cached data."""
        if not self.is_occupancy_cache_valid(now):
            return None
        return self.cached_available

    def occupied_spots(self, now: datetime) -> int | None:
        if not self.is_occupancy_cache_valid(now):
            return None
        return self.cached_occupied

    def availability_status(self, now: datetime) -> AvailabilityStatus:
        return AvailabilityStatus.classify(self.available_spots(now), self.total_spaces)

    def occupancy_percentage(self, now: datetime) -> float | None:
        """Occupied share of total capacity in percent, or None without data."""
        occupied = self.occupied_spots(now)
        if occupied is None or self.total_spaces <= 0:
            return None
        return min(100.0, occupied / self.total_spaces * 100)

    # Refresh bookkeeping

    def time_since_last_refresh(self, now: datetime) -> float:
        """Seconds since the last successful refresh (infinite if never)."""
        if self.last_refreshed_at is None:
            return math.inf
        return (now - self.last_refreshed_at).total_seconds()

    def is_due(self, now: datetime) -> bool:
        return self.next_scheduled_refresh_at <= now

    def update_from_snapshot(self, snapshot: OccupancySnapshot, now: datetime) -> None:
        """Apply a successful fetch: refresh the cache and clear failure state."""
        if snapshot.total_spaces > 0:
            self.total_spaces = snapshot.total_spaces
        self.cached_occupied = snapshot.occupied
        self.cached_available = max(0, self.total_spaces - snapshot.occupied)
        self.occupancy_cached_at = now
        self.zones = list(snapshot.zones)
        self.last_updated = snapshot.message_date or now

        self.consecutive_failures = 0
        self.last_failure_at = None
        self.last_refreshed_at = now

    def schedule_next_refresh(self, app_state: AppState, now: datetime) -> None:
        """Schedule the next refresh using the success-path cadence."""
        interval = success_interval_seconds(
            self._cadence_group, app_state, self.is_favourite, self.consecutive_failures
        )
        self.next_scheduled_refresh_at = now + timedelta(seconds=interval)

    def mark_refresh_failed(self, now: datetime) -> None:
        """Record a failed fetch; the cached occupancy is left to age out."""
        self.consecutive_failures += 1
        self.last_failure_at = now
        backoff = failure_backoff_seconds(self.consecutive_failures)
        self.next_scheduled_refresh_at = now + timedelta(seconds=backoff)

    def reset_refresh_state(self) -> None:
        """Forget all refresh history, making the record immediately due."""
        self.consecutive_failures = 0
        self.last_failure_at = None
        self.last_refreshed_at = None
        self.next_scheduled_refresh_at = FAR_PAST

    # User interaction

    def toggle_favourite(self) -> bool:
        self.is_favourite = not self.is_favourite
        return self.is_favourite

    def mark_visited(self, now: datetime) -> None:
        self.last_visited = now
