"""Published refresh state domain model."""

from dataclasses import dataclass, field
from datetime import datetime

from parking_occupancy.domain.models.app_state import AppState
from parking_occupancy.domain.models.initial_load_progress import InitialLoadProgress
from parking_occupancy.domain.models.refresh_stats import RefreshStats


@dataclass(frozen=True)
class RefreshState:
    """Immutable view of the scheduler state handed to subscribers."""

    is_refreshing: bool = False
    last_refresh_time: datetime | None = None
    refresh_stats: RefreshStats = field(default_factory=RefreshStats)
    initial_load_progress: InitialLoadProgress = field(default_factory=InitialLoadProgress)
    app_state: AppState = AppState.ACTIVE
