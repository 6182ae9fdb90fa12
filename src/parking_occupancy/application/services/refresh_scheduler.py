"""Occupancy refresh scheduler.

Owns every occupancy update: the priority-ordered initial load, the perpetual
refresh cycle and on-demand single-facility refreshes. All state lives on the
event loop that drives the scheduler; ``is_refreshing`` keeps batches from
overlapping.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from parking_occupancy.domain.contracts.refresh_scheduler import RefreshSchedulerProtocol
from parking_occupancy.domain.errors import describe_failure
from parking_occupancy.domain.models.initial_load_progress import InitialLoadProgress
from parking_occupancy.domain.models.refresh_state import RefreshState
from parking_occupancy.domain.models.refresh_stats import RefreshStats
from parking_occupancy.domain.models.scheduler_settings import SchedulerSettings

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from parking_occupancy.domain.contracts.app_lifecycle import AppLifecycleProtocol
    from parking_occupancy.domain.contracts.state_broadcaster import StateBroadcasterProtocol
    from parking_occupancy.domain.models.coordinate import Coordinate
    from parking_occupancy.domain.models.facility_record import FacilityRecord
    from parking_occupancy.domain.ports import (
        Clock,
        FacilityStore,
        LocationProvider,
        OccupancyClient,
        RateLimiter,
    )

logger = logging.getLogger(__name__)


class RefreshScheduler(RefreshSchedulerProtocol):
    """Decides which facility to poll, when, and under what backoff."""

    def __init__(
        self,
        store: FacilityStore,
        client: OccupancyClient,
        location_provider: LocationProvider,
        rate_limiter: RateLimiter,
        lifecycle: AppLifecycleProtocol,
        clock: Clock,
        settings: SchedulerSettings | None = None,
        state_broadcaster: StateBroadcasterProtocol | None = None,
    ) -> None:
        """Initialize the scheduler with its collaborators.

        Args:
            store: Facility record store.
            client: Remote occupancy API client.
            location_provider: Source of the current coordinate.
            rate_limiter: Shared gate spacing out client calls.
            lifecycle: Foreground/background state.
            clock: Time source used for bookkeeping and waits.
            settings: Scheduler tunables.
            state_broadcaster: Optional sink for published state.
        """
        self.store = store
        self.client = client
        self.location_provider = location_provider
        self.rate_limiter = rate_limiter
        self.lifecycle = lifecycle
        self.clock = clock
        self.settings = settings or SchedulerSettings()
        self.state_broadcaster = state_broadcaster

        self.refresh_stats = RefreshStats()
        self.last_refresh_time: datetime | None = None
        self._is_refreshing = False
        self._initial_load_progress = InitialLoadProgress.not_started()

        self._task: asyncio.Task[None] | None = None
        self._stop_event: asyncio.Event | None = None

    @property
    def is_refreshing(self) -> bool:
        return self._is_refreshing

    @property
    def initial_load_progress(self) -> InitialLoadProgress:
        return self._initial_load_progress

    @property
    def is_auto_refresh_running(self) -> bool:
        return self._stop_event is not None

    @property
    def state(self) -> RefreshState:
        """Snapshot of the published state."""
        return RefreshState(
            is_refreshing=self._is_refreshing,
            last_refresh_time=self.last_refresh_time,
            refresh_stats=RefreshStats(
                success_count=self.refresh_stats.success_count,
                failure_count=self.refresh_stats.failure_count,
                last_success_time=self.refresh_stats.last_success_time,
                last_failure_time=self.refresh_stats.last_failure_time,
            ),
            initial_load_progress=self._initial_load_progress,
            app_state=self.lifecycle.state,
        )

    # Initial load

    async def perform_initial_load(self) -> None:
        """Fetch every stored facility once: favourites, nearest, then the rest."""
        if self._is_refreshing:
            logger.info("Initial load skipped - a refresh is already in progress")
            return

        logger.info("Starting initial occupancy load")
        self._is_refreshing = True
        await self._set_progress(InitialLoadProgress.loading_favourites(0, 0))

        try:
            all_records = self.store.fetch_all()
            favourites = [record for record in all_records if record.is_favourite]
            # Read the location once so the three phases partition the store
            location = self.location_provider.current_coordinate()
            nearest_all = self._nearest(all_records, location, self.settings.nearest_count)
            nearest = [record for record in nearest_all if not record.is_favourite]

            excluded = {id(record) for record in [*favourites, *nearest_all]}
            remaining = [record for record in all_records if id(record) not in excluded]

            await self._load_phase(favourites, InitialLoadProgress.loading_favourites, "favourite")
            await self._load_phase(nearest, InitialLoadProgress.loading_nearest, "nearest")
            await self._load_phase(
                remaining,
                InitialLoadProgress.loading_remaining,
                "remaining",
                extra_delay=self.settings.remaining_phase_delay_seconds,
            )
            self._save_store()
        finally:
            self._is_refreshing = False

        self.last_refresh_time = self.clock.now()
        await self._set_progress(InitialLoadProgress.completed())
        logger.info(f"Initial occupancy load complete: {self.refresh_stats.description}")

    async def _load_phase(
        self,
        records: list[FacilityRecord],
        progress_factory: Callable[[int, int], InitialLoadProgress],
        context: str,
        extra_delay: float = 0.0,
    ) -> None:
        if not records:
            logger.info(f"No {context} facilities to load")
            return

        total = len(records)
        logger.info(f"Loading occupancy for {total} {context} facilities")
        await self._set_progress(progress_factory(0, total))

        for index, record in enumerate(records):
            await self._load_occupancy(record, context, extra_delay=extra_delay)
            await self._set_progress(progress_factory(index + 1, total))

    # Perpetual cycle

    def start_auto_refresh(self) -> None:
        """Start the refresh loop; no-op while one is already active."""
        if self._stop_event is not None:
            logger.info("Auto-refresh already running")
            return

        logger.info("Starting auto-refresh cycle")
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._refresh_loop(self._stop_event))

    def stop_auto_refresh(self) -> None:
        """Stop scheduling cycles; a cycle already running is allowed to finish."""
        if self._stop_event is None:
            return

        logger.info("Stopping auto-refresh cycle")
        self._stop_event.set()
        self._stop_event = None

    async def aclose(self) -> None:
        """Stop the refresh loop and wait for it to wind down."""
        self.stop_auto_refresh()
        task, self._task = self._task, None
        if task is not None and not task.done():
            await task

    async def _refresh_loop(self, stop: asyncio.Event) -> None:
        while not stop.is_set():
            # The interval is read when the wait starts, never retroactively
            interval = self.lifecycle.state.refresh_interval
            logger.debug(f"Next refresh cycle in {interval:.0f}s")
            if await self._wait(stop, interval):
                break
            try:
                await self.run_refresh_cycle()
            except Exception as e:
                logger.error(f"Refresh cycle failed, retrying next tick: {e}", exc_info=True)
        logger.info("Auto-refresh loop stopped")

    async def _wait(self, stop: asyncio.Event, seconds: float) -> bool:
        """Sleep for ``seconds`` unless ``stop`` is set first; return whether it was."""
        sleeper = asyncio.ensure_future(self.clock.sleep(seconds))
        stopper = asyncio.ensure_future(stop.wait())
        try:
            await asyncio.wait({sleeper, stopper}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in (sleeper, stopper):
                if not waiter.done():
                    waiter.cancel()
        return stop.is_set()

    async def run_refresh_cycle(self) -> bool:
        """Run one refresh tick; return False if it was dropped or had nothing to do."""
        if self._is_refreshing:
            logger.info("Refresh cycle skipped - already refreshing")
            return False

        records = self.select_facilities_to_refresh()
        if not records:
            logger.info("No facilities due for refresh")
            return False

        logger.info(f"Refresh cycle: updating {len(records)} facilities")
        self._is_refreshing = True
        await self._broadcast()
        try:
            for record in records:
                await self._load_occupancy(record, "refresh")
            self._save_store()
        finally:
            self._is_refreshing = False

        self.last_refresh_time = self.clock.now()
        await self._broadcast()
        logger.info("Refresh cycle complete")
        return True

    def select_facilities_to_refresh(self) -> list[FacilityRecord]:
        """All favourites if there are any, otherwise the nearest facilities."""
        favourites = self.store.fetch_favourites()
        if favourites:
            logger.debug(f"Refreshing {len(favourites)} favourite facilities")
            return favourites

        location = self.location_provider.current_coordinate()
        logger.debug(f"No favourites found, refreshing {self.settings.nearest_count} nearest")
        return self._nearest(self.store.fetch_all(), location, self.settings.nearest_count)

    def due_facilities(self) -> list[FacilityRecord]:
        """Records whose next scheduled refresh has passed, soonest first."""
        now = self.clock.now()
        due = [record for record in self.store.fetch_all() if record.is_due(now)]
        return sorted(due, key=lambda record: record.next_scheduled_refresh_at)

    # On-demand refresh

    async def refresh_facility_if_needed(self, record: FacilityRecord) -> bool:
        """Refresh a facility only if its data is stale."""
        now = self.clock.now()
        age = record.time_since_last_refresh(now)
        if age > self.settings.stale_after_seconds or not record.is_occupancy_cache_valid(now):
            logger.info(f"Refreshing {record.name} on demand (age: {age:.0f}s)")
            return await self.refresh_single_facility(record)
        return False

    async def refresh_single_facility(self, record: FacilityRecord) -> bool:
        """Force refresh one facility outside the cycle; False if a batch is running."""
        if self._is_refreshing:
            logger.info(f"Refresh of {record.name} skipped - already refreshing")
            return False

        logger.info(f"Force refreshing {record.name}")
        self._is_refreshing = True
        await self._broadcast()
        try:
            await self._load_occupancy(record, "detail-view")
            self._save_store()
        finally:
            self._is_refreshing = False

        self.last_refresh_time = self.clock.now()
        await self._broadcast()
        return True

    # Core fetch

    async def _load_occupancy(
        self, record: FacilityRecord, context: str, extra_delay: float = 0.0
    ) -> None:
        """Fetch one facility through the rate limiter and apply the result.

        Failures are recorded on the record and in the stats; they never
        propagate to the caller.
        """
        await self.rate_limiter.acquire()

        try:
            snapshot = await self.client.fetch_facility(record.facility_id)
        except Exception as e:
            now = self.clock.now()
            record.mark_refresh_failed(now)
            self.refresh_stats.record_failure(now)
            details = describe_failure(e)
            logger.warning(
                f"[{context}] Failed to load {record.name}: {details.reason} "
                f"(kind: {details.kind}, status: {details.status_code}, "
                f"failures: {record.consecutive_failures}, "
                f"retry at: {record.next_scheduled_refresh_at:%H:%M:%S})"
            )
        else:
            now = self.clock.now()
            record.update_from_snapshot(snapshot, now)
            record.schedule_next_refresh(self.lifecycle.state, now)
            self.refresh_stats.record_success(now)
            logger.info(
                f"[{context}] {record.name}: "
                f"{record.available_spots(now)}/{record.total_spaces} available"
            )

        if extra_delay > 0:
            await self.clock.sleep(extra_delay)

    # Helpers

    @staticmethod
    def _nearest(
        records: list[FacilityRecord], location: Coordinate, limit: int
    ) -> list[FacilityRecord]:
        ranked = sorted(records, key=lambda record: location.distance_km(record.coordinate))
        return ranked[:limit]

    def _save_store(self) -> None:
        try:
            self.store.save()
        except Exception as e:
            logger.error(f"Failed to save facility store: {e}", exc_info=True)

    async def _set_progress(self, progress: InitialLoadProgress) -> None:
        self._initial_load_progress = progress
        await self._broadcast()

    async def _broadcast(self) -> None:
        if self.state_broadcaster is None:
            return
        await self.state_broadcaster.broadcast_update(self.state)
