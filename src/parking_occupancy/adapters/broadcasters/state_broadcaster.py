"""Broadcaster for refresh state updates."""

from __future__ import annotations

import asyncio
import logging

from parking_occupancy.domain.contracts.state_broadcaster import StateBroadcasterProtocol
from parking_occupancy.domain.models.refresh_state import RefreshState

logger = logging.getLogger(__name__)


class StateBroadcaster(StateBroadcasterProtocol):
    """Fans refresh state out to subscriber queues.

    Each subscriber gets a bounded queue; when a slow subscriber's queue is
    full the oldest state is dropped, since only the latest state matters.
    """

    def __init__(self, max_queue_size: int = 16) -> None:
        self.max_queue_size = max_queue_size
        self.latest_state: RefreshState | None = None
        self._subscribers: list[asyncio.Queue[RefreshState]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue[RefreshState]:
        """Register a subscriber; it immediately receives the latest state, if any."""
        queue: asyncio.Queue[RefreshState] = asyncio.Queue(maxsize=self.max_queue_size)
        if self.latest_state is not None:
            queue.put_nowait(self.latest_state)
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[RefreshState]) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    async def broadcast_update(self, state: RefreshState) -> None:
        """Deliver a state to every subscriber without blocking the scheduler.

        Args:
            state: The state snapshot to deliver.
        """
        self.latest_state = state
        for queue in list(self._subscribers):
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(state)
        logger.debug(
            f"Broadcasted refresh state to {len(self._subscribers)} subscriber(s): "
            f"{state.initial_load_progress.description}"
        )
