"""Behavior-focused tests for StateBroadcaster."""

import pytest

from parking_occupancy.adapters.broadcasters import StateBroadcaster
from parking_occupancy.domain.models import InitialLoadProgress, RefreshState


def _state(current: int) -> RefreshState:
    return RefreshState(
        is_refreshing=True,
        initial_load_progress=InitialLoadProgress.loading_remaining(current, 10),
    )


class TestStateBroadcaster:
    """Tests for state broadcast behavior."""

    @pytest.mark.asyncio
    async def test_when_broadcasting_then_every_subscriber_receives_state(self) -> None:
        broadcaster = StateBroadcaster()
        first = broadcaster.subscribe()
        second = broadcaster.subscribe()

        await broadcaster.broadcast_update(_state(1))

        assert first.get_nowait() == _state(1)
        assert second.get_nowait() == _state(1)
        assert broadcaster.latest_state == _state(1)

    @pytest.mark.asyncio
    async def test_when_subscribing_late_then_latest_state_is_delivered(self) -> None:
        broadcaster = StateBroadcaster()
        await broadcaster.broadcast_update(_state(1))
        await broadcaster.broadcast_update(_state(2))

        queue = broadcaster.subscribe()

        assert queue.qsize() == 1
        assert queue.get_nowait() == _state(2)

    @pytest.mark.asyncio
    async def test_when_queue_full_then_oldest_state_is_dropped(self) -> None:
        """Given a slow subscriber, when broadcasting beyond capacity, then it keeps the newest."""
        broadcaster = StateBroadcaster(max_queue_size=2)
        queue = broadcaster.subscribe()

        for current in range(1, 5):
            await broadcaster.broadcast_update(_state(current))

        assert queue.get_nowait() == _state(3)
        assert queue.get_nowait() == _state(4)
        assert queue.empty()

    @pytest.mark.asyncio
    async def test_when_unsubscribed_then_no_more_updates(self) -> None:
        broadcaster = StateBroadcaster()
        queue = broadcaster.subscribe()

        broadcaster.unsubscribe(queue)
        broadcaster.unsubscribe(queue)
        await broadcaster.broadcast_update(_state(1))

        assert broadcaster.subscriber_count == 0
        assert queue.empty()
