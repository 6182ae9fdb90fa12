"""Protocol for broadcasting refresh state."""

from typing import Protocol

from parking_occupancy.domain.models.refresh_state import RefreshState


class StateBroadcasterProtocol(Protocol):
    """Protocol for pushing refresh state changes to subscribers."""

    async def broadcast_update(self, state: RefreshState) -> None:
        """Deliver a new state to every subscriber.

        Args:
            state: The state snapshot to deliver.
        """
        ...
