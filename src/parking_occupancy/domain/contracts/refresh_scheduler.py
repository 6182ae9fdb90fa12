"""Protocol for the occupancy refresh scheduler."""

from typing import Protocol


class RefreshSchedulerProtocol(Protocol):
    """Protocol for loading and periodically refreshing facility occupancy."""

    async def perform_initial_load(self) -> None:
        """Fetch every stored facility once, in priority order."""
        ...

    def start_auto_refresh(self) -> None:
        """Start the perpetual refresh cycle."""
        ...

    def stop_auto_refresh(self) -> None:
        """Stop scheduling further refresh cycles."""
        ...
