"""Protocol for the application lifecycle state."""

from typing import Protocol

from parking_occupancy.domain.models.app_state import AppState


class AppLifecycleProtocol(Protocol):
    """Protocol for reading the current foreground/background state."""

    @property
    def state(self) -> AppState:
        """The current lifecycle state."""
        ...
