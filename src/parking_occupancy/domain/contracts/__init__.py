"""Contracts (protocols) for in-process seams."""

from parking_occupancy.domain.contracts.app_lifecycle import AppLifecycleProtocol
from parking_occupancy.domain.contracts.refresh_scheduler import RefreshSchedulerProtocol
from parking_occupancy.domain.contracts.state_broadcaster import StateBroadcasterProtocol

__all__ = [
    "AppLifecycleProtocol",
    "RefreshSchedulerProtocol",
    "StateBroadcasterProtocol",
]
