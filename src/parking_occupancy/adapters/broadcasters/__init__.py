"""State broadcasters."""

from parking_occupancy.adapters.broadcasters.state_broadcaster import StateBroadcaster

__all__ = ["StateBroadcaster"]
