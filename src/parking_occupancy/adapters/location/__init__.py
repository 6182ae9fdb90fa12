"""Location provider adapters."""

from parking_occupancy.adapters.location.static_location_provider import StaticLocationProvider

__all__ = ["StaticLocationProvider"]
