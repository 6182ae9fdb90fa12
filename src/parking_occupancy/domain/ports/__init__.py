"""Ports (interfaces) for the ports-and-adapters architecture."""

from parking_occupancy.domain.ports.clock import Clock
from parking_occupancy.domain.ports.facility_store import FacilityStore
from parking_occupancy.domain.ports.location_provider import LocationProvider
from parking_occupancy.domain.ports.occupancy_client import OccupancyClient
from parking_occupancy.domain.ports.rate_limiter import RateLimiter

__all__ = [
    "Clock",
    "FacilityStore",
    "LocationProvider",
    "OccupancyClient",
    "RateLimiter",
]
