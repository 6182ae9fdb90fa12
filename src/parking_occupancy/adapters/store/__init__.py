"""Facility store adapters."""

from parking_occupancy.adapters.store.in_memory_facility_store import InMemoryFacilityStore

__all__ = ["InMemoryFacilityStore"]
