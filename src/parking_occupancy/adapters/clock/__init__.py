"""Clock adapters."""

from parking_occupancy.adapters.clock.system_clock import SystemClock

__all__ = ["SystemClock"]
