"""Application lifecycle adapters."""

from parking_occupancy.adapters.lifecycle.app_lifecycle_observer import AppLifecycleObserver

__all__ = ["AppLifecycleObserver"]
