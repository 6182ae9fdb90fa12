"""Observer of application foreground/background transitions."""

from __future__ import annotations

import logging
from collections.abc import Callable

from parking_occupancy.domain.contracts.app_lifecycle import AppLifecycleProtocol
from parking_occupancy.domain.models.app_state import AppState

logger = logging.getLogger(__name__)

LifecycleListener = Callable[[AppState], None]


class AppLifecycleObserver(AppLifecycleProtocol):
    """Holds the current lifecycle state, flipped by OS signals."""

    def __init__(self, initial_state: AppState = AppState.ACTIVE) -> None:
        self._state = initial_state
        self._listeners: list[LifecycleListener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def add_listener(self, listener: LifecycleListener) -> None:
        self._listeners.append(listener)

    def did_become_active(self) -> None:
        logger.info("App became active")
        self._transition(AppState.ACTIVE)

    def did_enter_background(self) -> None:
        logger.info("App entered background")
        self._transition(AppState.BACKGROUND)

    def _transition(self, new_state: AppState) -> None:
        if new_state is self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception as e:
                logger.error(f"Lifecycle listener failed: {e}", exc_info=True)
