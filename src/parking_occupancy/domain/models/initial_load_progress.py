"""Initial load progress domain model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class LoadPhase(IntEnum):
    """Phases of the initial load, in the order they are entered."""

    NOT_STARTED = 0
    LOADING_FAVOURITES = 1
    LOADING_NEAREST = 2
    LOADING_REMAINING = 3
    COMPLETED = 4


# Share of the progress bar covered by each loading phase, and where it starts
_PHASE_SPAN: dict[LoadPhase, tuple[float, float]] = {
    LoadPhase.LOADING_FAVOURITES: (0.0, 0.3),
    LoadPhase.LOADING_NEAREST: (0.3, 0.3),
    LoadPhase.LOADING_REMAINING: (0.6, 0.4),
}

_PHASE_LABEL: dict[LoadPhase, str] = {
    LoadPhase.LOADING_FAVOURITES: "favourites",
    LoadPhase.LOADING_NEAREST: "nearest",
    LoadPhase.LOADING_REMAINING: "remaining",
}


@dataclass(frozen=True)
class InitialLoadProgress:
    """Progress of the priority-ordered initial load."""

    phase: LoadPhase = LoadPhase.NOT_STARTED
    current: int = 0
    total: int = 0

    @classmethod
    def not_started(cls) -> InitialLoadProgress:
        return cls(LoadPhase.NOT_STARTED)

    @classmethod
    def loading_favourites(cls, current: int, total: int) -> InitialLoadProgress:
        return cls(LoadPhase.LOADING_FAVOURITES, current, total)

    @classmethod
    def loading_nearest(cls, current: int, total: int) -> InitialLoadProgress:
        return cls(LoadPhase.LOADING_NEAREST, current, total)

    @classmethod
    def loading_remaining(cls, current: int, total: int) -> InitialLoadProgress:
        return cls(LoadPhase.LOADING_REMAINING, current, total)

    @classmethod
    def completed(cls) -> InitialLoadProgress:
        return cls(LoadPhase.COMPLETED)

    @property
    def is_loading(self) -> bool:
        return self.phase not in (LoadPhase.NOT_STARTED, LoadPhase.COMPLETED)

    @property
    def description(self) -> str:
        if self.phase is LoadPhase.NOT_STARTED:
            return "Ready to load"
        if self.phase is LoadPhase.COMPLETED:
            return "All data loaded"
        return f"Loading {_PHASE_LABEL[self.phase]} ({self.current}/{self.total})"

    @property
    def progress_fraction(self) -> float:
        """Overall progress in [0, 1]; an empty phase counts as finished."""
        if self.phase is LoadPhase.NOT_STARTED:
            return 0.0
        if self.phase is LoadPhase.COMPLETED:
            return 1.0
        start, span = _PHASE_SPAN[self.phase]
        done = self.current / self.total if self.total > 0 else 1.0
        return start + done * span

    @property
    def order_key(self) -> tuple[int, int]:
        """Sort key that never decreases while a load moves forward."""
        return (int(self.phase), self.current)
