"""Clock port."""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Port for wall-clock time and sleeping, replaceable in tests."""

    def now(self) -> datetime:
        """Return the current time (timezone aware, UTC)."""
        ...

    async def sleep(self, seconds: float) -> None:
        """Suspend the caller for the given number of seconds."""
        ...
