"""Clock backed by the system time and the asyncio event loop."""

import asyncio
from datetime import UTC, datetime

from parking_occupancy.domain.ports.clock import Clock


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
