"""Rate limiter port."""

from typing import Protocol


class RateLimiter(Protocol):
    """Port for spacing out outbound API calls."""

    async def acquire(self) -> None:
        """Wait until the next call is allowed."""
        ...
