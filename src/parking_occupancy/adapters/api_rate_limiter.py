"""Rate limiter for outgoing occupancy API requests.

Keeps a minimum spacing between calls so that bulk loads do not burst
against the remote API. Limiters are shared per API name, so every caller in
the process goes through the same gate.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import ClassVar

from parking_occupancy.domain.ports.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_MIN_DELAY_SECONDS = 0.5


class ApiRateLimiter(RateLimiter):
    """Grants permits no closer together than ``min_delay_seconds``.

    Waiters queue on an asyncio.Lock, so permits are granted in FIFO order.
    """

    # Process-wide registry of limiters by API name
    _instances: ClassVar[dict[str, ApiRateLimiter]] = {}

    def __init__(self, api_name: str, min_delay_seconds: float = DEFAULT_MIN_DELAY_SECONDS) -> None:
        """Initialize the rate limiter.

        Args:
            api_name: Name of the API (for logging).
            min_delay_seconds: Minimum spacing between permits in seconds.
        """
        if min_delay_seconds < 0:
            raise ValueError("min_delay_seconds must not be negative")
        self.api_name = api_name
        self.min_delay_seconds = min_delay_seconds
        self._last_grant_time: float | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def get_instance(
        cls, api_name: str, min_delay_seconds: float = DEFAULT_MIN_DELAY_SECONDS
    ) -> ApiRateLimiter:
        """Get or create the shared limiter for an API.

        The delay of the first caller wins; later callers get the same instance.
        """
        limiter = cls._instances.get(api_name)
        if limiter is None:
            limiter = cls(api_name, min_delay_seconds)
            cls._instances[api_name] = limiter
            logger.info(
                f"Created rate limiter for {api_name} with {min_delay_seconds}s minimum delay"
            )
        return limiter

    @classmethod
    def reset_instances(cls) -> None:
        """Forget all shared limiters."""
        cls._instances.clear()

    async def acquire(self) -> None:
        """Wait until ``min_delay_seconds`` have passed since the last permit."""
        async with self._lock:
            if self._last_grant_time is not None:
                elapsed = time.monotonic() - self._last_grant_time
                wait_time = self.min_delay_seconds - elapsed
                if wait_time > 0:
                    logger.debug(f"{self.api_name}: waiting {wait_time:.2f}s before next request")
                    await asyncio.sleep(wait_time)

            self._last_grant_time = time.monotonic()

    async def __aenter__(self) -> ApiRateLimiter:
        """Context manager entry - acquire a permit."""
        await self.acquire()
        return self

    async def __aexit__(
        self, _exc_type: type | None, _exc_val: Exception | None, _exc_tb: object
    ) -> None:
        """Context manager exit - nothing to do."""
