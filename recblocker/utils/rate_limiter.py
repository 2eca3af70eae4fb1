"""
Fixed-interval throttle for sequential API requests.
"""

import asyncio
from typing import Awaitable, Callable, Optional
from loguru import logger


Sleeper = Callable[[float], Awaitable[None]]


class IntervalThrottle:
    """Waits a fixed interval between consecutive requests."""

    def __init__(self, interval: float, platform: str = "default", sleep: Optional[Sleeper] = None):
        """
        Initialize throttle.

        Args:
            interval: Seconds to wait after each request
            platform: Platform name for logging
            sleep: Awaitable delay primitive (defaults to asyncio.sleep)
        """
        if interval < 0:
            raise ValueError("Interval must not be negative")
        self.interval = interval
        self.platform = platform
        self._sleep = sleep or asyncio.sleep

    async def wait(self) -> None:
        """Suspend for one interval."""
        logger.debug(f"Throttle {self.platform}: waiting {self.interval:.2f}s")
        await self._sleep(self.interval)
