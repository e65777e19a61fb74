"""Per-stream request pacing.

Each stream owns one RequestPacer, which keeps consecutive page
requests of that stream at least `min_interval` seconds apart. Pacers
of different streams are independent; cross-stream coordination is the
job of the shared RateLimiter.

Algorithm:
    delay = max(0, min_interval - (now - last_request_started))
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from pullcaps.config import PacingConfig, get_settings

logger = logging.getLogger(__name__)


class RequestPacer:
    """Enforces a minimum spacing between requests of one stream.

    Usage:
        pacer = RequestPacer(min_interval=1.0)

        # Before each request
        await pacer.wait()

        # Make request...
    """

    def __init__(
        self,
        min_interval: float | None = None,
        *,
        config: PacingConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the request pacer.

        Args:
            min_interval: Minimum seconds between requests. Defaults to
                          config.min_request_interval_ms.
            config: Optional pacing configuration (uses settings if not provided)
            clock: Monotonic time source in seconds
        """
        if min_interval is None:
            config = config or get_settings().pacing
            min_interval = config.min_request_interval_ms / 1000
        if min_interval < 0:
            raise ValueError("min_interval must not be negative")

        self._min_interval = min_interval
        self._clock = clock
        self._last_request_at: float | None = None
        self._request_count = 0

    @property
    def min_interval(self) -> float:
        """Minimum seconds between consecutive requests."""
        return self._min_interval

    # -------------------------------------------------------------------------
    # Delay Calculation
    # -------------------------------------------------------------------------
    def get_recommended_delay(self) -> float:
        """Seconds to wait before the next request (0 = proceed immediately).

        The first request of a stream is never delayed.
        """
        if self._last_request_at is None:
            return 0.0
        elapsed = self._clock() - self._last_request_at
        return max(0.0, self._min_interval - elapsed)

    # -------------------------------------------------------------------------
    # Request Lifecycle
    # -------------------------------------------------------------------------
    def on_request_start(self) -> None:
        """Record that a request is starting."""
        self._last_request_at = self._clock()
        self._request_count += 1

    async def wait(self) -> float:
        """Sleep for the recommended delay, then record the request start.

        Returns:
            Seconds slept
        """
        delay = self.get_recommended_delay()
        if delay > 0:
            logger.debug("Pacing: waiting %.2fs before request", delay)
            await asyncio.sleep(delay)
        self.on_request_start()
        return delay

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------
    @property
    def request_count(self) -> int:
        """Number of requests started through this pacer."""
        return self._request_count

    @property
    def last_request_at(self) -> float | None:
        """Clock reading of the last request start."""
        return self._last_request_at

    def get_stats(self) -> dict[str, float | int | None]:
        """Get pacer statistics for logging."""
        return {
            "min_interval_ms": round(self._min_interval * 1000, 2),
            "request_count": self._request_count,
            "recommended_delay_ms": round(self.get_recommended_delay() * 1000, 2),
        }
