"""Process-wide rate limiting for the PushShift API.

PushShift enforces a per-client quota advertised by GET /meta. Every
client in the process shares one RateLimiter so that opening several
clients (or several concurrent streams) never multiplies the quota.

Algorithm (GCRA, a token bucket expressed as a schedule):
    interval  = 60 / requests_per_minute
    tolerance = interval * (burst - 1)
    a request arriving at `now` is allowed at max(now, tat - tolerance)
    tat       = max(tat, now) + interval
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

import httpx
from pydantic import ValidationError

from pullcaps.config import RateLimitConfig, get_settings

from .schemas import PushShiftMeta

logger = logging.getLogger(__name__)

META_PATH = "/meta"

_shared_limiter: RateLimiter | None = None


class RateLimiter:
    """Async token bucket gating outbound requests.

    Usage:
        limiter = RateLimiter(requests_per_minute=120)

        # Before each request
        await limiter.until_ready()
    """

    def __init__(
        self,
        requests_per_minute: int,
        *,
        burst: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the limiter.

        Args:
            requests_per_minute: Sustained quota
            burst: Requests allowed back to back (defaults to the full minute's quota)
            clock: Monotonic time source in seconds
        """
        if requests_per_minute <= 0:
            raise ValueError("requests_per_minute must be positive")
        self._requests_per_minute = requests_per_minute
        self._burst = burst if burst is not None else requests_per_minute
        if self._burst <= 0:
            raise ValueError("burst must be positive")

        self._interval = 60.0 / requests_per_minute
        self._tolerance = self._interval * (self._burst - 1)
        self._clock = clock
        self._tat: float | None = None

    @property
    def requests_per_minute(self) -> int:
        """Sustained quota of this limiter."""
        return self._requests_per_minute

    @property
    def burst(self) -> int:
        """Requests allowed back to back."""
        return self._burst

    def reserve(self) -> float:
        """Claim the next slot and return seconds to wait before using it.

        Never suspends, so concurrent callers on one event loop each get
        a distinct slot.
        """
        now = self._clock()
        tat = now if self._tat is None else max(self._tat, now)
        delay = max(0.0, tat - self._tolerance - now)
        self._tat = tat + self._interval
        return delay

    async def until_ready(self) -> float:
        """Wait until a request may be sent.

        Returns:
            Seconds waited (0.0 when a slot was free)
        """
        delay = self.reserve()
        if delay > 0:
            logger.debug("Rate limit: waiting %.2fs for a request slot", delay)
            await asyncio.sleep(delay)
        return delay


async def fetch_meta(http: httpx.AsyncClient) -> PushShiftMeta:
    """Fetch server metadata from GET /meta.

    Raises:
        httpx.HTTPError: On transport failure or non-success status
        pydantic.ValidationError: If the body is not a valid meta document
    """
    response = await http.get(META_PATH)
    response.raise_for_status()
    return PushShiftMeta.model_validate_json(response.content)


async def shared_rate_limiter(
    http: httpx.AsyncClient,
    config: RateLimitConfig | None = None,
) -> RateLimiter:
    """Get the process-wide limiter, creating it on first use.

    On first use the quota is read from GET /meta. If that request fails
    for any reason the configured default quota is used instead.

    Two clients initialized concurrently may both query /meta; the first
    limiter stored wins and the other result is discarded.

    Args:
        http: Client used for the one-off /meta request
        config: Rate limit configuration (uses settings if not provided)
    """
    global _shared_limiter
    if _shared_limiter is not None:
        return _shared_limiter

    config = config or get_settings().rate_limit
    quota = config.default_requests_per_minute

    if config.discover_from_meta:
        try:
            meta = await fetch_meta(http)
        except (httpx.HTTPError, ValidationError) as e:
            logger.warning(
                "Could not read rate limit from /meta, using default of %d/min: %s", quota, e
            )
        else:
            quota = meta.server_ratelimit_per_minute

    if _shared_limiter is None:
        _shared_limiter = RateLimiter(requests_per_minute=quota)
        logger.info("Shared rate limiter initialized (%d requests/minute)", quota)
    return _shared_limiter


def reset_shared_rate_limiter() -> None:
    """Forget the process-wide limiter (primarily for testing)."""
    global _shared_limiter
    _shared_limiter = None
