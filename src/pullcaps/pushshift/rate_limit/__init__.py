"""Rate limiting for the PushShift API.

This module provides the process-wide limiter that every client gates
its requests behind, sized from the quota advertised by GET /meta.
"""

from .limiter import (
    RateLimiter,
    fetch_meta,
    reset_shared_rate_limiter,
    shared_rate_limiter,
)
from .schemas import PushShiftMeta

__all__ = [
    "PushShiftMeta",
    "RateLimiter",
    "fetch_meta",
    "reset_shared_rate_limiter",
    "shared_rate_limiter",
]
