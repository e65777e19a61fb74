"""PushShift API client module.

This module provides:
- PushShiftClient: Async PushShift API client with lazy paginated listings
- Pagination: PaginatedFetcher, Page, StreamState, take
- Request pacing: RequestPacer
- Rate limiting: RateLimiter, shared_rate_limiter, PushShiftMeta
"""

from .exceptions import (
    ConfigurationError,
    DecodeError,
    PushShiftError,
    PushShiftFetchError,
    RateLimitError,
    TransportError,
)
from .client import PushShiftClient
from .pacing import RequestPacer
from .pagination import Page, PaginatedFetcher, StreamState, take
from .rate_limit import (
    PushShiftMeta,
    RateLimiter,
    reset_shared_rate_limiter,
    shared_rate_limiter,
)

__all__ = [
    # Client
    "PushShiftClient",
    # Exceptions
    "ConfigurationError",
    "DecodeError",
    "PushShiftError",
    "PushShiftFetchError",
    "RateLimitError",
    "TransportError",
    # Pagination
    "Page",
    "PaginatedFetcher",
    "StreamState",
    "take",
    # Request pacing
    "RequestPacer",
    # Rate limiting
    "PushShiftMeta",
    "RateLimiter",
    "reset_shared_rate_limiter",
    "shared_rate_limiter",
]
