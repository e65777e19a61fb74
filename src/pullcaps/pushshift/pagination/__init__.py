"""Cursor pagination for PushShift listing endpoints.

Components:
- PaginatedFetcher: lazy async stream over a cursor-paginated endpoint
- Page / StreamState: one fetched batch, and per-stream mutable state
- take: bounded view of a stream that closes it at the limit
"""

from .fetcher import Cursor, Page, PageRequest, PaginatedFetcher, StreamState, take

__all__ = [
    "Cursor",
    "Page",
    "PageRequest",
    "PaginatedFetcher",
    "StreamState",
    "take",
]
