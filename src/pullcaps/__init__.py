"""pullcaps: an opinionated async client for the PushShift API.

Getting all comments made by a specific user:

    from pullcaps import Filter, PushShiftClient

    async with PushShiftClient() as client:
        async for comment in client.get_comments(Filter().author("reddit")):
            print(comment.body)

If you plan to perform multiple requests, create one client and reuse it.
"""

from pullcaps.pushshift import (
    ConfigurationError,
    DecodeError,
    PushShiftClient,
    PushShiftError,
    RateLimitError,
    TransportError,
    take,
)
from pullcaps.schemas import Comment, Filter, Post, SortDirection

__version__ = "0.1.0"

__all__ = [
    "Comment",
    "ConfigurationError",
    "DecodeError",
    "Filter",
    "Post",
    "PushShiftClient",
    "PushShiftError",
    "RateLimitError",
    "SortDirection",
    "TransportError",
    "__version__",
    "take",
]
