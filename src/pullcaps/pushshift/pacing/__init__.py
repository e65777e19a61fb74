"""Request pacing for PushShift streams.

Components:
- RequestPacer: minimum spacing between the requests of one stream
"""

from .pacer import RequestPacer

__all__ = [
    "RequestPacer",
]
