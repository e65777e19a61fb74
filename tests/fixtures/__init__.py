"""Test fixtures for pullcaps."""

from .mock_transport import ScriptedServer
from .pushshift_responses import PUSHSHIFT_COMMENT, PUSHSHIFT_META, PUSHSHIFT_POST, listing

__all__ = [
    # Mock PushShift API responses
    "PUSHSHIFT_COMMENT",
    "PUSHSHIFT_META",
    "PUSHSHIFT_POST",
    "listing",
    # Mock transport
    "ScriptedServer",
]
