"""Enums for Pydantic schemas and CLI options."""

from enum import Enum


class SortDirection(str, Enum):
    """Ordering of results by creation time.

    The stream cursor follows this direction: descending streams page
    with ``before=``, ascending streams page with ``after=``.
    """

    DESC = "desc"
    """Newest first (PushShift default)."""

    ASC = "asc"
    """Oldest first."""


class OutputFormat(str, Enum):
    """Output format for CLI commands."""

    TEXT = "text"
    """Human-readable text output."""

    JSON = "json"
    """Machine-readable JSON output."""
