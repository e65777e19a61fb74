"""Pydantic schemas for pullcaps.

This module provides the content records, response envelopes and the
query Filter.
"""

from .content import Author, Comment, Content, Post, SubReddit
from .enums import OutputFormat, SortDirection
from .filter import Filter, FilterOptions
from .pushshift_api import PushShiftResponse

__all__ = [
    # Content
    "Author",
    "Comment",
    "Content",
    "Post",
    "SubReddit",
    # Enums
    "OutputFormat",
    "SortDirection",
    # Filter
    "Filter",
    "FilterOptions",
    # Envelopes
    "PushShiftResponse",
]
