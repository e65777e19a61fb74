"""Common CLI option factories and helpers.

This module centralizes reusable CLI options to reduce duplication
and consolidate noqa comments for Typer's required function call pattern.

It also provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- Filter option type aliases shared by the search commands
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from datetime import datetime
from typing import Annotated, TypeVar

import typer
from rich.console import Console

from pullcaps.schemas.enums import OutputFormat, SortDirection

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")

DATETIME_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Uses asyncio.run() for clean event loop management. Catches exceptions,
    prints user-friendly error messages, and exits with code 1.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


# Typer requires function calls as default arguments, which triggers B008.
# Using Annotated with a centralized type alias keeps the noqa in one place.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

AuthorOption = Annotated[
    str | None,
    typer.Option(
        "--author",
        "-a",
        help="Only content written by this user",
    ),
]

SubredditOption = Annotated[
    str | None,
    typer.Option(
        "--subreddit",
        "-s",
        help="Only content posted in this subreddit",
    ),
]

BeforeOption = Annotated[
    datetime | None,
    typer.Option(
        "--before",
        help="Only content created before this UTC time",
        formats=DATETIME_FORMATS,
    ),
]

AfterOption = Annotated[
    datetime | None,
    typer.Option(
        "--after",
        help="Only content created after this UTC time",
        formats=DATETIME_FORMATS,
    ),
]

SortOption = Annotated[
    SortDirection,
    typer.Option(
        "--sort",
        help="Order by creation time",
    ),
]

SizeOption = Annotated[
    int | None,
    typer.Option(
        "--size",
        help="Page size per request (defaults to PACING__DEFAULT_PAGE_SIZE)",
        min=1,
    ),
]

LimitOption = Annotated[
    int,
    typer.Option(
        "--limit",
        "-n",
        help="Stop after this many results",
        min=1,
    ),
]
"""Bounds the stream; no page beyond the one holding the last result is requested.

Usage:
    def comments(limit: LimitOption = 10) -> None:
"""
