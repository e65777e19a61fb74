"""Search commands for archived comments and posts."""

import json
from collections.abc import AsyncIterator, Callable, Sequence
from datetime import datetime
from typing import Any, TypeVar

import typer
from rich.table import Table

from pullcaps.cli.common import (
    AfterOption,
    AuthorOption,
    BeforeOption,
    LimitOption,
    OutputFormatOption,
    SizeOption,
    SortOption,
    SubredditOption,
    console,
    run_async_command,
)
from pullcaps.pushshift import (
    ConfigurationError,
    PushShiftClient,
    PushShiftFetchError,
    RateLimitError,
    take,
)
from pullcaps.schemas import Comment, Content, Filter, OutputFormat, Post, SortDirection

app = typer.Typer(help="Search archived comments and posts")

ContentT = TypeVar("ContentT", bound=Content)


def build_filter(
    *,
    author: str | None = None,
    subreddit: str | None = None,
    before: datetime | None = None,
    after: datetime | None = None,
    sort: SortDirection = SortDirection.DESC,
    size: int | None = None,
) -> Filter:
    """Build a Filter from CLI options, exiting with code 1 if it is invalid."""
    options: dict[str, Any] = {
        "author": author,
        "subreddit": subreddit,
        "before": before,
        "after": after,
        "size": size,
    }
    try:
        return Filter(sort=sort, **{k: v for k, v in options.items() if v is not None})
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


def _truncate(text: str | None, width: int = 60) -> str:
    text = " ".join((text or "").split())
    return text[: width - 3] + "..." if len(text) > width else text


def _print_json(items: Sequence[Content]) -> None:
    console.print_json(json.dumps([item.model_dump(mode="json") for item in items]))


def _print_comments(comments: Sequence[Comment]) -> None:
    table = Table(title=f"{len(comments)} comment(s)")
    table.add_column("Created", style="dim")
    table.add_column("Author", style="cyan")
    table.add_column("Subreddit")
    table.add_column("Score", justify="right")
    table.add_column("Body", max_width=60)

    for comment in comments:
        table.add_row(
            comment.date.strftime("%Y-%m-%d %H:%M"),
            comment.author.name,
            comment.subreddit.name,
            str(comment.score),
            _truncate(comment.body),
        )
    console.print(table)


def _print_posts(posts: Sequence[Post]) -> None:
    table = Table(title=f"{len(posts)} post(s)")
    table.add_column("Created", style="dim")
    table.add_column("Author", style="cyan")
    table.add_column("Subreddit")
    table.add_column("Score", justify="right")
    table.add_column("Title", max_width=60)

    for post in posts:
        table.add_row(
            post.date.strftime("%Y-%m-%d %H:%M"),
            post.author.name,
            post.subreddit.name,
            str(post.score),
            _truncate(post.title),
        )
    console.print(table)


def _run_search(
    open_stream: Callable[[PushShiftClient], AsyncIterator[ContentT]],
    limit: int,
) -> list[ContentT]:
    """Collect up to ``limit`` items from a stream opened on a fresh client."""

    async def _search() -> list[ContentT]:
        try:
            async with PushShiftClient() as client:
                return [item async for item in take(open_stream(client), limit)]
        except RateLimitError as e:
            console.print("[red]Error:[/red] PushShift rate limit exceeded")
            if e.retry_after is not None:
                console.print(f"  Retry after: {e.retry_after:.0f}s")
            raise typer.Exit(1) from None
        except (ConfigurationError, PushShiftFetchError) as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from None

    return run_async_command(_search(), error_prefix="Search failed")


@app.command("comments")
def search_comments(
    author: AuthorOption = None,
    subreddit: SubredditOption = None,
    before: BeforeOption = None,
    after: AfterOption = None,
    sort: SortOption = SortDirection.DESC,
    size: SizeOption = None,
    limit: LimitOption = 10,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Search archived comments.

    Examples:
        pullcaps search comments --author reddit
        pullcaps search comments -s askreddit -n 50 --format json
    """
    query = build_filter(
        author=author, subreddit=subreddit, before=before, after=after, sort=sort, size=size
    )
    comments = _run_search(lambda client: client.get_comments(query), limit)

    if output_format == OutputFormat.JSON:
        _print_json(comments)
    else:
        _print_comments(comments)


@app.command("posts")
def search_posts(
    author: AuthorOption = None,
    subreddit: SubredditOption = None,
    before: BeforeOption = None,
    after: AfterOption = None,
    sort: SortOption = SortDirection.DESC,
    size: SizeOption = None,
    limit: LimitOption = 10,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Search archived posts.

    Examples:
        pullcaps search posts --subreddit askreddit -n 5
        pullcaps search posts -a reddit --after 2021-01-01 --sort asc
    """
    query = build_filter(
        author=author, subreddit=subreddit, before=before, after=after, sort=sort, size=size
    )
    posts = _run_search(lambda client: client.get_posts(query), limit)

    if output_format == OutputFormat.JSON:
        _print_json(posts)
    else:
        _print_posts(posts)
