"""Cursor pagination exposed as a lazy async stream.

A PaginatedFetcher turns a listing endpoint that pages with a cursor
into an async iterator of items. One request is in flight at a time,
and a page is only requested when the consumer asks for an item the
buffered page cannot supply:

    request(filter, cursor=None) -> page 1 -> yield items
    request(filter, cursor=c1)   -> page 2 -> yield items
    ...
    request(filter, cursor=cN)   -> empty page -> end

The stream ends cleanly on an empty page, or when two consecutive
non-empty pages report the same cursor (the endpoint is repeating
itself). Fetch errors end the stream by raising; nothing is retried.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Hashable, Sequence
from contextlib import aclosing
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar

from pullcaps.logging import get_logger
from pullcaps.pushshift.exceptions import PushShiftFetchError
from pullcaps.pushshift.pacing import RequestPacer

if TYPE_CHECKING:
    from pullcaps.schemas.filter import Filter

logger = get_logger(__name__)

ItemT = TypeVar("ItemT")
ItemT_co = TypeVar("ItemT_co", covariant=True)

# Opaque to the fetcher; only compared for equality.
Cursor = Hashable


class PageRequest(Protocol[ItemT_co]):
    """Fetches one page of a listing.

    Implementations raise a PushShiftFetchError subclass when the page
    cannot be delivered or decoded.
    """

    def __call__(self, query: Filter, cursor: Cursor | None) -> Awaitable[Sequence[ItemT_co]]: ...


@dataclass(frozen=True)
class Page(Generic[ItemT]):
    """One batch of items plus the cursor derived from its last item."""

    items: tuple[ItemT, ...]
    cursor: Cursor | None = None

    @classmethod
    def from_items(
        cls,
        items: Sequence[ItemT],
        cursor_of: Callable[[ItemT], Cursor],
    ) -> Page[ItemT]:
        """Build a page, deriving the next cursor from the last item."""
        if not items:
            return cls(items=())
        return cls(items=tuple(items), cursor=cursor_of(items[-1]))

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass
class StreamState:
    """Mutable state owned by exactly one stream."""

    query: Filter
    pacer: RequestPacer
    cursor: Cursor | None = None
    started: bool = False
    exhausted: bool = False
    pages_fetched: int = 0
    items_yielded: int = 0


class PaginatedFetcher(Generic[ItemT]):
    """Produces independent lazy streams over a cursor-paginated endpoint.

    Usage:
        fetcher = PaginatedFetcher(fetch_page, cursor_of=lambda item: item.cursor)

        async for item in fetcher.create(Filter().subreddit("askreddit")):
            print(item)

    Each call to create() returns a new stream with its own StreamState
    and RequestPacer; streams never share cursors or pacing.
    """

    def __init__(
        self,
        fetch_page: PageRequest[ItemT],
        cursor_of: Callable[[ItemT], Cursor],
        *,
        min_request_interval: float | None = None,
        validate: Callable[[Filter], None] | None = None,
        name: str = "stream",
    ) -> None:
        """Initialize the fetcher.

        Args:
            fetch_page: Transport + decoder for a single page
            cursor_of: Extracts the cursor from an item
            min_request_interval: Minimum seconds between requests of one
                                  stream (uses pacing settings if not provided)
            validate: Optional filter check run by create(); raises
                      ConfigurationError before any request is issued
            name: Label used in log records
        """
        self._fetch_page = fetch_page
        self._cursor_of = cursor_of
        self._min_request_interval = min_request_interval
        self._validate = validate
        self._name = name

    def create(self, query: Filter) -> AsyncIterator[ItemT]:
        """Create a lazy stream of items matching ``query``.

        No request is made until the first item is requested.

        Raises:
            ConfigurationError: If ``validate`` rejects the filter.
        """
        if self._validate is not None:
            self._validate(query)
        state = StreamState(query=query, pacer=RequestPacer(self._min_request_interval))
        return self._stream(state)

    async def _next_page(self, state: StreamState) -> Page[ItemT]:
        await state.pacer.wait()
        items = await self._fetch_page(state.query, state.cursor)
        state.pages_fetched += 1
        return Page.from_items(items, self._cursor_of)

    async def _stream(self, state: StreamState) -> AsyncIterator[ItemT]:
        log = logger.bind(stream=self._name, query=repr(state.query))
        try:
            while not state.exhausted:
                try:
                    page = await self._next_page(state)
                except PushShiftFetchError as e:
                    state.exhausted = True
                    log.warning("Page {} failed, ending stream: {}", state.pages_fetched + 1, e)
                    raise

                if page.is_empty:
                    state.exhausted = True
                    log.debug("Empty page, stream exhausted")
                    break

                if state.started and page.cursor == state.cursor:
                    state.exhausted = True
                    log.warning("Cursor did not advance ({!r}), ending stream", page.cursor)
                    break

                state.cursor = page.cursor
                state.started = True
                log.debug(
                    "Page {} has {} item(s), next cursor {!r}",
                    state.pages_fetched,
                    len(page.items),
                    page.cursor,
                )

                for item in page.items:
                    state.items_yielded += 1
                    yield item
        finally:
            log.debug(
                "Stream closed after {} page(s) and {} item(s)",
                state.pages_fetched,
                state.items_yielded,
            )


async def take(stream: AsyncIterator[ItemT], limit: int) -> AsyncIterator[ItemT]:
    """Yield at most ``limit`` items, then close ``stream``.

    Closing the source stream right away means no further page is
    requested once the limit is reached.
    """
    async with aclosing(stream) as source:  # type: ignore[type-var]
        if limit <= 0:
            return
        count = 0
        async for item in source:
            yield item
            count += 1
            if count >= limit:
                break
