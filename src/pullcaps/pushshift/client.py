"""Async PushShift API client built on httpx.

This module provides a typed async interface to the PushShift search
endpoints. Listings are exposed as lazy streams (see
pagination.PaginatedFetcher); every request is gated behind the
process-wide RateLimiter.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from functools import partial
from typing import TYPE_CHECKING, TypeVar

import httpx
from pydantic import ValidationError

from pullcaps.config import Settings, get_settings
from pullcaps.logging import bind_stream, get_logger
from pullcaps.schemas.content import Comment, Content, Post
from pullcaps.schemas.enums import SortDirection
from pullcaps.schemas.pushshift_api import PushShiftResponse

from .exceptions import (
    ConfigurationError,
    DecodeError,
    PushShiftFetchError,
    RateLimitError,
    TransportError,
)
from .pagination import Cursor, PaginatedFetcher
from .rate_limit import PushShiftMeta, RateLimiter, shared_rate_limiter
from .rate_limit.limiter import META_PATH

if TYPE_CHECKING:
    from pullcaps.schemas.filter import Filter

logger = get_logger(__name__)

COMMENTS_PATH = "/reddit/comment/search/"
POSTS_PATH = "/reddit/submission/search/"

ContentT = TypeVar("ContentT", bound=Content)


class PushShiftClient:
    """Async PushShift API client.

    Usage:
        async with PushShiftClient() as client:
            async for comment in client.get_comments(Filter().author("reddit")):
                print(comment.body)

    Or without context manager:
        client = PushShiftClient()
        posts = client.get_posts(Filter().subreddit("askreddit"))
        ...
        await client.close()

    The underlying httpx.AsyncClient pools connections, so create one
    client and reuse it. Clients constructed with a shared
    httpx.AsyncClient share its pool.
    """

    def __init__(
        self,
        http: httpx.AsyncClient | None = None,
        *,
        rate_limiter: RateLimiter | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the PushShift client.

        Args:
            http: Optional httpx client. Its base_url must point at the
                  PushShift API. When omitted, one is built from settings
                  and closed by close().
            rate_limiter: Optional limiter. When omitted, the process-wide
                          limiter is used (created on first request).
            settings: Optional settings (uses get_settings() if not provided)
        """
        self._settings = settings or get_settings()
        self._owns_http = http is None
        self._http = http if http is not None else self._build_http_client()
        self._rate_limiter = rate_limiter

        min_interval = self._settings.pacing.min_request_interval_ms / 1000
        self._comments: PaginatedFetcher[Comment] = PaginatedFetcher(
            partial(self._fetch_page, COMMENTS_PATH, Comment),
            cursor_of=_content_cursor,
            min_request_interval=min_interval,
            validate=self._validate_filter,
            name="comments",
        )
        self._posts: PaginatedFetcher[Post] = PaginatedFetcher(
            partial(self._fetch_page, POSTS_PATH, Post),
            cursor_of=_content_cursor,
            min_request_interval=min_interval,
            validate=self._validate_filter,
            name="posts",
        )

    def _build_http_client(self) -> httpx.AsyncClient:
        http_config = self._settings.http
        return httpx.AsyncClient(
            base_url=self._settings.pushshift_base_url,
            timeout=http_config.timeout_seconds,
            headers={"User-Agent": http_config.user_agent},
            transport=httpx.AsyncHTTPTransport(retries=http_config.connect_retries),
        )

    @property
    def rate_limiter(self) -> RateLimiter | None:
        """Access the rate limiter (None until first request if shared)."""
        return self._rate_limiter

    async def initialize(self) -> None:
        """Resolve the rate limiter up front.

        The first client in the process queries GET /meta to size the
        shared limiter. Calling this is optional; the first request does
        it otherwise.
        """
        if self._settings.rate_limit.enabled and self._rate_limiter is None:
            self._rate_limiter = await shared_rate_limiter(self._http, self._settings.rate_limit)

    async def close(self) -> None:
        """Close the underlying HTTP client if this client created it."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> PushShiftClient:
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------
    def get_comments(self, query: Filter) -> AsyncIterator[Comment]:
        """Stream comments matching ``query``.

        The stream is lazy and unbounded; pages are requested as the
        consumer iterates. Use pagination.take() or break out of the
        loop to stop early.

        Raises:
            ConfigurationError: If the filter is not usable (raised here,
                                before any request).
        """
        return self._comments.create(query)

    def get_posts(self, query: Filter) -> AsyncIterator[Post]:
        """Stream posts matching ``query``.

        Raises:
            ConfigurationError: If the filter is not usable (raised here,
                                before any request).
        """
        return self._posts.create(query)

    # -------------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------------
    async def get_meta(self) -> PushShiftMeta:
        """Get server metadata, including the advertised rate limit.

        Raises:
            TransportError: On network failure or non-success status
            DecodeError: If the body is not a valid meta document
        """
        response = await self._get(META_PATH)
        try:
            return PushShiftMeta.model_validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(f"Malformed response from {META_PATH}: {e}") from e

    # -------------------------------------------------------------------------
    # Page Fetching
    # -------------------------------------------------------------------------
    def _validate_filter(self, query: Filter) -> None:
        size = query.options.size
        max_size = self._settings.pacing.max_page_size
        if size is not None and size > max_size:
            raise ConfigurationError(f"Page size {size} exceeds the maximum of {max_size}")

    def _build_params(self, query: Filter, cursor: Cursor | None) -> dict[str, str | int]:
        """Render filter + cursor as query parameters.

        The cursor replaces the time bound in the direction of travel.
        """
        params = query.to_params()
        params["limit"] = query.options.size or self._settings.pacing.default_page_size
        if cursor is not None:
            bound = "before" if query.options.sort is SortDirection.DESC else "after"
            params[bound] = cursor  # type: ignore[assignment]
        return params

    async def _fetch_page(
        self,
        path: str,
        model: type[ContentT],
        query: Filter,
        cursor: Cursor | None,
    ) -> list[ContentT]:
        """Fetch and decode one page of a listing."""
        params = self._build_params(query, cursor)
        response = await self._get(path, params)
        try:
            envelope = PushShiftResponse[model].model_validate_json(response.content)  # type: ignore[valid-type]
        except ValidationError as e:
            raise DecodeError(
                f"Malformed response from {path} ({e.error_count()} error(s)): {e}"
            ) from e
        bind_stream(path, params).debug(
            "Decoded {} record(s) at cursor {!r}", len(envelope.data), cursor
        )
        return envelope.data

    async def _get(
        self,
        path: str,
        params: dict[str, str | int] | None = None,
    ) -> httpx.Response:
        """Issue one GET request behind the rate limiter."""
        await self._acquire_slot()
        logger.debug("GET {} params={}", path, params)
        try:
            response = await self._http.get(path, params=params)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to {path} timed out") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {path} failed: {e}") from e

        if not response.is_success:
            raise self._handle_error(path, response)
        return response

    async def _acquire_slot(self) -> None:
        if not self._settings.rate_limit.enabled:
            return
        if self._rate_limiter is None:
            await self.initialize()
        if self._rate_limiter is not None:
            await self._rate_limiter.until_ready()

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, path: str, response: httpx.Response) -> PushShiftFetchError:
        """Convert a non-success response to our custom exceptions."""
        status = response.status_code

        if status == 429:
            return RateLimitError(
                "PushShift rate limit exceeded",
                retry_after=_parse_retry_after(response.headers.get("retry-after")),
            )
        return TransportError(f"PushShift API error ({status}) for {path}", status_code=status)


def _content_cursor(item: Content) -> Cursor:
    return item.cursor


def _parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header given in seconds."""
    if value is None:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None
