"""Tests for the pullcaps CLI.

Tests cover:
- Global flags (--version, --verbose, --quiet)
- search comments / search posts output and options
- Filter errors and stream errors exit with code 1
- pushshift rate-limit
"""

from collections.abc import AsyncIterator
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from pullcaps import __version__
from pullcaps.cli.app import app
from pullcaps.logging import reset_logging
from pullcaps.pushshift import (
    PushShiftMeta,
    RateLimiter,
    RateLimitError,
    TransportError,
)
from pullcaps.schemas import Filter, SortDirection
from tests.factories import make_comment, make_post

runner = CliRunner()


@pytest.fixture(autouse=True)
def _reset_logging_state():
    """Drop the stderr sinks the CLI callback installs on CliRunner's streams."""
    yield
    reset_logging()


class StreamRecorder:
    """Async iterator over fixed items that records how far it was consumed."""

    def __init__(self, items: list, error: Exception | None = None) -> None:
        self.items = items
        self.error = error
        self.pulled = 0
        self.closed = False

    async def _gen(self) -> AsyncIterator:
        try:
            for item in self.items:
                self.pulled += 1
                yield item
            if self.error is not None:
                raise self.error
        finally:
            self.closed = True

    def __call__(self, query: Filter) -> AsyncIterator:
        self.query = query
        return self._gen()


@pytest.fixture
def mock_client():
    """Patch PushShiftClient in the search command module."""
    with patch("pullcaps.cli.search.PushShiftClient") as mock_class:
        client = MagicMock()
        client.__aenter__.return_value = client
        mock_class.return_value = client
        yield client


class TestGlobalFlags:
    """Tests for global CLI flags."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"pullcaps version {__version__}" in result.output

    def test_global_help_shows_verbose_flag(self):
        """Main help text shows --verbose and -v flags."""
        result = runner.invoke(app, ["--help"])
        assert "-v" in result.output
        assert "--verbose" in result.output

    def test_global_help_shows_quiet_flag(self):
        """Main help text shows --quiet and -q flags."""
        result = runner.invoke(app, ["--help"])
        assert "-q" in result.output
        assert "--quiet" in result.output

    def test_search_help_lists_commands(self):
        result = runner.invoke(app, ["search", "--help"])

        assert result.exit_code == 0
        assert "comments" in result.output
        assert "posts" in result.output


class TestSearchComments:
    """Tests for `pullcaps search comments`."""

    def test_table_output(self, mock_client):
        stream = StreamRecorder([make_comment(id="c1", body="Hello there")])
        mock_client.get_comments.side_effect = stream

        result = runner.invoke(app, ["search", "comments", "--author", "reddit"])

        assert result.exit_code == 0, result.output
        assert "1 comment(s)" in result.output
        assert "Hello there" in result.output
        assert stream.query == Filter(author="reddit")

    def test_json_output(self, mock_client):
        mock_client.get_comments.side_effect = StreamRecorder(
            [make_comment(id="c1", body="First!")]
        )

        result = runner.invoke(app, ["search", "comments", "--format", "json"])

        assert result.exit_code == 0, result.output
        assert '"body": "First!"' in result.output
        assert '"name": "reddit"' in result.output

    def test_filter_options(self, mock_client):
        stream = StreamRecorder([])
        mock_client.get_comments.side_effect = stream

        result = runner.invoke(
            app,
            [
                "search",
                "comments",
                "-s",
                "askreddit",
                "--after",
                "2024-01-10",
                "--before",
                "2024-01-20",
                "--sort",
                "asc",
                "--size",
                "50",
            ],
        )

        assert result.exit_code == 0, result.output
        options = stream.query.options
        assert options.subreddit == "askreddit"
        assert options.after == datetime(2024, 1, 10, tzinfo=UTC)
        assert options.before == datetime(2024, 1, 20, tzinfo=UTC)
        assert options.sort is SortDirection.ASC
        assert options.size == 50

    def test_limit_closes_stream(self, mock_client):
        """--limit stops consuming and closes the stream."""
        stream = StreamRecorder([make_comment(id=f"c{i}") for i in range(10)])
        mock_client.get_comments.side_effect = stream

        result = runner.invoke(app, ["search", "comments", "-n", "3"])

        assert result.exit_code == 0, result.output
        assert "3 comment(s)" in result.output
        assert stream.pulled == 3
        assert stream.closed

    def test_invalid_filter_exits_before_client(self, mock_client):
        """Conflicting time bounds are reported without opening a client."""
        result = runner.invoke(
            app, ["search", "comments", "--after", "2024-01-20", "--before", "2024-01-10"]
        )

        assert result.exit_code == 1
        assert "'after' must be earlier than 'before'" in result.output
        mock_client.get_comments.assert_not_called()

    def test_stream_error_exits(self, mock_client):
        mock_client.get_comments.side_effect = StreamRecorder(
            [make_comment()], error=TransportError("PushShift API error (500)", status_code=500)
        )

        result = runner.invoke(app, ["search", "comments"])

        assert result.exit_code == 1
        assert "PushShift API error (500)" in result.output

    def test_rate_limit_error_shows_retry_after(self, mock_client):
        mock_client.get_comments.side_effect = StreamRecorder(
            [], error=RateLimitError("PushShift rate limit exceeded", retry_after=30)
        )

        result = runner.invoke(app, ["search", "comments"])

        assert result.exit_code == 1
        assert "rate limit exceeded" in result.output
        assert "Retry after: 30s" in result.output

    def test_zero_limit_rejected(self, mock_client):
        result = runner.invoke(app, ["search", "comments", "--limit", "0"])

        assert result.exit_code != 0
        mock_client.get_comments.assert_not_called()


class TestSearchPosts:
    """Tests for `pullcaps search posts`."""

    def test_table_output(self, mock_client):
        mock_client.get_posts.side_effect = StreamRecorder(
            [make_post(id="p1", title="Ask me anything")]
        )

        result = runner.invoke(app, ["search", "posts", "--subreddit", "askreddit"])

        assert result.exit_code == 0, result.output
        assert "1 post(s)" in result.output
        assert "Ask me anything" in result.output

    def test_json_output(self, mock_client):
        mock_client.get_posts.side_effect = StreamRecorder([make_post(id="p1")])

        result = runner.invoke(app, ["search", "posts", "-f", "json"])

        assert result.exit_code == 0, result.output
        assert '"content_url": "https://example.com/p1"' in result.output


class TestRateLimitCommand:
    """Tests for `pullcaps pushshift rate-limit`."""

    @pytest.fixture
    def meta_client(self):
        with patch("pullcaps.cli.pushshift.PushShiftClient") as mock_class:
            client = MagicMock()
            client.__aenter__.return_value = client
            client.get_meta = AsyncMock(
                return_value=PushShiftMeta(server_ratelimit_per_minute=60, api_version="3.0")
            )
            client.rate_limiter = RateLimiter(60)
            mock_class.return_value = client
            yield client

    def test_shows_limits(self, meta_client):
        result = runner.invoke(app, ["pushshift", "rate-limit"])

        assert result.exit_code == 0, result.output
        assert "Server limit (per minute)" in result.output
        assert "60" in result.output
        assert "3.0" in result.output
        assert "Warning" not in result.output

    def test_warns_when_limiter_exceeds_server(self, meta_client):
        meta_client.rate_limiter = RateLimiter(120)

        result = runner.invoke(app, ["pushshift", "rate-limit"])

        assert result.exit_code == 0, result.output
        assert "Warning" in result.output

    def test_disabled_limiter(self, meta_client):
        meta_client.rate_limiter = None

        result = runner.invoke(app, ["pushshift", "rate-limit"])

        assert "disabled" in result.output

    def test_meta_failure_exits(self, meta_client):
        meta_client.get_meta.side_effect = TransportError("Request to /meta timed out")

        result = runner.invoke(app, ["pushshift", "rate-limit"])

        assert result.exit_code == 1
        assert "timed out" in result.output
