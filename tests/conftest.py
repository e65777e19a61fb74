"""Pytest configuration and shared fixtures.

Usage Guide:
- For schema validation tests: use record factories from tests.factories
- For client tests: use the `make_client` fixture, which wires a
  PushShiftClient to an httpx.MockTransport serving canned responses
- For fetcher tests: script pages directly, no HTTP involved
"""

from datetime import UTC, datetime
from typing import Any

import httpx
import pytest

from pullcaps.config import PacingConfig, RateLimitConfig, Settings, get_settings
from pullcaps.pushshift import PushShiftClient, reset_shared_rate_limiter
from tests.fixtures.mock_transport import Scripted, ScriptedServer

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# Define a consistent "test epoch" for deterministic cursor matching across tests.
# All hardcoded timestamps should reference these constants for consistency.
# -----------------------------------------------------------------------------

# Base dates (datetime objects for Pydantic)
JAN_10 = datetime(2024, 1, 10, 9, 0, 0, tzinfo=UTC)
JAN_15 = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)
JAN_20 = datetime(2024, 1, 20, 16, 0, 0, tzinfo=UTC)

# Epoch seconds (for PushShift API mocks and cursors)
JAN_10_TS = 1704877200
JAN_15_TS = 1705312800
JAN_20_TS = 1705766400

BASE_URL = "https://api.pushshift.io"


# -----------------------------------------------------------------------------
# Global State
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _isolate_global_state():
    """Reset the shared rate limiter and cached settings around each test."""
    reset_shared_rate_limiter()
    get_settings.cache_clear()
    yield
    reset_shared_rate_limiter()
    get_settings.cache_clear()


# -----------------------------------------------------------------------------
# Settings Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def settings() -> Settings:
    """Settings with pacing and rate limiting switched off.

    Ignores any .env file so tests never depend on the developer machine.
    """
    return Settings(
        _env_file=None,
        pacing=PacingConfig(min_request_interval_ms=0),
        rate_limit=RateLimitConfig(enabled=False),
    )


# -----------------------------------------------------------------------------
# Mock HTTP Transport
# -----------------------------------------------------------------------------
@pytest.fixture
async def make_client(settings: Settings):
    """Factory for PushShiftClients backed by a ScriptedServer.

    Usage:
        client, server = make_client([listing(...), listing()])
    """
    http_clients: list[httpx.AsyncClient] = []

    def _make(
        responses: list[Scripted],
        *,
        client_settings: Settings | None = None,
        **kwargs: Any,
    ) -> tuple[PushShiftClient, ScriptedServer]:
        server = ScriptedServer(responses)
        http = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(server))
        http_clients.append(http)
        client = PushShiftClient(http, settings=client_settings or settings, **kwargs)
        return client, server

    yield _make

    for http in http_clients:
        await http.aclose()
