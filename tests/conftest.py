"""Pytest configuration and fixtures for CineCache tests.

This module provides reusable fixtures for:
- Test settings
- A controllable clock for cache expiry
- A fake TMDB server behind httpx.MockTransport
- The composed catalog and an async test client for the app
"""

from collections.abc import AsyncGenerator

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from cinecache.catalog import Catalog, build_catalog
from cinecache.config import Settings
from cinecache.main import create_app
from cinecache.services.tmdb_client import TMDBClient
from tests.mocks.fakes import TEST_API_KEY, TEST_BASE_URL, FakeClock, FakeTMDB

# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Create test-specific settings."""
    return Settings(
        app_env="development",  # type: ignore[arg-type]
        debug=True,
        log_level="DEBUG",  # type: ignore[arg-type]
        log_format="console",  # type: ignore[arg-type]
        tmdb_api_key=TEST_API_KEY,  # type: ignore[arg-type]
        tmdb_base_url=TEST_BASE_URL,
        cache_ttl_seconds=60,
    )


# =============================================================================
# Catalog Fixtures
# =============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_tmdb() -> FakeTMDB:
    """Fake TMDB server; register routes with ``fake_tmdb["/movie/popular"] = {...}``."""
    return FakeTMDB()


@pytest.fixture
async def tmdb_client(fake_tmdb: FakeTMDB) -> AsyncGenerator[TMDBClient, None]:
    client = TMDBClient(
        TEST_API_KEY,
        base_url=TEST_BASE_URL,
        transport=httpx.MockTransport(fake_tmdb.handler),
    )
    yield client
    await client.close()


@pytest.fixture
def catalog(
    test_settings: Settings, tmdb_client: TMDBClient, clock: FakeClock
) -> Catalog:
    """Catalog wired to the fake TMDB server and the fake clock."""
    return build_catalog(test_settings, client=tmdb_client, clock=clock)


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def app(test_settings: Settings, catalog: Catalog) -> FastAPI:
    """Create a test FastAPI application sharing the test catalog."""
    return create_app(settings=test_settings, catalog=catalog)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing.

    Usage:
        async def test_endpoint(async_client: AsyncClient):
            response = await async_client.get("/health/live")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
