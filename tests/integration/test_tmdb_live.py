"""Integration tests against the real TMDB API.

These tests validate that the API contract hasn't changed and that the
catalog parses real responses. They need a TMDB_API_KEY.

Run these tests with:
    pytest -m integration

They are deselected by default (see addopts in pyproject.toml).
"""

import os

import pytest

from cinecache.catalog import build_catalog
from cinecache.config import Settings
from cinecache.core.exceptions import HttpError

pytestmark = [
    pytest.mark.integration,
    pytest.mark.external,
    pytest.mark.skipif(
        not os.environ.get("TMDB_API_KEY"), reason="TMDB_API_KEY not set"
    ),
]


@pytest.fixture
async def live_catalog():
    catalog = build_catalog(Settings())
    yield catalog
    await catalog.close()


class TestLiveCatalog:
    @pytest.mark.asyncio
    async def test_popular_movies(self, live_catalog) -> None:
        result = await live_catalog.movies.get_popular_movies()

        assert result["page"] == 1
        assert result["total_pages"] >= 1
        assert "id" in result["results"][0]

    @pytest.mark.asyncio
    async def test_fight_club_details(self, live_catalog) -> None:
        result = await live_catalog.details.fetch_movie_detail(550)

        assert result["id"] == 550
        assert "credits" in result

    @pytest.mark.asyncio
    async def test_reviews_load_more(self, live_catalog) -> None:
        first = await live_catalog.details.fetch_more_reviews(550)

        assert first.current_page == 1
        if first.has_more:
            second = await live_catalog.details.fetch_more_reviews(550)
            assert len(second.items) > len(first.items)

    @pytest.mark.asyncio
    async def test_unknown_movie_is_http_error(self, live_catalog) -> None:
        with pytest.raises(HttpError) as exc_info:
            await live_catalog.movies.get_movie_details(0)

        assert exc_info.value.status == 404
