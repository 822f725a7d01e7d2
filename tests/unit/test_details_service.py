"""Tests for MovieDetailsService.

Covers the detail view flow: cached detail record, first review page on
open, then "load more" until the pages run out.
"""

import httpx
import pytest

from cinecache.catalog import Catalog
from cinecache.core.exceptions import InvalidResponseError, NetworkError
from tests.mocks.fakes import FakeTMDB
from tests.mocks.tmdb_responses import (
    MOVIE_550_DETAILS,
    REVIEW_A,
    REVIEW_B,
    REVIEW_C,
    REVIEWS_PAGE_1,
    REVIEWS_PAGE_2,
)


def serve_reviews(fake_tmdb: FakeTMDB) -> None:
    pages = {"1": REVIEWS_PAGE_1, "2": REVIEWS_PAGE_2}
    fake_tmdb["/movie/550/reviews"] = lambda request: httpx.Response(
        200, json=pages[request.url.params["page"]]
    )


class TestMovieDetail:
    """Tests for the cached detail record."""

    @pytest.mark.asyncio
    async def test_detail_cached_under_movie_key(
        self, catalog: Catalog, fake_tmdb: FakeTMDB
    ) -> None:
        fake_tmdb["/movie/550"] = MOVIE_550_DETAILS

        first = await catalog.details.fetch_movie_detail(550)
        second = await catalog.details.fetch_movie_detail(550)

        assert first == MOVIE_550_DETAILS
        assert second is first
        assert catalog.cache.get_fresh("movie:550") == MOVIE_550_DETAILS
        assert fake_tmdb.calls("/movie/550") == 1
        assert (
            fake_tmdb.last("/movie/550").url.params["append_to_response"]
            == "credits,videos,images"
        )

    @pytest.mark.asyncio
    async def test_force_refresh(self, catalog: Catalog, fake_tmdb: FakeTMDB) -> None:
        fake_tmdb["/movie/550"] = MOVIE_550_DETAILS

        await catalog.details.fetch_movie_detail(550)
        await catalog.details.fetch_movie_detail(550, force_refresh=True)

        assert fake_tmdb.calls("/movie/550") == 2


class TestFullDetails:
    """Tests for opening the full detail view."""

    @pytest.mark.asyncio
    async def test_includes_first_review_page(
        self, catalog: Catalog, fake_tmdb: FakeTMDB
    ) -> None:
        fake_tmdb["/movie/550"] = MOVIE_550_DETAILS
        serve_reviews(fake_tmdb)

        result = await catalog.details.fetch_full_details(550)

        assert result["title"] == "Fight Club"
        assert result["reviews"] == [REVIEW_A, REVIEW_B]
        assert result["reviews_total_pages"] == 2
        assert catalog.details.has_more_reviews(550)
        assert "keywords" in fake_tmdb.last("/movie/550").url.params["append_to_response"]

    @pytest.mark.asyncio
    async def test_reopen_restarts_reviews(
        self, catalog: Catalog, fake_tmdb: FakeTMDB
    ) -> None:
        fake_tmdb["/movie/550"] = MOVIE_550_DETAILS
        serve_reviews(fake_tmdb)

        await catalog.details.fetch_full_details(550)
        await catalog.details.fetch_more_reviews(550)
        await catalog.details.fetch_full_details(550)

        resource = catalog.details.get_reviews(550)
        assert resource is not None
        assert resource.items == (REVIEW_A, REVIEW_B)
        assert resource.current_page == 1


class TestLoadMoreReviews:
    """Tests for incremental review loading."""

    @pytest.mark.asyncio
    async def test_pages_accumulate_in_order(
        self, catalog: Catalog, fake_tmdb: FakeTMDB
    ) -> None:
        serve_reviews(fake_tmdb)

        first = await catalog.details.fetch_more_reviews(550)
        second = await catalog.details.fetch_more_reviews(550)

        assert first.items == (REVIEW_A, REVIEW_B)
        assert second.items == (REVIEW_A, REVIEW_B, REVIEW_C)
        assert second.current_page == 2
        assert not second.has_more

    @pytest.mark.asyncio
    async def test_exhausted_makes_no_request(
        self, catalog: Catalog, fake_tmdb: FakeTMDB
    ) -> None:
        serve_reviews(fake_tmdb)
        await catalog.details.fetch_more_reviews(550)
        await catalog.details.fetch_more_reviews(550)

        again = await catalog.details.fetch_more_reviews(550)

        assert len(again.items) == 3
        assert fake_tmdb.calls("/movie/550/reviews") == 2

    @pytest.mark.asyncio
    async def test_failed_page_keeps_loaded_reviews(
        self, catalog: Catalog, fake_tmdb: FakeTMDB
    ) -> None:
        fake_tmdb["/movie/550/reviews"] = REVIEWS_PAGE_1
        await catalog.details.fetch_more_reviews(550)

        fake_tmdb["/movie/550/reviews"] = httpx.ConnectError("offline")
        with pytest.raises(NetworkError):
            await catalog.details.fetch_more_reviews(550)

        resource = catalog.details.get_reviews(550)
        assert resource is not None
        assert resource.items == (REVIEW_A, REVIEW_B)
        assert catalog.details.has_more_reviews(550)

    @pytest.mark.asyncio
    async def test_malformed_page_rejected(
        self, catalog: Catalog, fake_tmdb: FakeTMDB
    ) -> None:
        fake_tmdb["/movie/550/reviews"] = [REVIEW_A]

        with pytest.raises(InvalidResponseError):
            await catalog.details.fetch_more_reviews(550)

        assert catalog.details.get_reviews(550) is None

    @pytest.mark.asyncio
    async def test_clear_current(self, catalog: Catalog, fake_tmdb: FakeTMDB) -> None:
        serve_reviews(fake_tmdb)
        await catalog.details.fetch_more_reviews(550)

        catalog.details.clear_current(550)

        assert catalog.details.get_reviews(550) is None
        assert not catalog.details.has_more_reviews(550)
