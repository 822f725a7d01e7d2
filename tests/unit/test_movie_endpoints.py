"""Tests for the /api/v1 endpoints.

Requests go through the app, the shared catalog and the real client, with
TMDB replaced by FakeTMDB.
"""

import asyncio

import httpx
import pytest
from httpx import AsyncClient

from cinecache.catalog import Catalog
from tests.mocks.fakes import FakeTMDB
from tests.mocks.tmdb_responses import (
    MOVIE_550_DETAILS,
    MOVIE_GENRES,
    NO_IMAGES_PAGE,
    POPULAR_PAGE_1,
    REVIEW_C,
    REVIEWS_PAGE_1,
    REVIEWS_PAGE_2,
    TRENDING_MOVIES_DAY,
)


class TestMovieListEndpoint:
    """Tests for GET /api/v1/movies/lists/{category}."""

    @pytest.mark.asyncio
    async def test_returns_slides(
        self, async_client: AsyncClient, fake_tmdb: FakeTMDB
    ) -> None:
        fake_tmdb["/movie/popular"] = POPULAR_PAGE_1

        response = await async_client.get("/api/v1/movies/lists/popular")

        assert response.status_code == 200
        data = response.json()
        assert data["category"] == "popular"
        assert data["page"] == 1
        assert data["total_pages"] == 500
        assert [s["id"] for s in data["slides"]] == [550, 680]
        assert data["slides"][0]["img"].endswith("/w300/hZkgoQYus5vegHoetLkCJzb17zJ.jpg")

    @pytest.mark.asyncio
    async def test_concurrent_requests_hit_tmdb_once(
        self, async_client: AsyncClient, fake_tmdb: FakeTMDB
    ) -> None:
        fake_tmdb["/movie/popular"] = POPULAR_PAGE_1

        responses = await asyncio.gather(
            *(async_client.get("/api/v1/movies/lists/popular") for _ in range(5))
        )

        assert all(r.status_code == 200 for r in responses)
        assert fake_tmdb.calls("/movie/popular") == 1

    @pytest.mark.asyncio
    async def test_refresh_bypasses_cache(
        self, async_client: AsyncClient, fake_tmdb: FakeTMDB
    ) -> None:
        fake_tmdb["/movie/popular"] = POPULAR_PAGE_1

        await async_client.get("/api/v1/movies/lists/popular")
        await async_client.get("/api/v1/movies/lists/popular", params={"refresh": True})

        assert fake_tmdb.calls("/movie/popular") == 2

    @pytest.mark.asyncio
    async def test_no_images_is_404(
        self, async_client: AsyncClient, fake_tmdb: FakeTMDB
    ) -> None:
        fake_tmdb["/movie/upcoming"] = NO_IMAGES_PAGE

        response = await async_client.get("/api/v1/movies/lists/upcoming")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "EMPTY_RESULT"

    @pytest.mark.asyncio
    async def test_unknown_category_is_400(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/v1/movies/lists/cult_classics")

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"] == {"field": "category"}

    @pytest.mark.asyncio
    async def test_invalid_page_is_422(self, async_client: AsyncClient) -> None:
        response = await async_client.get(
            "/api/v1/movies/lists/popular", params={"page": 0}
        )

        assert response.status_code == 422


class TestUpstreamErrors:
    """Tests for TMDB failures surfacing as error envelopes."""

    @pytest.mark.asyncio
    async def test_http_error_is_502(
        self, async_client: AsyncClient, fake_tmdb: FakeTMDB
    ) -> None:
        fake_tmdb["/movie/popular"] = 401

        response = await async_client.get(
            "/api/v1/movies/lists/popular", headers={"X-Request-ID": "req-1"}
        )

        assert response.status_code == 502
        error = response.json()["error"]
        assert error["code"] == "HTTP_ERROR"
        assert error["details"]["status"] == 401
        assert error["request_id"] == "req-1"

    @pytest.mark.asyncio
    async def test_network_error_is_503(
        self, async_client: AsyncClient, fake_tmdb: FakeTMDB
    ) -> None:
        fake_tmdb["/movie/550"] = httpx.ConnectError("connection refused")

        response = await async_client.get("/api/v1/movies/550")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "NETWORK_ERROR"

    @pytest.mark.asyncio
    async def test_failure_does_not_poison_cache(
        self, async_client: AsyncClient, fake_tmdb: FakeTMDB
    ) -> None:
        fake_tmdb["/movie/550"] = 500
        await async_client.get("/api/v1/movies/550")

        fake_tmdb["/movie/550"] = MOVIE_550_DETAILS
        response = await async_client.get("/api/v1/movies/550")

        assert response.status_code == 200
        assert response.json()["id"] == 550


class TestMovieDetailEndpoints:
    """Tests for detail and review endpoints."""

    @pytest.mark.asyncio
    async def test_get_movie(
        self, async_client: AsyncClient, fake_tmdb: FakeTMDB, catalog: Catalog
    ) -> None:
        fake_tmdb["/movie/550"] = MOVIE_550_DETAILS

        response = await async_client.get("/api/v1/movies/550")

        assert response.status_code == 200
        assert response.json()["title"] == "Fight Club"
        assert "movie:550" in catalog.cache

    @pytest.mark.asyncio
    async def test_full_view_then_load_more(
        self, async_client: AsyncClient, fake_tmdb: FakeTMDB
    ) -> None:
        pages = {"1": REVIEWS_PAGE_1, "2": REVIEWS_PAGE_2}
        fake_tmdb["/movie/550"] = MOVIE_550_DETAILS
        fake_tmdb["/movie/550/reviews"] = lambda request: httpx.Response(
            200, json=pages[request.url.params["page"]]
        )

        full = await async_client.get("/api/v1/movies/550/full")
        assert full.status_code == 200
        assert len(full.json()["reviews"]) == 2

        more = await async_client.post("/api/v1/movies/550/reviews/more")
        assert more.status_code == 200
        data = more.json()
        assert data["current_page"] == 2
        assert data["has_more"] is False
        assert data["items"][-1] == REVIEW_C

        done = await async_client.post("/api/v1/movies/550/reviews/more")
        assert done.json()["items"] == data["items"]
        assert fake_tmdb.calls("/movie/550/reviews") == 2

    @pytest.mark.asyncio
    async def test_get_reviews_loads_first_page(
        self, async_client: AsyncClient, fake_tmdb: FakeTMDB
    ) -> None:
        fake_tmdb["/movie/550/reviews"] = REVIEWS_PAGE_1

        response = await async_client.get("/api/v1/movies/550/reviews")

        data = response.json()
        assert data["movie_id"] == 550
        assert data["current_page"] == 1
        assert data["total_pages"] == 2
        assert data["has_more"] is True

    @pytest.mark.asyncio
    async def test_clear_reviews(
        self, async_client: AsyncClient, fake_tmdb: FakeTMDB, catalog: Catalog
    ) -> None:
        fake_tmdb["/movie/550/reviews"] = REVIEWS_PAGE_1
        await async_client.get("/api/v1/movies/550/reviews")

        response = await async_client.delete("/api/v1/movies/550/reviews")

        assert response.status_code == 200
        assert catalog.details.get_reviews(550) is None

    @pytest.mark.asyncio
    async def test_rate_movie(
        self, async_client: AsyncClient, fake_tmdb: FakeTMDB, catalog: Catalog
    ) -> None:
        fake_tmdb["/movie/550/rating"] = {"success": True, "status_code": 1}
        catalog.cache.put("movie:550", MOVIE_550_DETAILS)

        response = await async_client.post(
            "/api/v1/movies/550/rating",
            json={"value": 9.0, "guest_session_id": "g1"},
        )

        assert response.status_code == 201
        assert "movie:550" not in catalog.cache

    @pytest.mark.asyncio
    async def test_rate_movie_requires_session(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/v1/movies/550/rating", json={"value": 9.0}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestBrowseEndpoints:
    """Tests for discover, trending, genres and search."""

    @pytest.mark.asyncio
    async def test_discover(self, async_client: AsyncClient, fake_tmdb: FakeTMDB) -> None:
        fake_tmdb["/discover/movie"] = POPULAR_PAGE_1

        response = await async_client.get(
            "/api/v1/discover/movie", params={"with_genres": "28"}
        )

        assert response.status_code == 200
        params = fake_tmdb.last("/discover/movie").url.params
        assert params["with_genres"] == "28"
        assert "primary_release_year" not in params

    @pytest.mark.asyncio
    async def test_trending(self, async_client: AsyncClient, fake_tmdb: FakeTMDB) -> None:
        fake_tmdb["/trending/movie/day"] = TRENDING_MOVIES_DAY

        response = await async_client.get("/api/v1/trending/movie/day")

        assert response.json() == TRENDING_MOVIES_DAY

    @pytest.mark.asyncio
    async def test_trending_bad_window(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/v1/trending/movie/month")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_genres(self, async_client: AsyncClient, fake_tmdb: FakeTMDB) -> None:
        fake_tmdb["/genre/movie/list"] = MOVIE_GENRES

        response = await async_client.get("/api/v1/genres/movie")

        assert response.json() == MOVIE_GENRES

    @pytest.mark.asyncio
    async def test_search_requires_query(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/v1/search")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_search(self, async_client: AsyncClient, fake_tmdb: FakeTMDB) -> None:
        fake_tmdb["/search/multi"] = POPULAR_PAGE_1

        response = await async_client.get("/api/v1/search", params={"query": "fight"})

        assert response.status_code == 200
        assert fake_tmdb.last("/search/multi").url.params["query"] == "fight"


class TestCacheEndpoints:
    """Tests for /api/v1/cache."""

    @pytest.mark.asyncio
    async def test_stats_and_clear(
        self, async_client: AsyncClient, fake_tmdb: FakeTMDB
    ) -> None:
        fake_tmdb["/movie/popular"] = POPULAR_PAGE_1
        await async_client.get("/api/v1/movies/lists/popular")

        stats = (await async_client.get("/api/v1/cache/stats")).json()
        assert stats == {
            "entries": 1,
            "in_flight": 0,
            "paged_resources": 0,
            "ttl_seconds": 60.0,
        }

        response = await async_client.delete("/api/v1/cache")
        assert response.status_code == 200
        assert (await async_client.get("/api/v1/cache/stats")).json()["entries"] == 0

    @pytest.mark.asyncio
    async def test_evict_key(
        self, async_client: AsyncClient, fake_tmdb: FakeTMDB, catalog: Catalog
    ) -> None:
        fake_tmdb["/movie/popular"] = POPULAR_PAGE_1
        await async_client.get("/api/v1/movies/lists/popular")

        response = await async_client.delete("/api/v1/cache/popular:p1")

        assert response.json() == {"message": "Evicted popular:p1"}
        assert "popular:p1" not in catalog.cache

        await async_client.get("/api/v1/movies/lists/popular")
        assert fake_tmdb.calls("/movie/popular") == 2
