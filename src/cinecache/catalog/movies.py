"""Movie endpoints: lists, details, sub-resources, and rating."""

from typing import Any

import structlog

from cinecache.catalog.base import (
    DEFAULT_LANGUAGE,
    CatalogModule,
    require_choice,
    require_page,
)
from cinecache.core.exceptions import ValidationError
from cinecache.services.cache import CacheStore
from cinecache.services.coordinator import RequestCoordinator

logger = structlog.get_logger(__name__)

# Carousel name -> TMDB list path
MOVIE_LISTS: dict[str, str] = {
    "popular": "/movie/popular",
    "top_rated": "/movie/top_rated",
    "now_playing": "/movie/now_playing",
    "upcoming": "/movie/upcoming",
}


class MoviesAPI(CatalogModule):
    """Movie reads (cached) and the rating write (never cached)."""

    def __init__(
        self,
        coordinator: RequestCoordinator,
        *,
        language: str = DEFAULT_LANGUAGE,
        review_language: str = "en-US",
    ) -> None:
        super().__init__(coordinator, language=language)
        self.review_language = review_language

    async def search_movies(
        self,
        query: str,
        page: int = 1,
        language: str | None = None,
        region: str | None = None,
        year: int | None = None,
        primary_release_year: int | None = None,
        include_adult: bool = False,
    ) -> dict[str, Any]:
        """Search movies by title."""
        return await self._get(
            "/search/movie",
            {
                "query": query,
                "page": require_page(page),
                "language": self._lang(language),
                "include_adult": include_adult,
                "region": region or None,
                "year": year or None,
                "primary_release_year": primary_release_year or None,
            },
        )

    async def get_movie_details(
        self,
        movie_id: int,
        language: str | None = None,
        append_to_response: str | None = None,
        *,
        key: str | None = None,
        force_refresh: bool = False,
    ) -> dict[str, Any]:
        """Get one movie.

        ``append_to_response`` folds sub-resources into the same payload
        (e.g., "credits,videos,images").
        """
        return await self._get(
            f"/movie/{movie_id}",
            {
                "language": self._lang(language),
                "append_to_response": append_to_response or None,
            },
            key=key,
            force_refresh=force_refresh,
        )

    async def get_movie_list(
        self,
        category: str,
        page: int = 1,
        language: str | None = None,
        region: str | None = None,
        *,
        force_refresh: bool = False,
    ) -> dict[str, Any]:
        """Get one of the carousel lists (popular, top_rated, now_playing, upcoming)."""
        require_choice(category, frozenset(MOVIE_LISTS), "category")
        lang = self._lang(language)
        # Default-language lists get short keys like "popular:p1".
        key = f"{category}:p{page}" if lang == self.language and not region else None
        return await self._get(
            MOVIE_LISTS[category],
            {
                "page": require_page(page),
                "language": lang,
                "region": region or None,
            },
            key=key,
            force_refresh=force_refresh,
        )

    async def get_popular_movies(
        self, page: int = 1, language: str | None = None, region: str | None = None
    ) -> dict[str, Any]:
        return await self.get_movie_list("popular", page, language, region)

    async def get_top_rated_movies(
        self, page: int = 1, language: str | None = None, region: str | None = None
    ) -> dict[str, Any]:
        return await self.get_movie_list("top_rated", page, language, region)

    async def get_now_playing_movies(
        self, page: int = 1, language: str | None = None, region: str | None = None
    ) -> dict[str, Any]:
        return await self.get_movie_list("now_playing", page, language, region)

    async def get_upcoming_movies(
        self, page: int = 1, language: str | None = None, region: str | None = None
    ) -> dict[str, Any]:
        return await self.get_movie_list("upcoming", page, language, region)

    async def get_movie_credits(
        self, movie_id: int, language: str | None = None
    ) -> dict[str, Any]:
        return await self._get(
            f"/movie/{movie_id}/credits", {"language": self._lang(language)}
        )

    async def get_movie_images(
        self,
        movie_id: int,
        language: str | None = None,
        include_image_language: str | None = None,
    ) -> dict[str, Any]:
        return await self._get(
            f"/movie/{movie_id}/images",
            {
                "language": self._lang(language),
                "include_image_language": include_image_language or None,
            },
        )

    async def get_movie_videos(
        self, movie_id: int, language: str | None = None
    ) -> dict[str, Any]:
        return await self._get(
            f"/movie/{movie_id}/videos", {"language": self._lang(language)}
        )

    async def get_movie_reviews(
        self,
        movie_id: int,
        page: int = 1,
        language: str | None = None,
        *,
        force_refresh: bool = False,
    ) -> dict[str, Any]:
        """Get one page of reviews (English by default)."""
        return await self._get(
            f"/movie/{movie_id}/reviews",
            {
                "page": require_page(page),
                "language": language or self.review_language,
            },
            force_refresh=force_refresh,
        )

    async def get_similar_movies(
        self, movie_id: int, page: int = 1, language: str | None = None
    ) -> dict[str, Any]:
        return await self._get(
            f"/movie/{movie_id}/similar",
            {"page": require_page(page), "language": self._lang(language)},
        )

    async def get_movie_recommendations(
        self, movie_id: int, page: int = 1, language: str | None = None
    ) -> dict[str, Any]:
        return await self._get(
            f"/movie/{movie_id}/recommendations",
            {"page": require_page(page), "language": self._lang(language)},
        )

    async def rate_movie(
        self,
        movie_id: int,
        rating: float,
        session_id: str | None = None,
        guest_session_id: str | None = None,
    ) -> dict[str, Any]:
        """Rate a movie (0.5 to 10.0 in 0.5 steps). Requires a session.

        Writes bypass the cache. Every cached detail variant of the movie
        (``movie:{id}``, ``movie:{id}:full``) is evicted, and a detail read
        still in flight is not cached, so the next fresh read reflects the
        new rating.
        """
        if not 0.5 <= rating <= 10.0 or (rating * 2) % 1:
            raise ValidationError(
                "rating must be between 0.5 and 10.0 in steps of 0.5", field="rating"
            )
        if not session_id and not guest_session_id:
            raise ValidationError(
                "session_id or guest_session_id is required", field="session_id"
            )

        result = await self.coordinator.client.fetch(
            f"/movie/{movie_id}/rating",
            {"session_id": session_id, "guest_session_id": guest_session_id},
            method="POST",
            body={"value": rating},
        )
        movie_key = CacheStore.movie_key(movie_id)
        self.coordinator.evict(movie_key)
        self.coordinator.evict_prefix(f"{movie_key}:")
        logger.info("movie_rated", movie_id=movie_id, rating=rating)
        return result
