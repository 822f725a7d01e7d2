"""Movie detail page flow: cached details plus incrementally loaded reviews.

Detail records are cached per movie under ``movie:{id}``. Reviews are kept
in the incremental merge store under ``reviews:{id}``; opening the full
detail view seeds page 1, and each "load more" merges the next page.
"""

from typing import Any

import structlog

from cinecache.catalog.listing import extract_results
from cinecache.catalog.movies import MoviesAPI
from cinecache.core.exceptions import InvalidResponseError
from cinecache.services.cache import CacheStore
from cinecache.services.paging import IncrementalMergeStore, PagedResource

logger = structlog.get_logger(__name__)

DETAIL_APPEND = "credits,videos,images"
FULL_DETAIL_APPEND = "credits,videos,images,keywords,release_dates"


class MovieDetailsService:
    """Orchestrates detail and review loading for one movie at a time.

    Usage:
        ```python
        service = MovieDetailsService(catalog.movies, IncrementalMergeStore())
        movie = await service.fetch_full_details(550)
        while service.has_more_reviews(550):
            await service.fetch_more_reviews(550)
        ```
    """

    def __init__(self, movies: MoviesAPI, reviews: IncrementalMergeStore) -> None:
        self.movies = movies
        self.reviews = reviews

    async def fetch_movie_detail(
        self, movie_id: int, force_refresh: bool = False
    ) -> dict[str, Any]:
        """Get the cached detail record (with credits, videos and images)."""
        return await self.movies.get_movie_details(
            movie_id,
            append_to_response=DETAIL_APPEND,
            key=CacheStore.movie_key(movie_id),
            force_refresh=force_refresh,
        )

    async def fetch_full_details(
        self, movie_id: int, force_refresh: bool = False
    ) -> dict[str, Any]:
        """Load the full detail view and restart its reviews at page 1.

        Returns:
            Detail payload with ``reviews`` and ``reviews_total_pages`` added
        """
        details = await self.movies.get_movie_details(
            movie_id,
            append_to_response=FULL_DETAIL_APPEND,
            key=f"{CacheStore.movie_key(movie_id)}:full",
            force_refresh=force_refresh,
        )
        first_page = await self.movies.get_movie_reviews(
            movie_id, 1, force_refresh=force_refresh
        )

        parent_key = CacheStore.reviews_key(movie_id)
        self.reviews.reset(parent_key)
        resource = self._merge(parent_key, first_page, requested_page=1)

        return {
            **details,
            "reviews": list(resource.items),
            "reviews_total_pages": resource.total_pages,
        }

    async def fetch_more_reviews(self, movie_id: int) -> PagedResource:
        """Fetch and merge the next page of reviews.

        With nothing loaded yet this fetches page 1. When every page is
        already loaded the current resource is returned without a request.
        """
        parent_key = CacheStore.reviews_key(movie_id)
        current = self.reviews.get(parent_key)
        if current is not None and not current.has_more:
            logger.debug("reviews_exhausted", movie_id=movie_id)
            return current

        page = self.reviews.next_page(parent_key)
        payload = await self.movies.get_movie_reviews(movie_id, page)
        return self._merge(parent_key, payload, requested_page=page)

    def get_reviews(self, movie_id: int) -> PagedResource | None:
        return self.reviews.get(CacheStore.reviews_key(movie_id))

    def has_more_reviews(self, movie_id: int) -> bool:
        return self.reviews.has_more(CacheStore.reviews_key(movie_id))

    def clear_current(self, movie_id: int) -> None:
        """Forget the loaded reviews when the detail view closes."""
        self.reviews.reset(CacheStore.reviews_key(movie_id))

    def _merge(
        self, parent_key: str, payload: Any, requested_page: int
    ) -> PagedResource:
        if not isinstance(payload, dict):
            raise InvalidResponseError(
                "Expected a paged review object", endpoint_path=parent_key
            )
        items = extract_results(payload, source=parent_key)
        page = int(payload.get("page") or requested_page)
        total_pages = int(payload.get("total_pages") or 0)
        return self.reviews.merge_page(parent_key, page, items, total_pages)
