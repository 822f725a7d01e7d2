"""Catalog capability modules and their composition.

Each module covers one group of TMDB endpoints over a shared request
coordinator. ``build_catalog`` wires them together; callers pick the module
they need (``catalog.movies``, ``catalog.trending``...) rather than going
through one merged client object.
"""

from dataclasses import dataclass

from cinecache.catalog.details import MovieDetailsService
from cinecache.catalog.discover import DiscoverAPI
from cinecache.catalog.genres import GenresAPI
from cinecache.catalog.images import ImageURLs
from cinecache.catalog.listing import Slide, build_slides
from cinecache.catalog.movies import MOVIE_LISTS, MoviesAPI
from cinecache.catalog.people import PeopleAPI
from cinecache.catalog.search import SearchAPI
from cinecache.catalog.trending import TrendingAPI
from cinecache.catalog.tv import TVAPI
from cinecache.config import Settings
from cinecache.services.cache import CacheStore, Clock
from cinecache.services.coordinator import RequestCoordinator, RetryPolicy
from cinecache.services.paging import IncrementalMergeStore
from cinecache.services.tmdb_client import TMDBClient


@dataclass
class Catalog:
    """The composed catalog: shared state plus one object per capability."""

    client: TMDBClient
    cache: CacheStore
    coordinator: RequestCoordinator
    reviews: IncrementalMergeStore
    movies: MoviesAPI
    tv: TVAPI
    people: PeopleAPI
    discover: DiscoverAPI
    trending: TrendingAPI
    genres: GenresAPI
    search: SearchAPI
    images: ImageURLs
    details: MovieDetailsService

    def clear_cache(self) -> None:
        """Wipe cached responses and accumulated pages."""
        self.coordinator.clear()
        self.reviews.clear()

    async def close(self) -> None:
        await self.client.close()


def build_catalog(
    settings: Settings,
    *,
    client: TMDBClient | None = None,
    clock: Clock | None = None,
) -> Catalog:
    """Compose a catalog from settings.

    Args:
        settings: Application settings
        client: Pre-built remote client (tests pass one with a mock transport)
        clock: Time source for cache freshness

    Returns:
        Catalog with every module sharing one cache and coordinator
    """
    if client is None:
        client = TMDBClient.from_settings(settings)
    cache = (
        CacheStore(ttl=settings.cache_ttl_seconds, clock=clock)
        if clock is not None
        else CacheStore(ttl=settings.cache_ttl_seconds)
    )
    coordinator = RequestCoordinator(
        client,
        cache,
        retry_policy=RetryPolicy(
            max_retries=settings.coordinator_max_retries,
            base_delay=settings.coordinator_retry_base_delay,
        ),
    )
    reviews = IncrementalMergeStore()
    language = settings.tmdb_language
    movies = MoviesAPI(
        coordinator,
        language=language,
        review_language=settings.tmdb_review_language,
    )

    return Catalog(
        client=client,
        cache=cache,
        coordinator=coordinator,
        reviews=reviews,
        movies=movies,
        tv=TVAPI(coordinator, language=language),
        people=PeopleAPI(coordinator, language=language),
        discover=DiscoverAPI(coordinator, language=language),
        trending=TrendingAPI(coordinator, language=language),
        genres=GenresAPI(coordinator, language=language),
        search=SearchAPI(coordinator, language=language),
        images=ImageURLs(settings.tmdb_image_base_url),
        details=MovieDetailsService(movies, reviews),
    )


__all__ = [
    "Catalog",
    "DiscoverAPI",
    "GenresAPI",
    "ImageURLs",
    "MOVIE_LISTS",
    "MovieDetailsService",
    "MoviesAPI",
    "PeopleAPI",
    "SearchAPI",
    "Slide",
    "TVAPI",
    "TrendingAPI",
    "build_catalog",
    "build_slides",
]
