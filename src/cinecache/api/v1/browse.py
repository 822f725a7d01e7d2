"""Browse endpoints: discover, trending, genres, search, TV and people.

Payloads are TMDB objects passed through unchanged. Invalid media types or
time windows come back as 400 VALIDATION_ERROR from the catalog modules.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Query

from cinecache.api.v1.movies import UPSTREAM_ERRORS
from cinecache.core.logging import get_logger
from cinecache.dependencies import CatalogDep

logger = get_logger(__name__)

router = APIRouter()

Page = Annotated[int, Query(ge=1, le=500, description="Page number")]


# =============================================================================
# Discover
# =============================================================================


@router.get(
    "/discover/movie",
    summary="Discover movies",
    description="Filter movies by genre, release year and sort order.",
    responses=UPSTREAM_ERRORS,
)
async def discover_movies(
    catalog: CatalogDep,
    page: Page = 1,
    sort_by: Annotated[str, Query(description="e.g. popularity.desc")] = "popularity.desc",
    with_genres: Annotated[
        str | None, Query(description="Comma-separated genre IDs")
    ] = None,
    primary_release_year: Annotated[int | None, Query(ge=1870, le=2100)] = None,
) -> dict[str, Any]:
    logger.info(
        "discover_movies_request",
        page=page,
        sort_by=sort_by,
        with_genres=with_genres,
    )
    return await catalog.discover.discover_movies(
        page=page,
        sort_by=sort_by,
        with_genres=with_genres,
        primary_release_year=primary_release_year,
    )


@router.get(
    "/discover/tv",
    summary="Discover TV shows",
    responses=UPSTREAM_ERRORS,
)
async def discover_tv_shows(
    catalog: CatalogDep,
    page: Page = 1,
    sort_by: str = "popularity.desc",
    with_genres: str | None = None,
    first_air_date_year: Annotated[int | None, Query(ge=1900, le=2100)] = None,
) -> dict[str, Any]:
    return await catalog.discover.discover_tv_shows(
        page=page,
        sort_by=sort_by,
        with_genres=with_genres,
        first_air_date_year=first_air_date_year,
    )


# =============================================================================
# Trending & Genres
# =============================================================================


@router.get(
    "/trending/{media_type}/{time_window}",
    summary="Get trending content",
    description="media_type: all, movie, tv or person. time_window: day or week.",
    responses=UPSTREAM_ERRORS,
)
async def get_trending(
    media_type: str, time_window: str, catalog: CatalogDep
) -> dict[str, Any]:
    return await catalog.trending.get_trending(media_type, time_window)


@router.get(
    "/genres/{media_type}",
    summary="Get the genre list",
    description="media_type: movie or tv.",
    responses=UPSTREAM_ERRORS,
)
async def get_genres(media_type: str, catalog: CatalogDep) -> dict[str, Any]:
    return await catalog.genres.get_genres(media_type)


# =============================================================================
# Search
# =============================================================================


@router.get(
    "/search",
    summary="Search movies, TV shows and people",
    responses=UPSTREAM_ERRORS,
)
async def search_multi(
    catalog: CatalogDep,
    query: Annotated[str, Query(min_length=1, max_length=200)],
    page: Page = 1,
) -> dict[str, Any]:
    logger.info("search_multi_request", query=query, page=page)
    return await catalog.search.search_multi(query, page)


# =============================================================================
# TV & People
# =============================================================================


@router.get(
    "/tv/lists/{category}",
    summary="Get a TV list",
    description="popular, top_rated, on_the_air or airing_today.",
    responses=UPSTREAM_ERRORS,
)
async def get_tv_list(
    category: str, catalog: CatalogDep, page: Page = 1
) -> dict[str, Any]:
    return await catalog.tv.get_tv_list(category, page)


@router.get(
    "/tv/{tv_id}",
    summary="Get TV show details",
    responses=UPSTREAM_ERRORS,
)
async def get_tv_show(tv_id: int, catalog: CatalogDep) -> dict[str, Any]:
    return await catalog.tv.get_tv_show_details(tv_id)


@router.get(
    "/people/popular",
    summary="Get popular people",
    responses=UPSTREAM_ERRORS,
)
async def get_popular_people(catalog: CatalogDep, page: Page = 1) -> dict[str, Any]:
    return await catalog.people.get_popular_people(page)


@router.get(
    "/people/{person_id}",
    summary="Get person details",
    responses=UPSTREAM_ERRORS,
)
async def get_person(person_id: int, catalog: CatalogDep) -> dict[str, Any]:
    return await catalog.people.get_person_details(person_id)
