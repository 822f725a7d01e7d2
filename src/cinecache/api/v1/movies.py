"""Movie endpoints: carousel lists, detail view and incremental reviews.

List and detail reads go through the shared request coordinator, so
concurrent requests for the same key reach TMDB once and repeated reads
inside the TTL are served from memory.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Query, status

from cinecache.catalog.listing import build_slides
from cinecache.core.logging import get_logger
from cinecache.dependencies import CatalogDep
from cinecache.schemas.common import ErrorResponse, MessageResponse
from cinecache.schemas.movies import (
    MovieListResponse,
    RatingRequest,
    ReviewPageResponse,
    SlideItem,
)

logger = get_logger(__name__)

router = APIRouter()

UPSTREAM_ERRORS: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    502: {"model": ErrorResponse, "description": "External service error"},
    503: {"model": ErrorResponse, "description": "TMDB unreachable"},
}

Refresh = Annotated[
    bool, Query(description="Bypass the cache and fetch a fresh copy")
]


# =============================================================================
# Carousel Lists
# =============================================================================


@router.get(
    "/lists/{category}",
    response_model=MovieListResponse,
    summary="Get a carousel list",
    description="Popular, top rated, now playing or upcoming movies as slides.",
    responses={
        **UPSTREAM_ERRORS,
        404: {"model": ErrorResponse, "description": "No titles with images"},
    },
)
async def get_movie_list(
    category: str,
    catalog: CatalogDep,
    page: Annotated[int, Query(ge=1, le=500, description="Page number")] = 1,
    image_size: Annotated[str, Query(description="Backdrop size")] = "w300",
    refresh: Refresh = False,
) -> MovieListResponse:
    """Fetch a movie list and shape it into slides.

    Entries without a backdrop are dropped. If none remain, a 404 with
    code EMPTY_RESULT is returned.
    """
    logger.info("movie_list_request", category=category, page=page, refresh=refresh)

    response = await catalog.movies.get_movie_list(
        category, page, force_refresh=refresh
    )
    slides = build_slides(
        response, catalog.images, image_size=image_size, source=category
    )

    meta = response if isinstance(response, dict) else {}
    return MovieListResponse(
        category=category,
        page=meta.get("page", page),
        total_pages=meta.get("total_pages", 0),
        slides=[SlideItem(**slide.to_dict()) for slide in slides],
    )


# =============================================================================
# Detail
# =============================================================================


@router.get(
    "/{movie_id}",
    summary="Get movie details",
    description="Detail record with credits, videos and images appended.",
    responses=UPSTREAM_ERRORS,
)
async def get_movie(
    movie_id: int,
    catalog: CatalogDep,
    refresh: Refresh = False,
) -> dict[str, Any]:
    logger.info("movie_detail_request", movie_id=movie_id, refresh=refresh)
    return await catalog.details.fetch_movie_detail(movie_id, force_refresh=refresh)


@router.get(
    "/{movie_id}/full",
    summary="Open the full detail view",
    description=(
        "Detail record with keywords and release dates, plus the first page "
        "of reviews. Resets any reviews loaded earlier for this movie."
    ),
    responses=UPSTREAM_ERRORS,
)
async def get_movie_full(
    movie_id: int,
    catalog: CatalogDep,
    refresh: Refresh = False,
) -> dict[str, Any]:
    logger.info("movie_full_detail_request", movie_id=movie_id, refresh=refresh)
    return await catalog.details.fetch_full_details(movie_id, force_refresh=refresh)


@router.get(
    "/{movie_id}/similar",
    summary="Get similar movies",
    responses=UPSTREAM_ERRORS,
)
async def get_similar_movies(
    movie_id: int,
    catalog: CatalogDep,
    page: Annotated[int, Query(ge=1, le=500)] = 1,
) -> dict[str, Any]:
    return await catalog.movies.get_similar_movies(movie_id, page)


@router.get(
    "/{movie_id}/recommendations",
    summary="Get recommended movies",
    responses=UPSTREAM_ERRORS,
)
async def get_movie_recommendations(
    movie_id: int,
    catalog: CatalogDep,
    page: Annotated[int, Query(ge=1, le=500)] = 1,
) -> dict[str, Any]:
    return await catalog.movies.get_movie_recommendations(movie_id, page)


# =============================================================================
# Reviews
# =============================================================================


@router.get(
    "/{movie_id}/reviews",
    response_model=ReviewPageResponse,
    summary="Get loaded reviews",
    description="Reviews merged so far. Loads page 1 if nothing is loaded yet.",
    responses=UPSTREAM_ERRORS,
)
async def get_reviews(movie_id: int, catalog: CatalogDep) -> ReviewPageResponse:
    resource = catalog.details.get_reviews(movie_id)
    if resource is None:
        resource = await catalog.details.fetch_more_reviews(movie_id)
    return ReviewPageResponse.from_resource(movie_id, resource)


@router.post(
    "/{movie_id}/reviews/more",
    response_model=ReviewPageResponse,
    summary="Load more reviews",
    description=(
        "Fetch the next page of reviews and append it. "
        "Does nothing once every page is loaded."
    ),
    responses=UPSTREAM_ERRORS,
)
async def load_more_reviews(movie_id: int, catalog: CatalogDep) -> ReviewPageResponse:
    logger.info("load_more_reviews_request", movie_id=movie_id)
    resource = await catalog.details.fetch_more_reviews(movie_id)
    return ReviewPageResponse.from_resource(movie_id, resource)


@router.delete(
    "/{movie_id}/reviews",
    response_model=MessageResponse,
    summary="Forget loaded reviews",
)
async def clear_reviews(movie_id: int, catalog: CatalogDep) -> MessageResponse:
    catalog.details.clear_current(movie_id)
    return MessageResponse(message=f"Reviews for movie {movie_id} cleared")


# =============================================================================
# Rating
# =============================================================================


@router.post(
    "/{movie_id}/rating",
    status_code=status.HTTP_201_CREATED,
    summary="Rate a movie",
    description="Requires a user or guest session. Evicts the cached detail record.",
    responses=UPSTREAM_ERRORS,
)
async def rate_movie(
    movie_id: int,
    body: RatingRequest,
    catalog: CatalogDep,
) -> dict[str, Any]:
    return await catalog.movies.rate_movie(
        movie_id,
        body.value,
        session_id=body.session_id,
        guest_session_id=body.guest_session_id,
    )
