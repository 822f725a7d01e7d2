"""Movie and cache API schemas.

Detail, discover and search payloads are TMDB objects passed through as-is;
only the shapes this service builds itself are modelled here.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cinecache.services.paging import PagedResource

# =============================================================================
# Carousel Lists
# =============================================================================


class SlideItem(BaseModel):
    """One carousel card."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="TMDB movie ID")
    img: str = Field(..., description="Backdrop image URL")
    alt: str = Field(..., description="Image alt text")
    title: str = Field(..., description="Movie title")
    overview: str = Field(..., description="Plot overview")
    release_date: str = Field("", description="Release date (YYYY-MM-DD)")
    vote_average: float = Field(0.0, ge=0, description="Average vote")


class MovieListResponse(BaseModel):
    """A carousel list with pagination info."""

    category: str = Field(..., description="List name (e.g., popular)")
    page: int = Field(..., ge=1, description="Page number")
    total_pages: int = Field(..., ge=0, description="Total pages available")
    slides: list[SlideItem] = Field(..., description="Cards with a usable image")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "category": "popular",
                "page": 1,
                "total_pages": 500,
                "slides": [
                    {
                        "id": 550,
                        "img": "https://image.tmdb.org/t/p/w300/hZkgoQYus5vegHoetLkCJzb17zJ.jpg",
                        "alt": "Fight Club",
                        "title": "Fight Club",
                        "overview": "A ticking-time-bomb insomniac...",
                        "release_date": "1999-10-15",
                        "vote_average": 8.4,
                    }
                ],
            }
        }
    )


# =============================================================================
# Reviews
# =============================================================================


class ReviewPageResponse(BaseModel):
    """Reviews accumulated so far for one movie."""

    movie_id: int = Field(..., description="TMDB movie ID")
    items: list[dict[str, Any]] = Field(..., description="Reviews in page order")
    current_page: int = Field(..., ge=1, description="Last page merged")
    total_pages: int = Field(..., ge=0, description="Total pages available")
    has_more: bool = Field(..., description="More pages can be loaded")

    @classmethod
    def from_resource(cls, movie_id: int, resource: PagedResource) -> "ReviewPageResponse":
        return cls(
            movie_id=movie_id,
            items=list(resource.items),
            current_page=resource.current_page,
            total_pages=resource.total_pages,
            has_more=resource.has_more,
        )


# =============================================================================
# Cache Admin
# =============================================================================


class CacheStatsResponse(BaseModel):
    """Snapshot of the in-memory cache."""

    entries: int = Field(..., ge=0, description="Cached responses")
    in_flight: int = Field(..., ge=0, description="Requests currently outstanding")
    paged_resources: int = Field(..., ge=0, description="Parents with merged pages")
    ttl_seconds: float = Field(..., gt=0, description="Cache time-to-live")


# =============================================================================
# Rating
# =============================================================================


class RatingRequest(BaseModel):
    """Body for rating a movie."""

    value: float = Field(..., ge=0.5, le=10.0, description="Rating in 0.5 steps")
    session_id: str | None = Field(None, description="User session ID")
    guest_session_id: str | None = Field(None, description="Guest session ID")

    model_config = ConfigDict(
        json_schema_extra={"example": {"value": 8.5, "guest_session_id": "abc123"}}
    )
