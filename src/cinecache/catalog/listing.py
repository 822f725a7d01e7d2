"""Shape raw list responses into carousel slides.

A list response is accepted either as ``{"results": [...]}`` or as a bare
list. Anything else is an InvalidResponseError. Titles without a backdrop
or an integer id are skipped; if none remain, EmptyResultError tells the UI
to render its empty state.
"""

from dataclasses import asdict, dataclass
from typing import Any

from cinecache.catalog.images import ImageURLs
from cinecache.core.exceptions import EmptyResultError, InvalidResponseError

DEFAULT_TITLE = "Untitled"
DEFAULT_OVERVIEW = "No overview available."


@dataclass
class Slide:
    """One carousel card."""

    id: int
    img: str
    alt: str
    title: str
    overview: str
    release_date: str
    vote_average: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def extract_results(response: Any, source: str | None = None) -> list[dict[str, Any]]:
    """Return the result list from a list response.

    Raises:
        InvalidResponseError: If no list can be found
    """
    if isinstance(response, dict):
        response = response.get("results")
    if not isinstance(response, list):
        raise InvalidResponseError(
            "Expected a list of results", endpoint_path=source
        )
    return response


def build_slides(
    response: Any,
    images: ImageURLs,
    *,
    image_size: str = "w300",
    source: str | None = None,
) -> list[Slide]:
    """Convert a movie list response into slides with backdrop images.

    Args:
        response: Raw list response
        images: URL builder for backdrops
        image_size: Backdrop size
        source: Label for error details (e.g., "popular")

    Raises:
        InvalidResponseError: Response is not a list or has no results list
        InvalidResponseError: An entry has a non-numeric vote_average
        EmptyResultError: No entry has a usable backdrop and id
    """
    slides = []
    for movie in extract_results(response, source):
        if not isinstance(movie, dict) or not movie.get("backdrop_path"):
            continue
        movie_id = movie.get("id")
        if not isinstance(movie_id, int) or isinstance(movie_id, bool):
            continue
        title = movie.get("title") or movie.get("name") or DEFAULT_TITLE
        slides.append(
            Slide(
                id=movie_id,
                img=images.backdrop_url(movie["backdrop_path"], image_size) or "",
                alt=title,
                title=title,
                overview=movie.get("overview") or DEFAULT_OVERVIEW,
                release_date=movie.get("release_date") or "",
                vote_average=_vote_average(movie, source),
            )
        )

    if not slides:
        raise EmptyResultError("No titles with images to display", source=source)
    return slides


def _vote_average(movie: dict[str, Any], source: str | None) -> float:
    try:
        return float(movie.get("vote_average") or 0)
    except (TypeError, ValueError) as e:
        raise InvalidResponseError(
            f"vote_average is not numeric for id {movie.get('id')}",
            endpoint_path=source,
        ) from e
