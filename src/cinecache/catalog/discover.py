"""Discover endpoints: filtered browsing over movies and TV.

Filters are passed through as TMDB query parameters (``with_genres``,
``primary_release_year``, ``sort_by``...). Defaults are language, popularity
descending and page 1; caller filters override them.
"""

from typing import Any

from cinecache.catalog.base import CatalogModule, require_page

DEFAULT_SORT = "popularity.desc"


class DiscoverAPI(CatalogModule):
    """Filtered discovery reads."""

    def _filters(self, filters: dict[str, Any]) -> dict[str, Any]:
        params: dict[str, Any] = {
            "language": self.language,
            "sort_by": DEFAULT_SORT,
            "page": 1,
        }
        params.update(filters)
        require_page(int(params["page"]))
        return params

    async def discover_movies(self, **filters: Any) -> dict[str, Any]:
        """Discover movies, e.g. ``discover_movies(with_genres="28,12")``."""
        return await self._get("/discover/movie", self._filters(filters))

    async def discover_tv_shows(self, **filters: Any) -> dict[str, Any]:
        return await self._get("/discover/tv", self._filters(filters))
