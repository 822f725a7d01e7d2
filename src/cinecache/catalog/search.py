"""Cross-entity search endpoints.

Movie, TV and person searches live with their own modules; this one covers
multi-search plus companies, collections and keywords.
"""

from typing import Any

from cinecache.catalog.base import CatalogModule, require_page


class SearchAPI(CatalogModule):
    async def search_multi(
        self,
        query: str,
        page: int = 1,
        language: str | None = None,
        region: str | None = None,
        include_adult: bool = False,
    ) -> dict[str, Any]:
        """Search movies, TV shows and people in one call."""
        return await self._get(
            "/search/multi",
            {
                "query": query,
                "page": require_page(page),
                "language": self._lang(language),
                "include_adult": include_adult,
                "region": region or None,
            },
        )

    async def search_companies(self, query: str, page: int = 1) -> dict[str, Any]:
        return await self._get(
            "/search/company", {"query": query, "page": require_page(page)}
        )

    async def search_collections(
        self, query: str, page: int = 1, language: str | None = None
    ) -> dict[str, Any]:
        return await self._get(
            "/search/collection",
            {
                "query": query,
                "page": require_page(page),
                "language": self._lang(language),
            },
        )

    async def search_keywords(self, query: str, page: int = 1) -> dict[str, Any]:
        return await self._get(
            "/search/keyword", {"query": query, "page": require_page(page)}
        )
