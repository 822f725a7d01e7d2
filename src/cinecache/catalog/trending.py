"""Trending endpoints."""

from typing import Any

from cinecache.catalog.base import CatalogModule, require_choice

MEDIA_TYPES = frozenset({"all", "movie", "tv", "person"})
TIME_WINDOWS = frozenset({"day", "week"})


class TrendingAPI(CatalogModule):
    """Trending content over a daily or weekly window."""

    async def get_trending(
        self,
        media_type: str = "all",
        time_window: str = "day",
        language: str | None = None,
    ) -> dict[str, Any]:
        require_choice(media_type, MEDIA_TYPES, "media_type")
        require_choice(time_window, TIME_WINDOWS, "time_window")
        return await self._get(
            f"/trending/{media_type}/{time_window}",
            {"language": self._lang(language)},
        )

    async def get_trending_all(
        self, time_window: str = "day", language: str | None = None
    ) -> dict[str, Any]:
        return await self.get_trending("all", time_window, language)

    async def get_trending_movies(
        self, time_window: str = "day", language: str | None = None
    ) -> dict[str, Any]:
        return await self.get_trending("movie", time_window, language)

    async def get_trending_people(
        self, time_window: str = "day", language: str | None = None
    ) -> dict[str, Any]:
        return await self.get_trending("person", time_window, language)

    async def get_trending_tv_shows(
        self, time_window: str = "day", language: str | None = None
    ) -> dict[str, Any]:
        return await self.get_trending("tv", time_window, language)
