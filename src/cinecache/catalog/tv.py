"""TV endpoints, mirroring the movie module."""

from typing import Any

from cinecache.catalog.base import CatalogModule, require_choice, require_page

TV_LISTS: dict[str, str] = {
    "popular": "/tv/popular",
    "top_rated": "/tv/top_rated",
    "on_the_air": "/tv/on_the_air",
    "airing_today": "/tv/airing_today",
}


class TVAPI(CatalogModule):
    """TV show reads."""

    async def search_tv_shows(
        self,
        query: str,
        page: int = 1,
        language: str | None = None,
        first_air_date_year: int | None = None,
        include_adult: bool = False,
    ) -> dict[str, Any]:
        return await self._get(
            "/search/tv",
            {
                "query": query,
                "page": require_page(page),
                "language": self._lang(language),
                "include_adult": include_adult,
                "first_air_date_year": first_air_date_year or None,
            },
        )

    async def get_tv_show_details(
        self,
        tv_id: int,
        language: str | None = None,
        append_to_response: str | None = None,
        *,
        force_refresh: bool = False,
    ) -> dict[str, Any]:
        return await self._get(
            f"/tv/{tv_id}",
            {
                "language": self._lang(language),
                "append_to_response": append_to_response or None,
            },
            force_refresh=force_refresh,
        )

    async def get_tv_list(
        self, category: str, page: int = 1, language: str | None = None
    ) -> dict[str, Any]:
        """Get one of popular, top_rated, on_the_air, airing_today."""
        require_choice(category, frozenset(TV_LISTS), "category")
        return await self._get(
            TV_LISTS[category],
            {"page": require_page(page), "language": self._lang(language)},
        )

    async def get_popular_tv_shows(
        self, page: int = 1, language: str | None = None
    ) -> dict[str, Any]:
        return await self.get_tv_list("popular", page, language)

    async def get_top_rated_tv_shows(
        self, page: int = 1, language: str | None = None
    ) -> dict[str, Any]:
        return await self.get_tv_list("top_rated", page, language)

    async def get_on_the_air_tv_shows(
        self, page: int = 1, language: str | None = None
    ) -> dict[str, Any]:
        return await self.get_tv_list("on_the_air", page, language)

    async def get_airing_today_tv_shows(
        self, page: int = 1, language: str | None = None
    ) -> dict[str, Any]:
        return await self.get_tv_list("airing_today", page, language)

    async def get_tv_show_credits(
        self, tv_id: int, language: str | None = None
    ) -> dict[str, Any]:
        return await self._get(f"/tv/{tv_id}/credits", {"language": self._lang(language)})

    async def get_tv_show_videos(
        self, tv_id: int, language: str | None = None
    ) -> dict[str, Any]:
        return await self._get(f"/tv/{tv_id}/videos", {"language": self._lang(language)})

    async def get_tv_season_details(
        self, tv_id: int, season_number: int, language: str | None = None
    ) -> dict[str, Any]:
        return await self._get(
            f"/tv/{tv_id}/season/{season_number}",
            {"language": self._lang(language)},
        )

    async def get_tv_episode_details(
        self,
        tv_id: int,
        season_number: int,
        episode_number: int,
        language: str | None = None,
    ) -> dict[str, Any]:
        return await self._get(
            f"/tv/{tv_id}/season/{season_number}/episode/{episode_number}",
            {"language": self._lang(language)},
        )
