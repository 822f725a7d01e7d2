"""Genre list endpoints."""

from typing import Any

from cinecache.catalog.base import CatalogModule, require_choice

GENRE_MEDIA = frozenset({"movie", "tv"})


class GenresAPI(CatalogModule):
    async def get_genres(
        self, media_type: str, language: str | None = None
    ) -> dict[str, Any]:
        require_choice(media_type, GENRE_MEDIA, "media_type")
        return await self._get(
            f"/genre/{media_type}/list", {"language": self._lang(language)}
        )

    async def get_movie_genres(self, language: str | None = None) -> dict[str, Any]:
        return await self.get_genres("movie", language)

    async def get_tv_genres(self, language: str | None = None) -> dict[str, Any]:
        return await self.get_genres("tv", language)
