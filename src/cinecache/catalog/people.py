"""Person endpoints."""

from typing import Any

from cinecache.catalog.base import CatalogModule, require_page


class PeopleAPI(CatalogModule):
    """Cast and crew reads."""

    async def search_people(
        self,
        query: str,
        page: int = 1,
        language: str | None = None,
        region: str | None = None,
        include_adult: bool = False,
    ) -> dict[str, Any]:
        return await self._get(
            "/search/person",
            {
                "query": query,
                "page": require_page(page),
                "language": self._lang(language),
                "include_adult": include_adult,
                "region": region or None,
            },
        )

    async def get_person_details(
        self,
        person_id: int,
        language: str | None = None,
        append_to_response: str | None = None,
    ) -> dict[str, Any]:
        return await self._get(
            f"/person/{person_id}",
            {
                "language": self._lang(language),
                "append_to_response": append_to_response or None,
            },
        )

    async def get_popular_people(
        self, page: int = 1, language: str | None = None
    ) -> dict[str, Any]:
        return await self._get(
            "/person/popular",
            {"page": require_page(page), "language": self._lang(language)},
        )

    async def get_person_movie_credits(
        self, person_id: int, language: str | None = None
    ) -> dict[str, Any]:
        return await self._get(
            f"/person/{person_id}/movie_credits", {"language": self._lang(language)}
        )

    async def get_person_tv_credits(
        self, person_id: int, language: str | None = None
    ) -> dict[str, Any]:
        return await self._get(
            f"/person/{person_id}/tv_credits", {"language": self._lang(language)}
        )

    async def get_person_combined_credits(
        self, person_id: int, language: str | None = None
    ) -> dict[str, Any]:
        return await self._get(
            f"/person/{person_id}/combined_credits", {"language": self._lang(language)}
        )

    async def get_person_images(self, person_id: int) -> dict[str, Any]:
        """Profile images; not language-filtered."""
        return await self._get(f"/person/{person_id}/images")
