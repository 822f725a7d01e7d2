"""Shared plumbing for catalog capability modules."""

from collections.abc import Mapping
from typing import Any

from cinecache.core.exceptions import ValidationError
from cinecache.services.cache import RequestParams
from cinecache.services.coordinator import RequestCoordinator

DEFAULT_LANGUAGE = "ko-KR"


class CatalogModule:
    """Base class for one group of TMDB endpoints.

    GET reads go through the request coordinator, so every module shares
    one cache and one in-flight table.
    """

    def __init__(
        self,
        coordinator: RequestCoordinator,
        *,
        language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self.coordinator = coordinator
        self.language = language

    def _lang(self, language: str | None) -> str:
        return language or self.language

    async def _get(
        self,
        path: str,
        query: Mapping[str, Any] | None = None,
        *,
        key: str | None = None,
        force_refresh: bool = False,
    ) -> Any:
        params = RequestParams.of(path, query)
        return await self.coordinator.fetch_with_cache(
            key or params.cache_key(),
            params,
            force_refresh=force_refresh,
        )


def require_page(page: int) -> int:
    """Validate a 1-based page number (TMDB accepts 1..500)."""
    if not 1 <= page <= 500:
        raise ValidationError("page must be between 1 and 500", field="page")
    return page


def require_choice(value: str, choices: frozenset[str], field: str) -> str:
    if value not in choices:
        raise ValidationError(
            f"{field} must be one of {', '.join(sorted(choices))}", field=field
        )
    return value
