"""Incremental merge store for paginated sub-resources.

Accumulates pages (e.g., a movie's reviews) per parent key without
discarding what was already loaded. Pages are merged strictly in sequence:

- first merge for a parent creates the resource,
- ``page == current_page + 1`` appends and advances,
- ``page <= current_page`` leaves items alone but refreshes ``total_pages``,
- ``page > current_page + 1`` is dropped (out-of-order completions are not
  buffered).

Merging never raises on out-of-order pages.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PagedResource:
    """Accumulated, page-ordered state of one parent's sub-resource."""

    parent_key: str
    items: tuple[Any, ...] = field(default_factory=tuple)
    current_page: int = 1
    total_pages: int = 0

    @property
    def has_more(self) -> bool:
        """Check if there are more pages to fetch."""
        return self.current_page < self.total_pages

    @property
    def next_page(self) -> int:
        return self.current_page + 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "parent_key": self.parent_key,
            "items": list(self.items),
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "has_more": self.has_more,
        }


class IncrementalMergeStore:
    """Per-parent store of paged resources with sequential merging.

    Usage:
        ```python
        store = IncrementalMergeStore()
        store.merge_page("reviews:550", 1, page_one["results"], page_one["total_pages"])
        if store.has_more("reviews:550"):
            ...
        ```
    """

    def __init__(self) -> None:
        self._resources: dict[str, PagedResource] = {}

    def merge_page(
        self,
        parent_key: str,
        page: int,
        items: Iterable[Any],
        total_pages: int,
    ) -> PagedResource:
        """Merge one fetched page into the parent's resource.

        Args:
            parent_key: Owner of the paged resource (e.g., "reviews:550")
            page: 1-based page number that was fetched
            items: Items on that page
            total_pages: Total pages reported by the remote API

        Returns:
            The resource after the merge (unchanged on a dropped page)
        """
        if page < 1:
            raise ValueError("page must be >= 1")
        total_pages = max(0, total_pages)

        existing = self._resources.get(parent_key)
        if existing is None:
            resource = self._clamp(
                PagedResource(
                    parent_key=parent_key,
                    items=tuple(items),
                    current_page=page,
                    total_pages=total_pages,
                )
            )
            self._resources[parent_key] = resource
            logger.debug(
                "page_merged",
                parent_key=parent_key,
                page=page,
                total_pages=resource.total_pages,
                item_count=len(resource.items),
            )
            return resource

        if page == existing.current_page + 1:
            resource = self._clamp(
                replace(
                    existing,
                    items=existing.items + tuple(items),
                    current_page=page,
                    total_pages=total_pages,
                )
            )
            self._resources[parent_key] = resource
            logger.debug(
                "page_merged",
                parent_key=parent_key,
                page=page,
                total_pages=resource.total_pages,
                item_count=len(resource.items),
            )
            return resource

        if page <= existing.current_page:
            if total_pages != existing.total_pages:
                existing = self._clamp(replace(existing, total_pages=total_pages))
                self._resources[parent_key] = existing
            logger.debug(
                "page_already_loaded",
                parent_key=parent_key,
                page=page,
                current_page=existing.current_page,
            )
            return existing

        logger.info(
            "page_out_of_order",
            parent_key=parent_key,
            page=page,
            current_page=existing.current_page,
        )
        return existing

    def get(self, parent_key: str) -> PagedResource | None:
        return self._resources.get(parent_key)

    def has_more(self, parent_key: str) -> bool:
        """True while pages beyond ``current_page`` remain; False if unknown."""
        resource = self._resources.get(parent_key)
        return resource is not None and resource.has_more

    def next_page(self, parent_key: str) -> int:
        """Page number the next "load more" should request."""
        resource = self._resources.get(parent_key)
        return 1 if resource is None else resource.next_page

    def reset(self, parent_key: str) -> None:
        """Drop the parent's resource entirely."""
        if self._resources.pop(parent_key, None) is not None:
            logger.debug("paged_resource_reset", parent_key=parent_key)

    def clear(self) -> None:
        self._resources.clear()

    def __contains__(self, parent_key: object) -> bool:
        return parent_key in self._resources

    def __len__(self) -> int:
        return len(self._resources)

    @staticmethod
    def _clamp(resource: PagedResource) -> PagedResource:
        # current_page never exceeds total_pages
        if resource.total_pages < resource.current_page:
            return replace(resource, total_pages=resource.current_page)
        return resource
