"""Services package for CineCache.

This module exports the fetch/cache orchestration layer.
"""

from cinecache.services.cache import CacheEntry, CacheStore, RequestParams
from cinecache.services.coordinator import (
    LoadState,
    RequestCoordinator,
    RetryPolicy,
    StateChange,
)
from cinecache.services.paging import IncrementalMergeStore, PagedResource
from cinecache.services.tmdb_client import TMDBClient

__all__ = [
    # Cache
    "CacheEntry",
    "CacheStore",
    "RequestParams",
    # Coordinator
    "LoadState",
    "RequestCoordinator",
    "RetryPolicy",
    "StateChange",
    # Paging
    "IncrementalMergeStore",
    "PagedResource",
    # Remote
    "TMDBClient",
]
