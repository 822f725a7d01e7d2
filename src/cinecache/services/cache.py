"""CacheStore - in-process TTL cache for API responses.

Entries are keyed strings holding JSON-serializable values stamped with the
time of the successful fetch that produced them. An entry is fresh while
``now - fetched_at < ttl``. Entries are never mutated; a refresh replaces
the whole entry.

The clock is injected so tests can drive expiry deterministically. Nothing
is persisted: the store lives and dies with the process.

Cache Key Types:
    - movie:{id} - Movie detail records
    - {path}:{hash} - Parameterized requests (e.g., "search/movie:1f3a...")
"""

import hashlib
import json
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

Clock = Callable[[], float]

DEFAULT_TTL_SECONDS = 3600.0  # 1 hour


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the moment it was fetched."""

    key: str
    value: Any
    fetched_at: float


@dataclass(frozen=True)
class RequestParams:
    """Immutable description of one GET request.

    Query parameters are stored sorted with None values dropped, so two
    logically equal parameter sets compare equal and share a cache key
    regardless of the order they were given in.
    """

    path: str
    query: tuple[tuple[str, Any], ...] = ()

    @classmethod
    def of(
        cls, path: str, query: Mapping[str, Any] | None = None, **extra: Any
    ) -> "RequestParams":
        """Build params from a mapping and/or keyword arguments."""
        merged = {**(query or {}), **extra}
        items = tuple(sorted((k, v) for k, v in merged.items() if v is not None))
        return cls(path=path, query=items)

    def as_dict(self) -> dict[str, Any]:
        """Query parameters as a plain dict for the remote client."""
        return dict(self.query)

    def cache_key(self, prefix: str | None = None) -> str:
        """Generate a deterministic cache key for these parameters.

        Args:
            prefix: Key namespace; defaults to the normalized path

        Returns:
            Cache key (e.g., "movie/popular:a3f2b1c4d5e6f7a8")
        """
        if prefix is None:
            prefix = self.path.strip("/") or "root"
        key_string = json.dumps(
            {"path": self.path, "query": [[k, v] for k, v in self.query]},
            sort_keys=True,
            default=str,
        )
        hash_digest = hashlib.sha256(key_string.encode()).hexdigest()[:16]
        return f"{prefix}:{hash_digest}"


class CacheStore:
    """Keyed, timestamped record store with a configurable TTL.

    Usage:
        ```python
        store = CacheStore(ttl=3600)
        store.put("movie:550", details)
        entry = store.get("movie:550")
        if entry is not None and store.is_fresh(entry):
            ...
        ```
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Clock = time.monotonic,
    ) -> None:
        """Initialize the store.

        Args:
            ttl: Time-to-live in seconds
            clock: Zero-argument callable returning the current time in seconds
        """
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def now(self) -> float:
        return self._clock()

    def get(self, key: str) -> CacheEntry | None:
        """Return the entry for ``key`` regardless of freshness."""
        return self._entries.get(key)

    def is_fresh(self, entry: CacheEntry, ttl: float | None = None) -> bool:
        """Check whether ``entry`` is younger than ``ttl`` (store TTL by default)."""
        if ttl is None:
            ttl = self.ttl
        return self._clock() - entry.fetched_at < ttl

    def get_fresh(self, key: str) -> Any | None:
        """Return the cached value if present and fresh, otherwise None."""
        entry = self._entries.get(key)
        if entry is not None and self.is_fresh(entry):
            return entry.value
        return None

    def put(self, key: str, value: Any) -> CacheEntry:
        """Insert or replace the entry for ``key`` stamped with the current time."""
        entry = CacheEntry(key=key, value=value, fetched_at=self._clock())
        self._entries[key] = entry
        logger.debug("cache_set", cache_key=key)
        return entry

    def evict(self, key: str) -> None:
        """Delete a specific cache key."""
        if self._entries.pop(key, None) is not None:
            logger.debug("cache_invalidated", cache_key=key)

    def evict_prefix(self, prefix: str) -> int:
        """Delete all keys starting with ``prefix``.

        Returns:
            Number of keys deleted
        """
        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        logger.debug("cache_prefix_invalidated", prefix=prefix, count=len(doomed))
        return len(doomed)

    def clear(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        logger.info("cache_cleared", count=count)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    # -------------------------------------------------------------------------
    # Cache Key Generators
    # -------------------------------------------------------------------------

    @staticmethod
    def movie_key(movie_id: int | str) -> str:
        """Cache key for a movie detail record (e.g., "movie:550")."""
        return f"movie:{movie_id}"

    @staticmethod
    def reviews_key(movie_id: int | str) -> str:
        """Parent key for a movie's paged reviews (e.g., "reviews:550")."""
        return f"reviews:{movie_id}"
