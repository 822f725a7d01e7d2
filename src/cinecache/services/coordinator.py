"""Request coordinator: cache-check-then-fetch with single-flight semantics.

All UI-facing reads go through ``RequestCoordinator.fetch_with_cache``:

1. A fresh cache entry is returned immediately (unless forced).
2. If a request for the same key is already outstanding, the caller attaches
   to it instead of issuing another network call.
3. Otherwise a new in-flight task is registered before the first suspension
   point, so concurrent callers always see it.

There is at most one in-flight network request per cache key. On success
the value is cached and shared with every attached caller; on failure the
cache is left untouched and every attached caller receives the same error.
"""

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from cinecache.core.exceptions import NetworkError
from cinecache.services.cache import CacheStore, RequestParams
from cinecache.services.tmdb_client import TMDBClient

logger = structlog.get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class LoadState(str, Enum):
    """Per-key request state."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class StateChange:
    """Notification emitted to subscribers on every state transition."""

    key: str
    state: LoadState
    error: BaseException | None = None


Listener = Callable[[StateChange], None]


@dataclass(frozen=True)
class RetryPolicy:
    """Retry configuration for transport failures.

    Only NetworkError is retried; HTTP errors are answers, not outages.
    """

    max_retries: int = 0
    base_delay: float = 0.5
    backoff_factor: float = 2.0
    jitter: bool = True

    def delay(self, attempt: int) -> float:
        """Compute delay for a given attempt (0-based)."""
        delay = self.base_delay * (self.backoff_factor**attempt)
        if self.jitter:
            delay *= 0.5 + random.random()  # noqa: S311
        return delay


class RequestCoordinator:
    """Single entry point for cached, de-duplicated remote reads.

    Usage:
        ```python
        coordinator = RequestCoordinator(client, CacheStore(ttl=3600))
        params = RequestParams.of("/movie/popular", page=1, language="ko-KR")
        popular = await coordinator.fetch_with_cache("popular:p1", params)
        ```
    """

    def __init__(
        self,
        client: TMDBClient,
        cache: CacheStore,
        *,
        retry_policy: RetryPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the coordinator.

        Args:
            client: Remote client used on cache miss
            cache: Store that receives successful responses
            retry_policy: Retry configuration for network failures
            sleep: Awaitable sleep used between retries
        """
        self.client = client
        self.cache = cache
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep
        self._in_flight: dict[str, asyncio.Task[Any]] = {}
        self._invalidated: set[str] = set()
        self._states: dict[str, LoadState] = {}
        self._errors: dict[str, BaseException] = {}
        self._listeners: list[Listener] = []

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def fetch_with_cache(
        self,
        key: str,
        params: RequestParams,
        force_refresh: bool = False,
    ) -> Any:
        """Return the value for ``key``, fetching it at most once concurrently.

        Args:
            key: Cache key
            params: Request to issue on miss
            force_refresh: Skip the freshness check (still de-duplicated)

        Returns:
            The cached or freshly fetched value

        Raises:
            NetworkError, HttpError, InvalidResponseError: From the remote client
        """
        if not force_refresh:
            entry = self.cache.get(key)
            if entry is not None and self.cache.is_fresh(entry):
                logger.debug("cache_hit", cache_key=key)
                return entry.value

        # No await between the lookup and the registration below.
        task = self._in_flight.get(key)
        if task is not None:
            logger.debug("request_deduplicated", cache_key=key)
        else:
            logger.debug("cache_miss", cache_key=key, force_refresh=force_refresh)
            task = asyncio.ensure_future(self._run(key, params))
            task.add_done_callback(_consume_result)
            self._in_flight[key] = task
            self._transition(key, LoadState.LOADING)

        # A caller giving up must not cancel the shared request.
        return await asyncio.shield(task)

    def is_loading(self, key: str) -> bool:
        return key in self._in_flight

    def in_flight_count(self) -> int:
        return len(self._in_flight)

    def state(self, key: str) -> LoadState:
        """Current state for ``key``; IDLE once a request has settled."""
        return self._states.get(key, LoadState.IDLE)

    def last_error(self, key: str) -> BaseException | None:
        """Error from the most recent failed request for ``key``, if any."""
        return self._errors.get(key)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state-change listener.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def evict(self, key: str) -> None:
        """Drop the cached value for ``key``.

        A request for ``key`` that is still in flight delivers its result to
        the callers already waiting on it, but does not cache it.
        """
        self.cache.evict(key)
        self._errors.pop(key, None)
        if key in self._in_flight:
            self._invalidated.add(key)

    def evict_prefix(self, prefix: str) -> int:
        """Drop every cached value whose key starts with ``prefix``.

        Returns:
            Number of cached entries removed
        """
        removed = self.cache.evict_prefix(prefix)
        for key in [k for k in self._errors if k.startswith(prefix)]:
            del self._errors[key]
        self._invalidated.update(k for k in self._in_flight if k.startswith(prefix))
        return removed

    def clear(self) -> None:
        """Drop every cached value and recorded error.

        In-flight requests are left to finish; their results are cached.
        Use ``evict`` to keep an in-flight result out of the cache.
        """
        self.cache.clear()
        self._errors.clear()

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    async def _run(self, key: str, params: RequestParams) -> Any:
        try:
            value = await self._fetch_with_retry(key, params)
        except BaseException as e:
            self._in_flight.pop(key, None)
            self._invalidated.discard(key)
            if isinstance(e, Exception):
                self._errors[key] = e
                logger.warning("request_failed", cache_key=key, error=str(e))
                self._transition(key, LoadState.FAILURE, e)
            self._transition(key, LoadState.IDLE)
            raise

        if key in self._invalidated:
            self._invalidated.discard(key)
            logger.info("stale_result_discarded", cache_key=key)
        else:
            self.cache.put(key, value)
        self._errors.pop(key, None)
        self._in_flight.pop(key, None)
        self._transition(key, LoadState.SUCCESS)
        self._transition(key, LoadState.IDLE)
        return value

    async def _fetch_with_retry(self, key: str, params: RequestParams) -> Any:
        attempt = 0
        while True:
            try:
                return await self.client.fetch(params.path, params.as_dict())
            except NetworkError as e:
                if attempt >= self.retry_policy.max_retries:
                    raise
                delay = self.retry_policy.delay(attempt)
                attempt += 1
                logger.info(
                    "request_retry",
                    cache_key=key,
                    attempt=attempt,
                    delay=round(delay, 3),
                    error=str(e),
                )
                await self._sleep(delay)

    def _transition(
        self, key: str, state: LoadState, error: BaseException | None = None
    ) -> None:
        if state is LoadState.IDLE:
            self._states.pop(key, None)
        else:
            self._states[key] = state

        change = StateChange(key=key, state=state, error=error)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("state_listener_failed", cache_key=key, state=state.value)


def _consume_result(task: "asyncio.Task[Any]") -> None:
    # Failures are already logged in _run; callers may all have given up.
    if not task.cancelled():
        task.exception()
