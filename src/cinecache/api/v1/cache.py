"""Cache administration endpoints."""

from fastapi import APIRouter

from cinecache.core.logging import get_logger
from cinecache.dependencies import CatalogDep
from cinecache.schemas.common import MessageResponse
from cinecache.schemas.movies import CacheStatsResponse

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/stats",
    response_model=CacheStatsResponse,
    summary="Cache statistics",
)
async def cache_stats(catalog: CatalogDep) -> CacheStatsResponse:
    return CacheStatsResponse(
        entries=len(catalog.cache),
        in_flight=catalog.coordinator.in_flight_count(),
        paged_resources=len(catalog.reviews),
        ttl_seconds=catalog.cache.ttl,
    )


@router.delete(
    "",
    response_model=MessageResponse,
    summary="Clear the cache",
    description="Drops cached responses and loaded review pages. In-flight requests finish.",
)
async def clear_cache(catalog: CatalogDep) -> MessageResponse:
    entries = len(catalog.cache)
    catalog.clear_cache()
    logger.info("cache_cleared", entries=entries)
    return MessageResponse(message=f"Cleared {entries} cached entries")


@router.delete(
    "/{key:path}",
    response_model=MessageResponse,
    summary="Evict one cache key",
    description="e.g. popular:p1 or movie:550",
)
async def evict_key(key: str, catalog: CatalogDep) -> MessageResponse:
    existed = key in catalog.cache
    catalog.coordinator.evict(key)
    logger.info("cache_key_evicted", cache_key=key, existed=existed)
    if not existed:
        return MessageResponse(message=f"Key {key} was not cached")
    return MessageResponse(message=f"Evicted {key}")
