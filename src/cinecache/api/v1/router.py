"""API v1 main router.

Aggregates all v1 API routers into a single router for inclusion in the app.
"""

from fastapi import APIRouter

from cinecache.api.v1.browse import router as browse_router
from cinecache.api.v1.cache import router as cache_router
from cinecache.api.v1.movies import router as movies_router

router = APIRouter()

router.include_router(movies_router, prefix="/movies", tags=["Movies"])
router.include_router(browse_router, tags=["Browse"])
router.include_router(cache_router, prefix="/cache", tags=["Cache"])
