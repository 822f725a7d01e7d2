"""FastAPI dependency injection container.

Route handlers receive the shared catalog and settings through Depends(),
so tests can swap either one with ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Request

from cinecache.catalog import Catalog
from cinecache.config import Settings, get_settings

# Type alias for common dependency patterns
SettingsDep = Annotated[Settings, Depends(get_settings)]


# ========================================
# Settings Dependencies
# ========================================
def get_settings_from_request(request: Request) -> Settings:
    """Get the settings the application was created with.

    Args:
        request: The current request

    Returns:
        Settings: Application settings
    """
    return request.app.state.settings


# ========================================
# Catalog Dependencies
# ========================================
def get_catalog(request: Request) -> Catalog:
    """Get the catalog shared by every request of this application.

    The cache, in-flight table and review pages live on this object, so
    it must be the same instance across requests.

    Args:
        request: The current request

    Returns:
        Catalog: Composed catalog
    """
    return request.app.state.catalog


CatalogDep = Annotated[Catalog, Depends(get_catalog)]
