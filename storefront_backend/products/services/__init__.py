from .catalog import CatalogService
from .catalog_store import CatalogStore

__all__ = [
    "CatalogService",
    "CatalogStore",
]
