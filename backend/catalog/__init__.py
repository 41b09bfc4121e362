"""MBS rule catalog: normalized per-item metadata, loaded read-only."""

from .loader import load_catalog_file, parse_catalog, resolve_catalog_path
from .models import CatalogEntry, TimeThreshold
from .normalize import CatalogError, entry_from_normalized, normalize_catalog, normalize_item
from .provider import (
    CatalogProvider,
    FileCatalogProvider,
    StaticCatalog,
    get_catalog_provider,
    set_catalog_provider,
)

__all__ = [
    "CatalogEntry",
    "CatalogError",
    "CatalogProvider",
    "FileCatalogProvider",
    "StaticCatalog",
    "TimeThreshold",
    "entry_from_normalized",
    "get_catalog_provider",
    "load_catalog_file",
    "normalize_catalog",
    "normalize_item",
    "parse_catalog",
    "resolve_catalog_path",
    "set_catalog_provider",
]
