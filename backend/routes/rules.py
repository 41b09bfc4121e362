"""MBS catalog routes.

This router exposes read access to the normalized rule catalog that backs
selection validation. Rate-limited rule evaluation endpoints live in app.py.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from catalog import FileCatalogProvider, get_catalog_provider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rules", tags=["rules"])


@router.get("/catalog")
async def get_catalog_summary():
    """Get the size and source of the loaded catalog."""
    provider = get_catalog_provider()
    source = getattr(provider, "source", None)
    return {
        "items": len(provider),
        "source": str(source) if source else None,
    }


@router.get("/catalog/{code}")
async def get_catalog_entry(code: str):
    """Get the normalized rule metadata for a single MBS item."""
    entry = get_catalog_provider().get(code)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"MBS item {code} not found in catalog")
    return entry.to_dict()


@router.post("/catalog/refresh")
async def refresh_catalog():
    """Reload the catalog from disk.

    Injected providers without a backing file are reported as-is.
    """
    provider = get_catalog_provider()
    if isinstance(provider, FileCatalogProvider):
        snapshot = provider.refresh()
        return {"loaded": len(snapshot) > 0, "items": len(snapshot)}

    logger.info("Catalog refresh requested for a provider without a backing file")
    return {"loaded": len(provider) > 0, "items": len(provider)}
