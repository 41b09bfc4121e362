"""Locate and read the normalized MBS rule catalog from disk."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import config

from .models import CatalogEntry
from .normalize import CatalogError, entry_from_normalized

logger = logging.getLogger(__name__)


def candidate_paths(explicit: str | os.PathLike[str] | None = None) -> list[Path]:
    """Return catalog paths to try, most specific first.

    Order: explicit argument, ``MBS_RULES_JSON``, the configured data
    directory, then the repository ``data/`` directory.
    """
    if explicit:
        return [Path(explicit)]

    env_path = os.getenv("MBS_RULES_JSON", config.MBS_RULES_JSON or "")
    if env_path:
        return [Path(env_path)]

    data_dir = Path(os.getenv("MBS_DATA_DIR", config.MBS_DATA_DIR))
    repo_data_dir = Path(__file__).resolve().parents[2] / "data"
    paths = [data_dir / config.MBS_RULES_FILENAME, repo_data_dir / config.MBS_RULES_FILENAME]
    return list(dict.fromkeys(paths))


def resolve_catalog_path(explicit: str | os.PathLike[str] | None = None) -> Path | None:
    """Return the first existing catalog path, or None."""
    for path in candidate_paths(explicit):
        if path.is_file():
            return path
    return None


def parse_catalog(document: Any) -> dict[str, CatalogEntry]:
    """Build a code -> entry mapping from a parsed catalog document.

    Accepts a bare array of items or an object with an ``items`` array.
    Malformed items are skipped; a later duplicate code replaces an earlier one.
    """
    if isinstance(document, dict) and isinstance(document.get("items"), list):
        items = document["items"]
    elif isinstance(document, list):
        items = document
    else:
        logger.warning("Catalog document is neither an array nor an object with 'items'")
        return {}

    entries: dict[str, CatalogEntry] = {}
    skipped = 0
    for item in items:
        if not isinstance(item, dict):
            skipped += 1
            continue
        try:
            entry = entry_from_normalized(item)
        except CatalogError:
            skipped += 1
            continue
        except Exception as e:
            logger.warning(f"Skipping catalog item {item.get('code')!r}: {e}")
            skipped += 1
            continue
        entries[entry.code] = entry

    if skipped:
        logger.warning(f"Skipped {skipped} malformed catalog item(s)")
    return entries


def load_catalog_file(path: str | os.PathLike[str] | None = None) -> dict[str, CatalogEntry]:
    """Load the catalog, degrading to an empty mapping on any failure."""
    resolved = resolve_catalog_path(path)
    if resolved is None:
        logger.warning(
            "MBS rule catalog not found (tried: "
            f"{', '.join(str(p) for p in candidate_paths(path))}); continuing with empty catalog"
        )
        return {}

    try:
        with open(resolved, encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, ValueError, RecursionError) as e:
        logger.warning(f"Failed to read MBS rule catalog {resolved}: {e}")
        return {}

    entries = parse_catalog(document)
    logger.info(f"Loaded {len(entries):,} MBS catalog entries from {resolved}")
    return entries
