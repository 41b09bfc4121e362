"""Read-only catalog providers.

The evaluator and validator never read files themselves; they receive a
``CatalogProvider``. The process-wide provider loads its file at most once
and only reloads on an explicit ``refresh()``.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from .loader import load_catalog_file, resolve_catalog_path
from .models import CatalogEntry

logger = logging.getLogger(__name__)


@runtime_checkable
class CatalogProvider(Protocol):
    def get(self, code: str) -> CatalogEntry | None: ...

    def entries(self) -> Mapping[str, CatalogEntry]: ...

    def __len__(self) -> int: ...


class StaticCatalog:
    """Immutable in-memory catalog snapshot."""

    def __init__(self, entries: Iterable[CatalogEntry] | Mapping[str, CatalogEntry] = ()) -> None:
        if isinstance(entries, Mapping):
            entries = entries.values()
        self._entries: Mapping[str, CatalogEntry] = MappingProxyType(
            {entry.code: entry for entry in entries}
        )

    def get(self, code: str) -> CatalogEntry | None:
        return self._entries.get(code)

    def entries(self) -> Mapping[str, CatalogEntry]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, code: object) -> bool:
        return code in self._entries


class FileCatalogProvider:
    """Catalog backed by a JSON file, loaded lazily once per process."""

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self._path = path
        self._snapshot: StaticCatalog | None = None
        self._lock = threading.Lock()
        self.source: Path | None = None

    @property
    def loaded(self) -> bool:
        return self._snapshot is not None

    def _load(self) -> StaticCatalog:
        resolved = resolve_catalog_path(self._path)
        self.source = resolved
        if resolved is None:
            logger.warning("MBS rule catalog not found; continuing with empty catalog")
            return StaticCatalog()
        return StaticCatalog(load_catalog_file(resolved))

    def snapshot(self) -> StaticCatalog:
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot
        with self._lock:
            # Double-check after acquiring lock
            if self._snapshot is None:
                self._snapshot = self._load()
            return self._snapshot

    def refresh(self) -> StaticCatalog:
        """Reload the file and atomically replace the current snapshot."""
        with self._lock:
            self._snapshot = self._load()
            logger.info(f"MBS catalog refreshed: {len(self._snapshot)} entries")
            return self._snapshot

    def get(self, code: str) -> CatalogEntry | None:
        return self.snapshot().get(code)

    def entries(self) -> Mapping[str, CatalogEntry]:
        return self.snapshot().entries()

    def __len__(self) -> int:
        return len(self.snapshot())


_provider: CatalogProvider | None = None
_provider_lock = threading.Lock()


def get_catalog_provider() -> CatalogProvider:
    """Get or create the global catalog provider."""
    global _provider
    if _provider is None:
        with _provider_lock:
            if _provider is None:
                _provider = FileCatalogProvider()
    return _provider


def set_catalog_provider(provider: CatalogProvider | None) -> None:
    """Replace the global provider; ``None`` resets to a fresh file provider on next use."""
    global _provider
    with _provider_lock:
        _provider = provider
