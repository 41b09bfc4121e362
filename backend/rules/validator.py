"""Selection-wide mutual exclusivity validation against the rule catalog."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from catalog import CatalogProvider, get_catalog_provider

from .models import SelectionConflict, SelectionValidationResult

logger = logging.getLogger(__name__)

CONFLICT_SEPARATOR = "↔"


def validate_selection(
    selected_codes: Iterable[str],
    catalog: CatalogProvider | None = None,
    **context: Any,
) -> SelectionValidationResult:
    """Find mutual-exclusivity conflicts across a clinician's selection.

    Each code's own exclusion list is authoritative only for that code, so a
    one-sided catalog entry yields a one-sided conflict. Codes missing from
    the catalog are skipped. If the catalog cannot be read the selection is
    never blocked.

    Extra keyword arguments (consult mode, hours bucket, location and so on)
    are accepted for request compatibility and do not affect the result.
    """

    selection = list(dict.fromkeys(str(code) for code in selected_codes))
    selected = frozenset(selection)
    provider = catalog if catalog is not None else get_catalog_provider()

    try:
        entries = {code: provider.get(code) for code in selection}
    except Exception as e:
        logger.warning(f"Catalog unavailable during selection validation: {e}")
        return SelectionValidationResult()

    conflicts: list[SelectionConflict] = []
    warnings: list[str] = []
    for code in selection:
        entry = entries.get(code)
        if entry is None:
            continue
        overlap = tuple(
            other
            for other in dict.fromkeys(entry.mutually_exclusive_with)
            if other != code and other in selected
        )
        if not overlap:
            continue
        conflicts.append(SelectionConflict(code=code, with_codes=overlap))
        warnings.append(f"{code} {CONFLICT_SEPARATOR} {', '.join(overlap)}")

    if conflicts:
        logger.info(f"Selection blocked by {len(conflicts)} mutual exclusivity conflict(s)")

    return SelectionValidationResult(
        blocked=bool(conflicts),
        conflicts=tuple(conflicts),
        warnings=tuple(warnings),
    )
