"""Pytest configuration and fixtures."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any

import pytest

# Add backend and scripts to path for imports
for _dir in ("backend", "scripts"):
    _path = str(Path(__file__).parent.parent / _dir)
    if _path not in sys.path:
        sys.path.insert(0, _path)

# Keep the rate limiter out of the way of the API tests
os.environ.setdefault("RULES_RATE_LIMIT", "1000/minute")

from catalog import CatalogEntry, StaticCatalog, set_catalog_provider  # noqa: E402
from rules import ConsultContext, RuleCandidate  # noqa: E402


@pytest.fixture
def standard_consult() -> RuleCandidate:
    """Level B GP consult, selected, 15 minutes long."""
    return RuleCandidate(
        code="23",
        title="Standard GP consult",
        fee=41.2,
        time_threshold=20,
        flags={"telehealth": False, "after_hours": False},
        mutually_exclusive_with=("36",),
        selected=True,
        context=ConsultContext.IN_PERSON,
        duration_minutes=15,
    )


@pytest.fixture
def prolonged_consult() -> RuleCandidate:
    """Level C GP consult, selected, 45 minutes long."""
    return RuleCandidate(
        code="36",
        title="Prolonged GP consult",
        fee=71.7,
        time_threshold=40,
        flags={"telehealth": False, "after_hours": False},
        mutually_exclusive_with=("23",),
        selected=True,
        context=ConsultContext.IN_PERSON,
        duration_minutes=45,
    )


@pytest.fixture
def candidate_payloads() -> list[dict[str, Any]]:
    """Candidate batch in the JSON shape the claim builder sends."""
    return [
        {
            "code": "23",
            "title": "Standard GP consult",
            "fee": 41.2,
            "timeThreshold": 20,
            "flags": {"telehealth": False, "after_hours": False},
            "mutuallyExclusiveWith": ["36"],
            "selected": False,
            "context": "in_person",
            "durationMinutes": 25,
        },
        {
            "code": "36",
            "title": "Prolonged GP consult",
            "fee": 71.7,
            "timeThreshold": 40,
            "flags": {"telehealth": False, "after_hours": False},
            "mutuallyExclusiveWith": ["23"],
            "selected": True,
            "context": "in_person",
            "durationMinutes": 45,
        },
    ]


@pytest.fixture
def catalog_entries() -> list[CatalogEntry]:
    """Small catalog: 23 and 36 exclude each other, 5020 excludes 23 one-sidedly."""
    return [
        CatalogEntry(code="23", title="Level B GP attendance", mutually_exclusive_with=("36",)),
        CatalogEntry(code="36", title="Level C GP attendance", mutually_exclusive_with=("23",)),
        CatalogEntry(
            code="5020",
            title="After-hours Level B GP attendance",
            flags={"after_hours": True},
            mutually_exclusive_with=("23",),
        ),
    ]


@pytest.fixture
def static_catalog(catalog_entries: list[CatalogEntry]) -> StaticCatalog:
    return StaticCatalog(catalog_entries)


@pytest.fixture
def raw_catalog_items() -> list[dict[str, Any]]:
    """Catalog items as they appear in an un-normalized export."""
    return [
        {
            "code": 23,
            "title": "Level B GP attendance",
            "fee": 42.85,
            "timeThreshold": {"interval": "[0, 20)"},
            "flags": {"telehealth": False},
            "mutuallyExclusiveWith": ["36", "23", ""],
            "references": ["AN.0.9"],
            "conditions": [],
        },
        {
            "code": "36",
            "title": "Level C GP attendance",
            "fee": "82.90",
            "timeThreshold": {"interval": "[20, null)"},
            "flags": {"telehealth": "yes"},
            "mutuallyExclusiveWith": ["23"],
            "conditions": ["requires referral"],
            "frequency_limits": {"per": "calendar_year", "max": 4},
        },
    ]


@pytest.fixture
def catalog_file(tmp_path: Path, raw_catalog_items: list[dict[str, Any]]) -> Path:
    path = tmp_path / "mbs_rules.normalized.json"
    path.write_text(json.dumps(raw_catalog_items), encoding="utf-8")
    return path


@pytest.fixture
def reset_catalog_provider():
    """Restore the global catalog provider after a test swaps it."""
    yield
    set_catalog_provider(None)
