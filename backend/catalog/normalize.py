"""Normalization of raw MBS rule exports into the catalog schema.

Raw exports are inconsistent: flags arrive as strings or are missing, time
thresholds are written as interval strings, and conditions are free text.
This module turns each raw item into a predictable JSON shape and builds
``CatalogEntry`` objects from that shape.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any

from utils import parse_flexible_date

from .models import CatalogEntry, TimeThreshold

KNOWN_FLAGS = (
    "telehealth",
    "after_hours",
    "video_required",
    "consulting_rooms_only",
    "hospital_only",
    "residential_care",
)

SIMPLE_CONDITION_KINDS = {
    "same_specialist_or_locum_tenens",
    "review_after_first_in_course_of_treatment",
    "after_first_in_course_of_treatment",
    "first_or_only_in_course_of_treatment",
    "initial_assessment",
    "minor_attendance",
    "comprehensive_assessment",
}

UNBOUNDED = {"null", "none", "inf", "infinite"}

_INTERVAL_RE = re.compile(r"^([\[(])\s*([^,]+?)\s*,\s*([^\])]+?)\s*([\])])$")
_SPECIALTY_RE = re.compile(r"^specialty\s*:\s*(.+)$", re.IGNORECASE)
_PRIOR_INITIAL_RE = re.compile(
    r"^requires_prior_initial_within_(\d{1,4})__?months\s*:\s*\[(.+)\]\s*$", re.IGNORECASE
)


class CatalogError(Exception):
    """Raised when a raw catalog document cannot be normalized."""


def string_list(value: Any, exclude: str | None = None) -> list[str]:
    """Coerce to a list of non-empty strings, dropping ``exclude``."""
    if not isinstance(value, (list, tuple)):
        return []
    items = [str(item).strip() for item in value if item is not None]
    return [item for item in dict.fromkeys(items) if item and item != exclude]


def normalize_flags(flags: Any) -> dict[str, bool]:
    """Only a literal ``true`` counts as set; unknown keys are kept."""
    raw = flags if isinstance(flags, Mapping) else {}
    normalized = {name: raw.get(name) is True for name in KNOWN_FLAGS}
    for name, value in raw.items():
        if name not in normalized:
            normalized[str(name)] = value is True
    return normalized


def _parse_bound(text: str) -> float | None:
    value = text.strip().lower()
    if value in UNBOUNDED:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if number == number and abs(number) != float("inf") else None


def parse_interval(interval: str) -> dict[str, Any] | None:
    """Parse ``"[20, null)"`` style intervals into threshold bounds."""
    match = _INTERVAL_RE.match(interval.strip())
    if not match:
        return None
    return {
        "minMinutes": _parse_bound(match.group(2)),
        "maxMinutes": _parse_bound(match.group(3)),
        "includeMin": match.group(1) == "[",
        "includeMax": match.group(4) == "]",
    }


def normalize_time_threshold(value: Any) -> dict[str, Any] | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        minimum = _as_number(value)
        if minimum is None:
            return None
        return {"minMinutes": minimum, "maxMinutes": None, "includeMin": True, "includeMax": False}
    if isinstance(value, str):
        return parse_interval(value)
    if not isinstance(value, Mapping):
        return None
    if "interval" in value and isinstance(value["interval"], str):
        parsed = parse_interval(value["interval"])
        if parsed:
            return parsed
    if "minMinutes" in value or "maxMinutes" in value:
        return {
            "minMinutes": value.get("minMinutes"),
            "maxMinutes": value.get("maxMinutes"),
            "includeMin": value.get("includeMin") is not False,
            "includeMax": value.get("includeMax") is True,
        }
    return None


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if number == number and abs(number) != float("inf") else None


def normalize_frequency_limits(value: Any) -> dict[str, Any] | None:
    if not isinstance(value, Mapping) or not value:
        return None
    per = value.get("per") or value.get("scope") or ""
    out: dict[str, Any] = {}
    if per == "calendar_year":
        out["scope"] = "calendar_year"
    elif per in ("months", "period_months", "rolling_months"):
        out["scope"] = "rolling_months"
        months = _as_number(value.get("period_length", value.get("months")))
        if months is not None:
            out["months"] = months
    maximum = _as_number(value.get("max"))
    if maximum is not None:
        out["max"] = maximum
    combined = string_list(value.get("combined_with") or value.get("combinedWith"))
    if combined:
        out["combinedWith"] = combined
    return out or None


def normalize_conditions(conditions: Any, flags: Mapping[str, bool]) -> list[dict[str, Any]]:
    result: list[dict[str, Any]] = []
    for raw in conditions if isinstance(conditions, list) else []:
        if isinstance(raw, Mapping) and raw.get("kind"):
            # already structured
            if raw.get("kind") != "telehealth_video_required":
                result.append(dict(raw))
            continue
        if not isinstance(raw, str):
            result.append({"kind": "text", "value": str(raw)})
            continue
        text = raw.strip()
        if not text:
            continue
        if text in ("requires referral", "referral_required"):
            result.append({"kind": "referral_required"})
            continue
        if text in SIMPLE_CONDITION_KINDS:
            result.append({"kind": text})
            continue
        match = _SPECIALTY_RE.match(text)
        if match:
            result.append({"kind": "specialty", "value": match.group(1).strip()})
            continue
        match = _PRIOR_INITIAL_RE.match(text)
        if match:
            result.append(
                {
                    "kind": "requires_prior_initial_within_months",
                    "months": int(match.group(1)),
                    "codes": [code.strip() for code in match.group(2).split(",") if code.strip()],
                }
            )
            continue
        result.append({"kind": "text", "value": text})

    if flags.get("telehealth") and flags.get("video_required"):
        result.append({"kind": "telehealth_video_required", "value": True})
    return result


def normalize_fee(value: Any) -> str | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return str(Decimal(str(value)))
    except InvalidOperation:
        return str(value)


def normalize_item(item: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize one raw export item. Keys with no value are omitted."""
    code = str(item.get("code") if item.get("code") is not None else "").strip()
    flags = normalize_flags(item.get("flags"))
    normalized: dict[str, Any] = {
        "code": code,
        "title": str(item.get("title") or ""),
        "desc": str(item.get("desc") or item.get("description") or ""),
        "fee": normalize_fee(item.get("fee")),
        "timeThreshold": normalize_time_threshold(item.get("timeThreshold", item.get("time_threshold"))),
        "frequencyLimits": normalize_frequency_limits(
            item.get("frequency_limits") or item.get("frequencyLimits")
        ),
        "flags": flags,
        "mutuallyExclusiveWith": string_list(
            item.get("mutuallyExclusiveWith", item.get("mutually_exclusive_with")), exclude=code
        ),
        "references": string_list(item.get("references", item.get("reference_docs"))),
        "conditions": normalize_conditions(item.get("conditions"), flags),
    }
    for key, snake in (("createdAt", "created_at"), ("updatedAt", "updated_at")):
        timestamp = item.get(key, item.get(snake))
        if timestamp is not None:
            normalized[key] = timestamp
    return {key: value for key, value in normalized.items() if value is not None}


def normalize_catalog(items: Any) -> tuple[list[dict[str, Any]], dict[str, int]]:
    """Normalize a raw export and return ``(items, report)``.

    Raises:
        CatalogError: If the export is not a JSON array of objects.
    """
    if not isinstance(items, list):
        raise CatalogError("Expected a JSON array of items")
    normalized: list[dict[str, Any]] = []
    for idx, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise CatalogError(f"Item {idx} is not an object")
        normalized.append(normalize_item(item))

    report = {
        "total": len(normalized),
        "with_time": sum(1 for i in normalized if i.get("timeThreshold")),
        "with_freq": sum(1 for i in normalized if i.get("frequencyLimits")),
        "with_conditions": sum(1 for i in normalized if i.get("conditions")),
    }
    return normalized, report


def _threshold_from_dict(value: Any) -> TimeThreshold | None:
    if not isinstance(value, Mapping):
        return None
    return TimeThreshold(
        min_minutes=_as_number(value.get("minMinutes")),
        max_minutes=_as_number(value.get("maxMinutes")),
        include_min=value.get("includeMin") is not False,
        include_max=value.get("includeMax") is True,
    )


def entry_from_normalized(item: Mapping[str, Any]) -> CatalogEntry:
    """Build an immutable ``CatalogEntry`` from a (possibly raw) catalog item.

    Items are passed through ``normalize_item`` first, so partially
    normalized files load the same way as fully normalized ones.
    """
    normalized = normalize_item(item)
    if not normalized["code"]:
        raise CatalogError("Catalog item has no code")

    frequency = normalized.get("frequencyLimits")
    return CatalogEntry(
        code=normalized["code"],
        title=normalized["title"],
        description=normalized["desc"],
        fee=normalized.get("fee"),
        time_threshold=_threshold_from_dict(normalized.get("timeThreshold")),
        frequency_limits=MappingProxyType(frequency) if frequency else None,
        flags=MappingProxyType(normalized["flags"]),
        mutually_exclusive_with=tuple(normalized["mutuallyExclusiveWith"]),
        references=tuple(normalized["references"]),
        conditions=tuple(MappingProxyType(c) for c in normalized["conditions"]),
        created_at=parse_flexible_date(normalized.get("createdAt")),
        updated_at=parse_flexible_date(normalized.get("updatedAt")),
    )
