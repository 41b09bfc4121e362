"""Catalog data models."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class TimeThreshold:
    """Duration bounds in minutes; either end may be open."""

    min_minutes: float | None = None
    max_minutes: float | None = None
    include_min: bool = True
    include_max: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "minMinutes": self.min_minutes,
            "maxMinutes": self.max_minutes,
            "includeMin": self.include_min,
            "includeMax": self.include_max,
        }


@dataclass(frozen=True)
class CatalogEntry:
    """Static, normalized rule metadata for one MBS item."""

    code: str
    title: str = ""
    description: str = ""
    fee: str | None = None
    time_threshold: TimeThreshold | None = None
    frequency_limits: Mapping[str, Any] | None = None
    flags: Mapping[str, bool] = field(default_factory=dict)
    mutually_exclusive_with: tuple[str, ...] = ()
    references: tuple[str, ...] = ()
    conditions: tuple[Mapping[str, Any], ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def min_duration(self) -> float | None:
        if self.time_threshold is None:
            return None
        return self.time_threshold.min_minutes

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "title": self.title,
            "description": self.description,
            "fee": self.fee,
            "timeThreshold": self.time_threshold.to_dict() if self.time_threshold else None,
            "frequencyLimits": dict(self.frequency_limits) if self.frequency_limits else None,
            "flags": dict(self.flags),
            "mutuallyExclusiveWith": list(self.mutually_exclusive_with),
            "references": list(self.references),
            "conditions": [dict(condition) for condition in self.conditions],
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
