"""Data models for the MBS rules engine."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Status(str, Enum):
    """Compliance status of a single candidate."""

    PASS = "PASS"
    WARN = "WARN"
    FAIL = "FAIL"


class ConsultContext(str, Enum):
    """How the consult was conducted."""

    TELEHEALTH = "telehealth"
    IN_PERSON = "in_person"


@dataclass(frozen=True)
class RuleCandidate:
    """A billing code offered to the clinician, plus their selection state."""

    code: str
    title: str
    fee: float
    selected: bool = False
    time_threshold: float | None = None
    flags: Mapping[str, bool] = field(default_factory=dict)
    mutually_exclusive_with: tuple[str, ...] = ()
    context: ConsultContext | None = None
    duration_minutes: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RuleCandidate:
        """Build a candidate from its JSON form (camelCase or snake_case keys)."""

        def pick(camel: str, snake: str) -> Any:
            return data[camel] if camel in data else data.get(snake)

        context = data.get("context")
        return cls(
            code=str(data["code"]),
            title=str(data["title"]),
            fee=float(data["fee"]),
            selected=bool(data.get("selected", False)),
            time_threshold=pick("timeThreshold", "time_threshold"),
            flags=dict(data.get("flags") or {}),
            mutually_exclusive_with=tuple(
                str(code) for code in pick("mutuallyExclusiveWith", "mutually_exclusive_with") or ()
            ),
            context=ConsultContext(context) if context else None,
            duration_minutes=pick("durationMinutes", "duration_minutes"),
        )


@dataclass(frozen=True)
class EvaluationResult:
    code: str
    title: str
    short_explain: str
    status: Status
    score: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "title": self.title,
            "score": self.score,
            "short_explain": self.short_explain,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class SelectionConflict:
    code: str
    with_codes: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "with": list(self.with_codes)}


@dataclass(frozen=True)
class SelectionValidationResult:
    """Outcome of cross-checking a whole selection against the catalog.

    ``ok`` reports that the check ran; ``blocked`` reports that it found a
    conflict.
    """

    blocked: bool = False
    conflicts: tuple[SelectionConflict, ...] = ()
    warnings: tuple[str, ...] = ()
    ok: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "blocked": self.blocked,
            "conflicts": [conflict.to_dict() for conflict in self.conflicts],
            "warnings": list(self.warnings),
        }
