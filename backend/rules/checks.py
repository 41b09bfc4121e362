"""Per-candidate compliance checks.

Each check receives the candidate and the closed-world set of codes selected
in the same batch, and returns a reason string when the candidate breaks the
rule, or ``None`` when it does not apply or passes.
"""

from __future__ import annotations

from collections.abc import Set

from .models import ConsultContext, RuleCandidate


def mutual_exclusion_check(candidate: RuleCandidate, selected_codes: Set[str]) -> str | None:
    """Flag a candidate whose exclusion list overlaps the selected codes."""
    conflicts = [
        code
        for code in dict.fromkeys(candidate.mutually_exclusive_with)
        if code != candidate.code and code in selected_codes
    ]
    if not conflicts:
        return None
    return f"Mutually exclusive with selected codes: {', '.join(conflicts)}"


def _format_minutes(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def duration_threshold_check(candidate: RuleCandidate, selected_codes: Set[str]) -> str | None:
    """Flag a selected candidate whose consult ran shorter than its threshold."""
    if not candidate.selected:
        return None
    if candidate.time_threshold is None or candidate.duration_minutes is None:
        return None
    if candidate.duration_minutes < candidate.time_threshold:
        return (
            "Duration below required threshold of "
            f"{_format_minutes(candidate.time_threshold)} minutes"
        )
    return None


def telehealth_context_check(candidate: RuleCandidate, selected_codes: Set[str]) -> str | None:
    """Flag a selected candidate whose telehealth flag disagrees with the consult context."""
    if not candidate.selected or candidate.context is None:
        return None
    telehealth = candidate.flags.get("telehealth")
    if telehealth is None:
        return None
    is_telehealth_consult = candidate.context == ConsultContext.TELEHEALTH
    if bool(telehealth) != is_telehealth_consult:
        return "Context mismatch: telehealth flag vs selected context"
    return None
