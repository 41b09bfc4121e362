"""Core candidate evaluation engine."""
from __future__ import annotations

import logging
from collections.abc import Iterable

from . import ruleset
from .models import EvaluationResult, RuleCandidate, Status
from .registry import CheckRegistry, default_registry

logger = logging.getLogger(__name__)

ALL_RULES_PASSED = "All rules passed"


def evaluate_candidates(
    candidates: Iterable[RuleCandidate],
    registry: CheckRegistry | None = None,
) -> list[EvaluationResult]:
    """Evaluate a batch of candidates and return one result per candidate, in order.

    The selected set is taken from this batch only. Candidates that break a
    rule are FAIL when selected and WARN otherwise.
    """

    candidates = list(candidates)
    if registry is None:
        # ensure default registry is populated
        ruleset.register_default_checks(default_registry)
        registry = default_registry

    selected_codes = frozenset(c.code for c in candidates if c.selected)
    checks = registry.active_checks()

    results: list[EvaluationResult] = []
    for candidate in candidates:
        reasons = [
            reason
            for reason in (check(candidate, selected_codes) for check in checks)
            if reason
        ]

        status = Status.PASS
        if reasons:
            status = Status.FAIL if candidate.selected else Status.WARN

        results.append(
            EvaluationResult(
                code=candidate.code,
                title=candidate.title,
                short_explain="; ".join(reasons) or ALL_RULES_PASSED,
                status=status,
            )
        )

    failed = sum(1 for r in results if r.status is Status.FAIL)
    warned = sum(1 for r in results if r.status is Status.WARN)
    logger.debug(
        f"Evaluated {len(results)} candidates ({len(selected_codes)} selected): "
        f"{failed} FAIL, {warned} WARN"
    )
    return results
