"""Default candidate checks."""

from __future__ import annotations

from .checks import (
    duration_threshold_check,
    mutual_exclusion_check,
    telehealth_context_check,
)
from .registry import CheckRegistry


def register_default_checks(registry: CheckRegistry) -> None:
    """Register the default checks.

    Registration order is the order reasons appear in ``short_explain``.
    """
    registry.extend(
        [
            mutual_exclusion_check,
            duration_threshold_check,
            telehealth_context_check,
        ]
    )
