"""Rules engine for MBS billing code compliance."""

from catalog.models import CatalogEntry, TimeThreshold

from .engine import evaluate_candidates
from .models import (
    ConsultContext,
    EvaluationResult,
    RuleCandidate,
    SelectionConflict,
    SelectionValidationResult,
    Status,
)
from .validator import validate_selection

__all__ = [
    "evaluate_candidates",
    "validate_selection",
    "CatalogEntry",
    "ConsultContext",
    "EvaluationResult",
    "RuleCandidate",
    "SelectionConflict",
    "SelectionValidationResult",
    "Status",
    "TimeThreshold",
]
