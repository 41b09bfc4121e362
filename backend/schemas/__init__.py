"""Shared Pydantic schemas for the MBS rules backend.

This module centralizes request/response models used across routers
to prevent drift between duplicate definitions.
"""

from .rules import (
    EvaluateRulesRequest,
    EvaluationResultResponse,
    LastClaimedItem,
    RuleCandidateRequest,
    SelectionConflictResponse,
    SelectionValidationResponse,
    ValidateSelectionRequest,
)

__all__ = [
    "EvaluateRulesRequest",
    "EvaluationResultResponse",
    "LastClaimedItem",
    "RuleCandidateRequest",
    "SelectionConflictResponse",
    "SelectionValidationResponse",
    "ValidateSelectionRequest",
]
