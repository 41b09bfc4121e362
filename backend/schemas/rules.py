"""Pydantic schemas for rule evaluation and selection validation endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import MAX_CANDIDATES_PER_REQUEST, MAX_SELECTED_CODES
from rules import ConsultContext, RuleCandidate


class RuleCandidateRequest(BaseModel):
    """One candidate billing code as sent by the claim builder."""

    model_config = ConfigDict(populate_by_name=True)

    code: str = Field(min_length=1)
    title: str
    fee: float = Field(ge=0)
    time_threshold: float | None = Field(default=None, alias="timeThreshold", ge=0)
    flags: dict[str, bool] = Field(default_factory=dict)
    mutually_exclusive_with: list[str] = Field(default_factory=list, alias="mutuallyExclusiveWith")
    selected: bool
    context: ConsultContext | None = None
    duration_minutes: float | None = Field(default=None, alias="durationMinutes", ge=0)

    def to_candidate(self) -> RuleCandidate:
        return RuleCandidate(
            code=self.code,
            title=self.title,
            fee=self.fee,
            selected=self.selected,
            time_threshold=self.time_threshold,
            flags=dict(self.flags),
            mutually_exclusive_with=tuple(self.mutually_exclusive_with),
            context=self.context,
            duration_minutes=self.duration_minutes,
        )


class EvaluateRulesRequest(BaseModel):
    candidates: list[RuleCandidateRequest]

    @field_validator("candidates")
    @classmethod
    def validate_batch_size(cls, v: list[RuleCandidateRequest]) -> list[RuleCandidateRequest]:
        """Validate batch size to keep a single request bounded."""
        if len(v) > MAX_CANDIDATES_PER_REQUEST:
            raise ValueError(
                f"Too many candidates. Maximum {MAX_CANDIDATES_PER_REQUEST} per request."
            )
        return v


class EvaluationResultResponse(BaseModel):
    code: str
    title: str
    score: int
    short_explain: str
    status: Literal["PASS", "WARN", "FAIL"]


class LastClaimedItem(BaseModel):
    code: str
    at: datetime


class ValidateSelectionRequest(BaseModel):
    """Selection validation request.

    Only ``selectedCodes`` drives the conflict check; the consult context
    fields are accepted so the claim builder can send its full state.
    """

    model_config = ConfigDict(populate_by_name=True)

    selected_codes: list[str] = Field(alias="selectedCodes")
    note: str | None = None
    mode: Literal["in-person", "telehealth", "video", "phone"] | None = None
    hours_bucket: Literal["business", "after_hours", "public_holiday"] | None = Field(
        default=None, alias="hoursBucket"
    )
    location: Literal["clinic", "home", "nursing_home", "hospital"] | None = None
    provider_type: Literal["GP", "Registrar", "NP", "Specialist"] | None = Field(
        default=None, alias="providerType"
    )
    referral_present: bool | None = Field(default=None, alias="referralPresent")
    consult_start: datetime | None = Field(default=None, alias="consultStart")
    consult_end: datetime | None = Field(default=None, alias="consultEnd")
    last_claimed_items: list[LastClaimedItem] | None = Field(default=None, alias="lastClaimedItems")

    @field_validator("selected_codes")
    @classmethod
    def validate_selection_size(cls, v: list[str]) -> list[str]:
        if len(v) > MAX_SELECTED_CODES:
            raise ValueError(f"Too many selected codes. Maximum {MAX_SELECTED_CODES} per request.")
        return v

    def context_fields(self) -> dict:
        return self.model_dump(exclude={"selected_codes"}, exclude_none=True)


class SelectionConflictResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: str
    with_codes: list[str] = Field(alias="with")


class SelectionValidationResponse(BaseModel):
    ok: bool
    blocked: bool
    conflicts: list[SelectionConflictResponse]
    warnings: list[str]
