"""Tests for the candidate evaluation engine."""

from __future__ import annotations

import json
from dataclasses import replace

from rules import ConsultContext, RuleCandidate, Status, evaluate_candidates
from rules.checks import (
    duration_threshold_check,
    mutual_exclusion_check,
    telehealth_context_check,
)
from rules.registry import CheckRegistry
from rules.ruleset import register_default_checks


def make_candidate(code: str, **overrides) -> RuleCandidate:
    fields = {"code": code, "title": f"Item {code}", "fee": 50.0}
    fields.update(overrides)
    return RuleCandidate(**fields)


class TestEvaluateCandidates:
    """Test the candidate evaluator."""

    def test_duration_below_threshold_fails(self, standard_consult: RuleCandidate):
        """Test that a selected consult shorter than its threshold fails."""
        results = evaluate_candidates([standard_consult])

        assert results[0].status == Status.FAIL
        assert "Duration below required threshold of 20 minutes" in results[0].short_explain

    def test_all_rules_satisfied_passes(self, prolonged_consult: RuleCandidate):
        """Test that a selected consult meeting every rule passes."""
        results = evaluate_candidates([prolonged_consult])

        assert results[0].status == Status.PASS
        assert results[0].short_explain == "All rules passed"

    def test_prolonged_consult_without_context_passes(self):
        """Test the 45 minute Level C consult with no consult context recorded."""
        candidate = make_candidate(
            "36",
            time_threshold=40,
            duration_minutes=45,
            selected=True,
            flags={"telehealth": False},
            mutually_exclusive_with=("23",),
        )

        result = evaluate_candidates([candidate])[0]

        assert result.status == Status.PASS
        assert result.short_explain == "All rules passed"

    def test_unselected_clean_candidate_passes(self):
        """Test that an unselected candidate with no violations passes."""
        results = evaluate_candidates([make_candidate("721")])

        assert results[0].status == Status.PASS
        assert results[0].short_explain == "All rules passed"

    def test_unselected_conflict_warns(self):
        """Test that an unselected candidate excluded by a selected code warns."""
        a = make_candidate("A", mutually_exclusive_with=("B",))
        b = make_candidate("B", selected=True)

        results = evaluate_candidates([a, b])

        assert results[0].status == Status.WARN
        assert "Mutually exclusive with selected codes: B" in results[0].short_explain

    def test_exclusion_is_not_symmetrised(self):
        """Test that B is unaffected when only A lists B as exclusive."""
        a = make_candidate("A", mutually_exclusive_with=("B",))
        b = make_candidate("B", selected=True)

        results = evaluate_candidates([a, b])

        assert results[1].status == Status.PASS
        assert results[1].short_explain == "All rules passed"

    def test_both_selected_and_mutually_exclusive_fail(
        self, standard_consult: RuleCandidate, prolonged_consult: RuleCandidate
    ):
        """Test that two selected, mutually exclusive codes both fail."""
        results = evaluate_candidates([replace(standard_consult, duration_minutes=25), prolonged_consult])

        assert [r.status for r in results] == [Status.FAIL, Status.FAIL]
        assert results[0].short_explain == "Mutually exclusive with selected codes: 36"
        assert results[1].short_explain == "Mutually exclusive with selected codes: 23"

    def test_warn_scenario_from_claim_builder(self, candidate_payloads: list[dict]):
        """Test the unselected Level B consult against a selected Level C consult."""
        candidates = [RuleCandidate.from_dict(payload) for payload in candidate_payloads]

        results = {r.code: r for r in evaluate_candidates(candidates)}

        assert results["23"].status == Status.WARN
        assert "Mutually exclusive" in results["23"].short_explain
        assert results["36"].status == Status.PASS

    def test_self_reference_ignored(self):
        """Test that a code listing itself as exclusive does not conflict."""
        candidate = make_candidate("23", selected=True, mutually_exclusive_with=("23",))

        result = evaluate_candidates([candidate])[0]

        assert result.status == Status.PASS

    def test_reasons_joined_in_rule_order(self):
        """Test that multiple reasons are joined with '; ' in check order."""
        candidate = make_candidate(
            "91801",
            selected=True,
            time_threshold=20,
            duration_minutes=10,
            flags={"telehealth": True},
            context=ConsultContext.IN_PERSON,
            mutually_exclusive_with=("23",),
        )
        other = make_candidate("23", selected=True)

        result = evaluate_candidates([candidate, other])[0]

        assert result.status == Status.FAIL
        assert result.short_explain == (
            "Mutually exclusive with selected codes: 23; "
            "Duration below required threshold of 20 minutes; "
            "Context mismatch: telehealth flag vs selected context"
        )

    def test_preserves_order_and_length(self):
        """Test that results line up with the input batch."""
        codes = ["44", "3", "36", "23"]
        results = evaluate_candidates([make_candidate(code) for code in codes])

        assert [r.code for r in results] == codes

    def test_score_always_zero(self, standard_consult: RuleCandidate):
        """Test that the reserved score field stays at zero."""
        result = evaluate_candidates([standard_consult])[0]

        assert result.score == 0
        assert type(result.to_dict()["score"]) is int
        assert '"score": 0,' in json.dumps(result.to_dict())

    def test_empty_batch(self):
        """Test that an empty batch returns no results."""
        assert evaluate_candidates([]) == []

    def test_idempotent(self, candidate_payloads: list[dict]):
        """Test that repeated calls give identical serialized output."""
        candidates = [RuleCandidate.from_dict(payload) for payload in candidate_payloads]

        first = json.dumps([r.to_dict() for r in evaluate_candidates(candidates)])
        second = json.dumps([r.to_dict() for r in evaluate_candidates(candidates)])

        assert first == second

    def test_result_serialization(self, standard_consult: RuleCandidate):
        """Test the JSON shape of an evaluation result."""
        result = evaluate_candidates([standard_consult])[0]

        assert result.to_dict() == {
            "code": "23",
            "title": "Standard GP consult",
            "score": 0,
            "short_explain": "Duration below required threshold of 20 minutes",
            "status": "FAIL",
        }

    def test_custom_registry(self):
        """Test that an explicit registry replaces the default checks."""
        registry = CheckRegistry()
        registry.register(lambda candidate, selected: "Always flagged")

        results = evaluate_candidates(
            [make_candidate("1"), make_candidate("2", selected=True)], registry=registry
        )

        assert [r.status for r in results] == [Status.WARN, Status.FAIL]
        assert results[0].short_explain == "Always flagged"


class TestMutualExclusionCheck:
    """Tests for the mutual exclusion check."""

    def test_reports_overlap_in_list_order(self):
        candidate = make_candidate("3", mutually_exclusive_with=("44", "23", "36"))

        reason = mutual_exclusion_check(candidate, {"23", "44"})

        assert reason == "Mutually exclusive with selected codes: 44, 23"

    def test_duplicate_exclusions_reported_once(self):
        candidate = make_candidate("3", mutually_exclusive_with=("23", "23"))

        assert mutual_exclusion_check(candidate, {"23"}) == (
            "Mutually exclusive with selected codes: 23"
        )

    def test_no_overlap(self):
        candidate = make_candidate("3", mutually_exclusive_with=("23",))

        assert mutual_exclusion_check(candidate, {"36"}) is None

    def test_applies_to_unselected_candidates(self):
        candidate = make_candidate("3", selected=False, mutually_exclusive_with=("23",))

        assert mutual_exclusion_check(candidate, {"23"}) is not None


class TestDurationThresholdCheck:
    """Tests for the duration threshold check."""

    def test_skipped_when_unselected(self):
        candidate = make_candidate("36", time_threshold=20, duration_minutes=5)

        assert duration_threshold_check(candidate, set()) is None

    def test_skipped_without_duration(self):
        candidate = make_candidate("36", selected=True, time_threshold=20)

        assert duration_threshold_check(candidate, {"36"}) is None

    def test_skipped_without_threshold(self):
        candidate = make_candidate("36", selected=True, duration_minutes=5)

        assert duration_threshold_check(candidate, {"36"}) is None

    def test_duration_equal_to_threshold_passes(self):
        candidate = make_candidate("36", selected=True, time_threshold=20, duration_minutes=20)

        assert duration_threshold_check(candidate, {"36"}) is None

    def test_float_threshold_formatting(self):
        whole = make_candidate("36", selected=True, time_threshold=20.0, duration_minutes=10)
        fractional = make_candidate("36", selected=True, time_threshold=22.5, duration_minutes=10)

        assert duration_threshold_check(whole, {"36"}) == (
            "Duration below required threshold of 20 minutes"
        )
        assert duration_threshold_check(fractional, {"36"}) == (
            "Duration below required threshold of 22.5 minutes"
        )


class TestTelehealthContextCheck:
    """Tests for the telehealth context check."""

    def test_telehealth_item_in_person(self):
        candidate = make_candidate(
            "91801", selected=True, flags={"telehealth": True}, context=ConsultContext.IN_PERSON
        )

        assert telehealth_context_check(candidate, {"91801"}) == (
            "Context mismatch: telehealth flag vs selected context"
        )

    def test_in_person_item_via_telehealth(self):
        candidate = make_candidate(
            "23", selected=True, flags={"telehealth": False}, context=ConsultContext.TELEHEALTH
        )

        assert telehealth_context_check(candidate, {"23"}) is not None

    def test_matching_context(self):
        candidate = make_candidate(
            "91801", selected=True, flags={"telehealth": True}, context=ConsultContext.TELEHEALTH
        )

        assert telehealth_context_check(candidate, {"91801"}) is None

    def test_skipped_when_flag_absent(self):
        candidate = make_candidate(
            "23", selected=True, flags={"after_hours": True}, context=ConsultContext.TELEHEALTH
        )

        assert telehealth_context_check(candidate, {"23"}) is None

    def test_skipped_without_context(self):
        candidate = make_candidate("91801", selected=True, flags={"telehealth": True})

        assert telehealth_context_check(candidate, {"91801"}) is None

    def test_skipped_when_unselected(self):
        candidate = make_candidate(
            "91801", flags={"telehealth": True}, context=ConsultContext.IN_PERSON
        )

        assert telehealth_context_check(candidate, set()) is None


class TestRuleCandidateFromDict:
    """Tests for building candidates from JSON payloads."""

    def test_camel_case_keys(self, candidate_payloads: list[dict]):
        candidate = RuleCandidate.from_dict(candidate_payloads[1])

        assert candidate.time_threshold == 40
        assert candidate.duration_minutes == 45
        assert candidate.mutually_exclusive_with == ("23",)
        assert candidate.context is ConsultContext.IN_PERSON
        assert candidate.selected is True

    def test_optional_fields_absent(self):
        candidate = RuleCandidate.from_dict({"code": "3", "title": "Level A", "fee": 19.6})

        assert candidate.time_threshold is None
        assert candidate.duration_minutes is None
        assert candidate.context is None
        assert candidate.flags == {}
        assert candidate.mutually_exclusive_with == ()
        assert candidate.selected is False


class TestCheckRegistry:
    """Tests for check registration."""

    def test_register_deduplicates(self):
        registry = CheckRegistry()
        register_default_checks(registry)
        register_default_checks(registry)

        assert registry.active_checks() == (
            mutual_exclusion_check,
            duration_threshold_check,
            telehealth_context_check,
        )
