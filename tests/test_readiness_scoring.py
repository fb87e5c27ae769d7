"""
tests/test_readiness_scoring.py

Pytest unit tests for the readiness category models and the overall score.

All tests are pure Python with inline inputs; every expected score is
computed by hand from the category formulas.
"""

from __future__ import annotations

import pytest

from app.domain.gets_schema import get_schema_registry
from app.domain.validation import RuleResult, ValidationResult
from readiness.coverage import CoverageScore
from readiness.data_quality import DataQualityScore
from readiness.normalizer import ScoreNormalizer, round_half_up
from readiness.orchestrator import ReadinessOrchestrator
from readiness.posture import NEUTRAL_POSTURE_SCORE, PostureScore
from readiness.rules_score import RulesComplianceScore
from readiness.scoring import OverallReadinessModel, readiness_level
from rules.invoice_rules import RULE_NAMES, TOTALS_BALANCE


def _validation(counts: dict[str, tuple[int, int]]) -> ValidationResult:
    results = {name: RuleResult(passed=p, failed=f) for name, (p, f) in counts.items()}
    return ValidationResult(rows_checked=2, passed=1, failed=1, rule_results=results)


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------


class TestNormalizer:
    @pytest.mark.parametrize("value, expected", [(62.5, 63), (12.5, 13), (84.4, 84), (0.0, 0)])
    def test_round_half_up(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected

    def test_to_score_clamps(self) -> None:
        normalizer = ScoreNormalizer()
        assert normalizer.to_score(140.2) == 100
        assert normalizer.to_score(-3) == 0

    def test_ratio_uses_empty_value_for_zero_denominator(self) -> None:
        assert ScoreNormalizer().ratio(3, 0, empty=1.0) == 1.0


# ---------------------------------------------------------------------------
# Data quality
# ---------------------------------------------------------------------------


class TestDataQuality:
    @pytest.fixture()
    def model(self) -> DataQualityScore:
        return DataQualityScore()

    def test_clean_rows_score_100(self, model: DataQualityScore) -> None:
        assert model.compute([{"a": "x", "b": 1}, {"a": "y", "b": 2}]) == 100

    def test_empty_batch_scores_zero(self, model: DataQualityScore) -> None:
        assert model.compute([]) == 0

    def test_blank_cells_reduce_completeness(self, model: DataQualityScore) -> None:
        rows = [{"a": "x", "b": ""}, {"a": "y", "b": 2}]
        assert model.breakdown(rows)["completeness"] == pytest.approx(75.0)
        assert model.compute(rows) == 90

    def test_keys_missing_from_some_rows_count_as_empty(self, model: DataQualityScore) -> None:
        rows = [{"a": "x"}, {"b": "y"}]
        assert model.breakdown(rows)["completeness"] == pytest.approx(50.0)

    def test_whitespace_in_name_columns_penalised_twice(self, model: DataQualityScore) -> None:
        rows = [{"seller_name": " Acme "}, {"seller_name": "Beta"}]
        assert model.breakdown(rows)["format"] == pytest.approx(90.0)
        assert model.compute(rows) == 97

    def test_mixed_runtime_types_reduce_consistency(self, model: DataQualityScore) -> None:
        rows = [{"amount": 1}, {"amount": "2"}]
        assert model.breakdown(rows)["consistency"] == pytest.approx(50.0)
        assert model.compute(rows) == 85


# ---------------------------------------------------------------------------
# Coverage
# ---------------------------------------------------------------------------


class TestCoverageScore:
    @pytest.fixture()
    def model(self) -> CoverageScore:
        return CoverageScore()

    def test_all_required_fields_score_70(self, model: CoverageScore) -> None:
        mapping = {f"col_{i}": field.path for i, field in enumerate(get_schema_registry().required_fields())}
        assert model.compute(mapping) == 70

    def test_full_mapping_scores_100(self, model: CoverageScore) -> None:
        mapping = {f"col_{i}": field.path for i, field in enumerate(get_schema_registry().fields())}
        assert model.compute(mapping) == 100

    def test_duplicate_targets_count_once(self, model: CoverageScore) -> None:
        assert model.compute({"a": "invoice.id", "b": "invoice.id"}) == 5

    @pytest.mark.parametrize("mapping", [None, {}, ["invoice.id"]])
    def test_missing_or_invalid_mapping_scores_zero(self, model: CoverageScore, mapping: object) -> None:
        assert model.compute(mapping) == 0  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Rules compliance
# ---------------------------------------------------------------------------


class TestRulesCompliance:
    @pytest.fixture()
    def model(self) -> RulesComplianceScore:
        return RulesComplianceScore()

    def test_weighted_success_rate(self, model: RulesComplianceScore) -> None:
        counts = {name: (2, 0) for name in RULE_NAMES}
        counts[TOTALS_BALANCE] = (1, 1)
        assert model.compute(_validation(counts)) == 87

    def test_serialised_result_scores_the_same(self, model: RulesComplianceScore) -> None:
        counts = {name: (2, 0) for name in RULE_NAMES}
        counts[TOTALS_BALANCE] = (1, 1)
        assert model.compute(_validation(counts).to_dict()) == 87

    def test_no_validation_scores_zero(self, model: RulesComplianceScore) -> None:
        assert model.compute(None) == 0

    def test_unknown_rules_are_ignored(self, model: RulesComplianceScore) -> None:
        assert model.compute(_validation({"SOMETHING_ELSE": (0, 5)})) == 100


# ---------------------------------------------------------------------------
# Posture
# ---------------------------------------------------------------------------


class TestPosture:
    @pytest.fixture()
    def model(self) -> PostureScore:
        return PostureScore()

    def test_absent_questionnaire_is_neutral(self, model: PostureScore) -> None:
        assert model.compute(None) == NEUTRAL_POSTURE_SCORE == 50

    def test_all_unknown_answers(self, model: PostureScore) -> None:
        assert model.compute({}) == 60

    def test_all_true(self, model: PostureScore) -> None:
        answers = {"webhooks": True, "sandbox_env": True, "retries": True, "error_handling": True}
        assert model.compute(answers) == 100

    def test_all_false(self, model: PostureScore) -> None:
        answers = {"webhooks": False, "sandbox_env": False, "retries": False, "error_handling": False}
        assert model.compute(answers) == 20

    def test_mixed_answers(self, model: PostureScore) -> None:
        answers = {"webhooks": True, "sandbox_env": False, "error_handling": False}
        assert model.compute(answers) == 55

    def test_non_boolean_answers_count_as_unknown(self, model: PostureScore) -> None:
        assert model.compute({"webhooks": "yes"}) == 60


# ---------------------------------------------------------------------------
# Overall score and labels
# ---------------------------------------------------------------------------


class TestOverall:
    def test_weighted_combination(self) -> None:
        model = OverallReadinessModel()
        assert model.compute({"data": 100, "coverage": 70, "rules": 100, "posture": 50}) == 85

    def test_absent_categories_are_renormalised(self) -> None:
        model = OverallReadinessModel()
        assert model.compute({"data": 80, "coverage": None, "rules": 80}) == 80

    def test_no_categories_scores_zero(self) -> None:
        assert OverallReadinessModel().compute({}) == 0

    @pytest.mark.parametrize(
        "score, label",
        [
            (100, "HIGH READINESS"),
            (90, "HIGH READINESS"),
            (89, "MEDIUM READINESS"),
            (70, "MEDIUM READINESS"),
            (69, "LOW READINESS"),
            (50, "LOW READINESS"),
            (49, "NEEDS ATTENTION"),
            (0, "NEEDS ATTENTION"),
        ],
    )
    def test_readiness_labels(self, score: int, label: str) -> None:
        assert readiness_level(score) == label


class TestOrchestrator:
    def test_scores_every_category(self) -> None:
        rows = [{"invoice_id": "A", "currency": "AED"}, {"invoice_id": "B", "currency": "USD"}]
        mapping = {"invoice_id": "invoice.id", "currency": "invoice.currency"}
        validation = _validation({name: (2, 0) for name in RULE_NAMES})

        result = ReadinessOrchestrator().score(rows=rows, mapping=mapping, validation=validation)

        assert result.category_scores.to_dict() == {"data": 100, "coverage": 11, "rules": 100, "posture": 50}
        assert result.overall_score == 64
        assert result.readiness_level == "LOW READINESS"
        assert set(result.to_dict()) == {"categoryScores", "overallScore", "readinessLevel"}
