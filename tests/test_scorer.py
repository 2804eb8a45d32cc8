"""Tests for schemascore.scorer: score formula, rule isolation and orchestration."""

from __future__ import annotations

import math
import unittest.mock
from datetime import datetime

import pytest

from schemascore.errors import SchemaParseError
from schemascore.reporter import ReporterConfig
from schemascore.rules.base import ValidationResult, Violation
from schemascore.scorer import (
    compute_score,
    run_rule,
    run_validation,
    score_document,
    validate,
    weighted_violations,
)
from schemascore.schema import parse_schema


class _StubRule:
    """Rule with a fixed name, weight and violation payload."""

    def __init__(self, name: str, weight: float, violations: list[Violation] | int) -> None:
        self.name = name
        self.weight = weight
        self.violations = violations
        self.calls = 0

    def validate(self, document: object) -> ValidationResult:
        self.calls += 1
        return ValidationResult(rule=self.name, violations=self.violations, message="stub")


class _BrokenRule:
    name = "Broken"
    weight = 50

    def validate(self, document: object) -> ValidationResult:
        msg = "boom"
        raise RuntimeError(msg)


# ---------------------------------------------------------------------------
# TestComputeScore
# ---------------------------------------------------------------------------


class TestComputeScore:
    def test_no_violations_is_100(self) -> None:
        assert compute_score(0.0, 10) == 100.0

    def test_formula(self) -> None:
        assert compute_score(5.0, 4) == pytest.approx(-25.0)

    def test_not_clamped_below_zero(self) -> None:
        assert compute_score(1000.0, 10) < 0

    def test_zero_fields_without_violations_is_nan(self) -> None:
        assert math.isnan(compute_score(0.0, 0))

    def test_zero_fields_with_violations_is_negative_infinity(self) -> None:
        assert compute_score(3.0, 0) == -math.inf


# ---------------------------------------------------------------------------
# TestWeightedViolations
# ---------------------------------------------------------------------------


class TestWeightedViolations:
    def test_exponent_applies_per_rule(self) -> None:
        rules = [_StubRule("a", 10, []), _StubRule("b", 5, [])]
        results = [
            ValidationResult(rule="a", violations=[Violation("x")] * 4, message=""),
            ValidationResult(rule="b", violations=[Violation("y")], message=""),
        ]
        assert weighted_violations(rules, results) == pytest.approx(10 * 4**1.5 + 5)

    def test_integer_counts_are_scored(self) -> None:
        rules = [_StubRule("a", 1, 4)]
        results = [ValidationResult(rule="a", violations=4, message="")]
        assert weighted_violations(rules, results) == pytest.approx(8.0)

    def test_zero_counts_contribute_nothing(self) -> None:
        rules = [_StubRule("a", 100, 0)]
        results = [ValidationResult(rule="a", violations=0, message="")]
        assert weighted_violations(rules, results) == 0.0


# ---------------------------------------------------------------------------
# TestRunRule
# ---------------------------------------------------------------------------


class TestRunRule:
    def test_failure_becomes_error_result(self) -> None:
        result = run_rule(_BrokenRule(), parse_schema("type Q { a: String }"))
        assert result.rule == "Broken"
        assert result.violations == []
        assert result.error == "Rule 'Broken' failed: boom"

    def test_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING", logger="schemascore.scorer"):
            run_rule(_BrokenRule(), parse_schema("type Q { a: String }"))
        assert "Rule 'Broken' failed: boom" in caplog.text


# ---------------------------------------------------------------------------
# TestScoreDocument
# ---------------------------------------------------------------------------


class TestScoreDocument:
    def test_rules_run_in_order_on_same_document(self) -> None:
        first = _StubRule("first", 1, [])
        second = _StubRule("second", 1, [])
        report = score_document(parse_schema("type Q { a: String }"), rules=[first, second])
        assert [r.rule for r in report.rule_results] == ["first", "second"]
        assert first.calls == 1
        assert second.calls == 1

    def test_broken_rule_does_not_stop_the_battery(self) -> None:
        after = _StubRule("after", 1, [Violation("x")])
        report = score_document(
            parse_schema("type Q { a: String b: String }"),
            rules=[_BrokenRule(), after],
        )
        assert report.rule_results[0].error is not None
        assert report.rule_results[1].violation_count == 1
        # the broken rule's weight is not counted
        assert report.total_weighted_violations == pytest.approx(1.0)
        assert report.score == pytest.approx(50.0)

    def test_report_metadata(self) -> None:
        report = score_document(
            parse_schema("type Q { a: String }"),
            rules=[],
            subgraph_name="accounts",
            metadata={"commit": "abc123"},
        )
        assert report.subgraph_name == "accounts"
        assert report.metadata == {"commit": "abc123"}
        assert datetime.fromisoformat(report.timestamp).tzinfo is not None


# ---------------------------------------------------------------------------
# TestValidate
# ---------------------------------------------------------------------------


class TestValidate:
    def test_clean_schema_scores_100(self, clean_schema: str) -> None:
        report = validate(clean_schema)
        assert report.total_fields == 3
        assert report.total_weighted_violations == 0.0
        assert report.score == 100.0
        assert len(report.rule_results) == 9

    def test_single_violation(self) -> None:
        sdl = (
            "type Query { product(id: ID!): Product }\n"
            "type Product { id: ID! title: String isActive: Boolean }\n"
        )
        report = validate(sdl)
        assert report.total_fields == 4
        assert report.total_weighted_violations == pytest.approx(5.0)
        assert report.score == pytest.approx(-25.0)
        boolean = next(r for r in report.rule_results if r.rule == "Boolean Prefix")
        assert boolean.violation_count == 1

    def test_schema_without_fields(self) -> None:
        report = validate("scalar Money")
        assert report.total_fields == 0
        assert math.isnan(report.score)

    def test_parse_error_propagates(self) -> None:
        with pytest.raises(SchemaParseError):
            validate("type Query {")

    def test_reporter_forwards_report(self, clean_schema: str) -> None:
        config = ReporterConfig(endpoint="https://scores.example.com/api/reports")
        with unittest.mock.patch("schemascore.scorer.forward_report") as mock_forward:
            report = validate(clean_schema, reporter=config)
        mock_forward.assert_called_once_with(report, config)

    def test_no_reporter_no_forwarding(self, clean_schema: str) -> None:
        with unittest.mock.patch("schemascore.scorer.forward_report") as mock_forward:
            validate(clean_schema)
        mock_forward.assert_not_called()


# ---------------------------------------------------------------------------
# TestRunValidation
# ---------------------------------------------------------------------------


class TestRunValidation:
    def test_success(self, clean_schema: str) -> None:
        outcome = run_validation(clean_schema)
        assert outcome.ok
        assert outcome.report is not None
        assert outcome.error is None

    def test_parse_error_as_value(self) -> None:
        outcome = run_validation("type Query {\n  a: \n")
        assert not outcome.ok
        assert outcome.report is None
        assert outcome.error is not None
        assert outcome.error.kind == "parse"
        assert outcome.error.message.startswith("Invalid schema")
        assert outcome.error.line is not None


# ---------------------------------------------------------------------------
# TestScoreProperties
# ---------------------------------------------------------------------------


class TestScoreProperties:
    @pytest.mark.parametrize("count", [0, 1, 2, 5, 10])
    def test_more_violations_never_raise_the_score(self, count: int) -> None:
        doc = parse_schema("type Q { a: String b: String c: String d: String }")
        fewer = score_document(doc, rules=[_StubRule("r", 5, count)])
        more = score_document(doc, rules=[_StubRule("r", 5, count + 1)])
        assert more.score < fewer.score

    def test_identical_input_gives_identical_results(self, clean_schema: str) -> None:
        first = validate(clean_schema, subgraph_name="products")
        second = validate(clean_schema, subgraph_name="products")
        assert first.rule_results == second.rule_results
        assert first.score == second.score
