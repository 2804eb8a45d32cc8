"""Scoring orchestrator: parse once, run the rule battery, compute the score.

Score formula::

    weighted = sum(rule.weight * count ** 1.5 for every rule with count > 0)
    score    = 100 * (1 - weighted / total_fields)

The score is not clamped: a dense enough set of violations drives it below
zero.  A schema with no field definitions yields ``nan`` (no violations) or
``-inf`` (some violations), matching IEEE division.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from schemascore.errors import RuleEvaluationError, SchemaParseError
from schemascore.report import SchemaReport
from schemascore.reporter import forward_report
from schemascore.rules.base import ValidationResult
from schemascore.rules.registry import default_rules
from schemascore.schema.parser import parse_schema
from schemascore.schema.types import count_field_definitions

if TYPE_CHECKING:
    from collections.abc import Sequence

    from graphql import DocumentNode

    from schemascore.config import ScorerConfig
    from schemascore.reporter import ReporterConfig
    from schemascore.rules.base import Rule

logger = logging.getLogger(__name__)

VIOLATION_EXPONENT = 1.5

# ---------------------------------------------------------------------------
# Outcome values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalysisError:
    """Why an analysis produced no report."""

    kind: str  # "parse"
    message: str
    line: int | None = None
    column: int | None = None


@dataclass(frozen=True)
class ValidationOutcome:
    """Either a report or an error, never both."""

    report: SchemaReport | None = None
    error: AnalysisError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Score computation
# ---------------------------------------------------------------------------


def weighted_violations(rules: Sequence[Rule], results: Sequence[ValidationResult]) -> float:
    """Sum ``weight * count ** 1.5`` over rule results with at least one violation."""
    total = 0.0
    for rule, result in zip(rules, results):
        count = result.violation_count
        if count > 0:
            total += rule.weight * count**VIOLATION_EXPONENT
    return total


def compute_score(total_weighted_violations: float, total_fields: int) -> float:
    """Apply the score formula (unclamped)."""
    if total_fields == 0:
        return math.nan if total_weighted_violations == 0 else -math.inf
    return 100 * (1 - total_weighted_violations / total_fields)


def run_rule(rule: Rule, document: DocumentNode) -> ValidationResult:
    """Run one rule, turning any failure into an error result with no violations."""
    try:
        return rule.validate(document)
    except Exception as exc:  # noqa: BLE001
        error = RuleEvaluationError(rule.name, exc)
        logger.warning("%s", error, exc_info=True)
        return ValidationResult(
            rule=rule.name, violations=[], message=str(error), error=str(error)
        )


# ---------------------------------------------------------------------------
# Main entry points
# ---------------------------------------------------------------------------


def score_document(
    document: DocumentNode,
    *,
    rules: Sequence[Rule] | None = None,
    config: ScorerConfig | None = None,
    subgraph_name: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> SchemaReport:
    """Score an already-parsed document.

    Rules run sequentially in the given order (the default battery when
    *rules* is None) against the same document.
    """
    if rules is None:
        rules = default_rules(config)

    total_fields = count_field_definitions(document)
    results: list[ValidationResult] = []
    for rule in rules:
        logger.info("Running rule [%s]", rule.name)
        result = run_rule(rule, document)
        logger.info("Rule [%s]: %d violations", rule.name, result.violation_count)
        results.append(result)

    weighted = weighted_violations(rules, results)
    score = compute_score(weighted, total_fields)
    logger.info("Schema score: %s", score)

    return SchemaReport(
        timestamp=datetime.now(timezone.utc).isoformat(),
        score=score,
        total_fields=total_fields,
        total_weighted_violations=weighted,
        rule_results=results,
        subgraph_name=subgraph_name,
        metadata=metadata,
    )


def validate(
    schema_text: str,
    *,
    rules: Sequence[Rule] | None = None,
    config: ScorerConfig | None = None,
    subgraph_name: str | None = None,
    metadata: dict[str, Any] | None = None,
    reporter: ReporterConfig | None = None,
) -> SchemaReport:
    """Parse *schema_text* once and score it.

    When *reporter* is given, the finished report is forwarded in the
    background; transport failures are logged and never affect the result.

    Raises
    ------
    SchemaParseError
        If the schema text is malformed; no rule runs in that case.
    """
    document = parse_schema(schema_text)
    report = score_document(
        document,
        rules=rules,
        config=config,
        subgraph_name=subgraph_name,
        metadata=metadata,
    )
    if reporter is not None:
        forward_report(report, reporter)
    return report


def run_validation(
    schema_text: str,
    *,
    rules: Sequence[Rule] | None = None,
    config: ScorerConfig | None = None,
    subgraph_name: str | None = None,
    metadata: dict[str, Any] | None = None,
    reporter: ReporterConfig | None = None,
) -> ValidationOutcome:
    """Like :func:`validate`, but report a parse failure as a value."""
    try:
        report = validate(
            schema_text,
            rules=rules,
            config=config,
            subgraph_name=subgraph_name,
            metadata=metadata,
            reporter=reporter,
        )
    except SchemaParseError as exc:
        return ValidationOutcome(
            error=AnalysisError(kind="parse", message=str(exc), line=exc.line, column=exc.column)
        )
    return ValidationOutcome(report=report)
