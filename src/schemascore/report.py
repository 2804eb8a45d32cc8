"""Schema report: data structure, JSON serialization and terminal rendering."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from schemascore.rules.base import ValidationResult, Violation

# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SchemaReport:
    """Complete scoring report for one schema."""

    timestamp: str  # ISO-8601, UTC
    score: float  # unclamped; nan/-inf when the schema declares no fields
    total_fields: int
    total_weighted_violations: float
    rule_results: list[ValidationResult] = field(default_factory=list)
    subgraph_name: str | None = None
    metadata: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# JSON serialization
# ---------------------------------------------------------------------------


def _violation_to_dict(violation: Violation) -> dict[str, Any]:
    loc = violation.location
    return {
        "message": violation.message,
        "location": {
            "line": loc.line,
            "column": loc.column,
            "field": loc.field,
            "type": loc.type,
            "coordinate": loc.coordinate,
        },
    }


def rule_result_to_dict(result: ValidationResult) -> dict[str, Any]:
    """Serialize a :class:`ValidationResult` to a JSON-safe dict."""
    violations: list[dict[str, Any]] | int
    if isinstance(result.violations, int):
        violations = result.violations
    else:
        violations = [_violation_to_dict(v) for v in result.violations]
    data: dict[str, Any] = {
        "rule": result.rule,
        "violations": violations,
        "message": result.message,
    }
    if result.error is not None:
        data["error"] = result.error
    return data


def _json_number(value: float) -> float | None:
    return value if math.isfinite(value) else None


def report_to_dict(report: SchemaReport) -> dict[str, Any]:
    """Serialize a :class:`SchemaReport` using the ingest service's camelCase keys.

    Optional keys (``subgraphName``, ``metadata``) are omitted when unset.
    A ``nan`` or infinite score is written as ``None``.
    """
    data: dict[str, Any] = {"timestamp": report.timestamp}
    if report.subgraph_name is not None:
        data["subgraphName"] = report.subgraph_name
    data["score"] = _json_number(report.score)
    data["totalFields"] = report.total_fields
    data["totalWeightedViolations"] = _json_number(report.total_weighted_violations)
    data["ruleResults"] = [rule_result_to_dict(r) for r in report.rule_results]
    if report.metadata is not None:
        data["metadata"] = report.metadata
    return data


def format_json(report: SchemaReport) -> str:
    """Format a report as indented JSON."""
    return json.dumps(report_to_dict(report), indent=2, allow_nan=False)


# ---------------------------------------------------------------------------
# Rich formatting (human-readable output)
# ---------------------------------------------------------------------------


def _score_style(score: float) -> tuple[str, str]:
    """Return (indicator, style) for a score."""
    if math.isnan(score) or score < 50.0:
        return "\u2716", "red bold"  # ✖
    if score < 80.0:
        return "\u25b2", "yellow"  # ▲
    if score < 100.0:
        return "\u25cf", "green"  # ●
    return "\u2713", "green bold"  # ✓


def format_rich(report: SchemaReport, *, show_violations: bool = True) -> str:
    """Format a report as a Rich-rendered string for terminal display.

    Produces:
    - Header rule with the subgraph name
    - Score line with indicator
    - Per-rule table (violations, message)
    - Violation details for every rule that has any
    """
    from io import StringIO

    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table
    from rich.text import Text

    buf = StringIO()
    console = Console(file=buf, force_terminal=True, width=100)

    title = "Schema Score"
    if report.subgraph_name:
        title += f": {report.subgraph_name}"
    console.print()
    console.rule(f"[bold]{title}[/bold]", style="blue")
    console.print()

    indicator, style = _score_style(report.score)
    score_text = Text()
    score_text.append("  Score: ", style="bold")
    score_text.append(f"{report.score:.2f}", style=f"bold {style}")
    score_text.append(" / 100  ", style="bold")
    score_text.append(indicator, style=style)
    console.print(score_text)
    console.print(
        f"  Fields: {report.total_fields}   "
        f"Weighted violations: {report.total_weighted_violations:.2f}"
    )
    console.print()

    table = Table(box=None, padding=(0, 1))
    table.add_column("Rule", style="cyan")
    table.add_column("Violations", justify="right")
    table.add_column("Message")
    for result in report.rule_results:
        count = result.violation_count
        count_str = "error" if result.error is not None else str(count)
        count_style = "red" if result.error is not None or count else "green"
        message = result.error if result.error is not None else result.message
        table.add_row(result.rule, f"[{count_style}]{count_str}[/{count_style}]", escape(message))
    console.print(table)
    console.print()

    if show_violations:
        for result in report.rule_results:
            if isinstance(result.violations, int) or not result.violations:
                continue
            console.rule(result.rule, style="dim")
            for v in result.violations:
                loc = v.location
                where = loc.coordinate or ""
                if loc.line is not None:
                    where += f" ({loc.line}:{loc.column})"
                console.print(f"  \u2717 {where} {escape(v.message)}", highlight=False)
            console.print()

    return buf.getvalue()
