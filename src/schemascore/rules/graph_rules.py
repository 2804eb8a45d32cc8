"""Rules backed by the graph analyzers: cycle counting and null blast radius."""

from __future__ import annotations

from typing import TYPE_CHECKING

from schemascore.graph.blast_radius import BlastRadiusConfig, analyze_document
from schemascore.graph.cycles import analyze_cycles, format_cycle
from schemascore.rules.base import Location, ValidationResult, Violation

if TYPE_CHECKING:
    from graphql import DocumentNode


class CycleCounterRule:
    """One violation per unique cycle in the type-reference graph."""

    name = "Cycle Counter"
    weight = 15

    def validate(self, document: DocumentNode) -> ValidationResult:
        analysis = analyze_cycles(document)
        violations = [
            Violation(
                message=f"Circular type reference: {format_cycle(info.path)}",
                location=Location(type=info.path[0], coordinate=info.path[0]),
            )
            for info in analysis.cycles
        ]
        return ValidationResult(
            rule=self.name,
            violations=violations,
            message=f"Found {analysis.total_cycles} cycles in the schema.",
        )


class NullBlastRadiusRule:
    """One violation per field whose null blast radius breaks the policy."""

    name = "Null Blast Radius"
    weight = 20

    def __init__(self, config: BlastRadiusConfig | None = None) -> None:
        self.config = config if config is not None else BlastRadiusConfig()

    def validate(self, document: DocumentNode) -> ValidationResult:
        report = analyze_document(document, self.config)
        violations = []
        for v in report.violations:
            type_name, _, field_name = v.field_path.partition(".")
            violations.append(
                Violation(
                    message=v.message,
                    location=Location(
                        field=field_name,
                        type=type_name,
                        coordinate=v.field_path,
                    ),
                )
            )
        return ValidationResult(
            rule=self.name,
            violations=violations,
            message=(
                f"Found {len(violations)} fields with a null blast radius greater "
                f"than {self.config.max_blast_radius}."
            ),
        )
