"""Null blast-radius analysis over the field-reference graph.

If field ``T.f`` returns a complex type ``D`` and resolves to null, every
non-null field of ``D`` becomes unreachable, and so on transitively.  The
*blast radius* of a field is the number of field reads lost that way,
counting the field itself.

Nodes of the nullability graph are ``Type.field`` identifiers; an edge
``T.f -> D.g`` exists for every non-null field ``g`` of the object type
``D`` that ``T.f`` returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from schemascore.schema.parser import parse_schema
from schemascore.schema.types import FieldInfo, analyze_field_type, iter_object_types

if TYPE_CHECKING:
    from graphql import DocumentNode

logger = logging.getLogger(__name__)

NullabilityGraph = dict[str, set[str]]

SEVERITY_CRITICAL = "critical"
SEVERITY_WARNING = "warning"
SEVERITY_INFO = "info"
SEVERITIES: tuple[str, ...] = (SEVERITY_CRITICAL, SEVERITY_WARNING, SEVERITY_INFO)

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BlastRadiusConfig:
    """Thresholds for blast-radius classification.

    Configurable via ``schemascore.yml`` ``blast_radius`` section.
    """

    max_blast_radius: int = 5
    warning_threshold: int = 3
    critical_type_paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class BlastRadiusResult:
    """Blast radius of a single field."""

    blast_radius: int
    affected_fields: list[str]  # traversal order, the field itself first
    severity: str  # "critical" | "warning" | "info"
    is_critical_path: bool


@dataclass(frozen=True)
class BlastRadiusViolation:
    """A field whose blast radius breaks the configured policy."""

    field_path: str
    blast_radius: int
    severity: str  # "critical" | "warning"
    message: str


@dataclass(frozen=True)
class BlastRadiusSummary:
    """Aggregate numbers over all analyzed fields."""

    total_fields: int
    violations_by_severity: dict[str, int]
    average_blast_radius: float
    max_blast_radius: int
    critical_paths_affected: int


@dataclass(frozen=True)
class BlastRadiusReport:
    """Violations, per-field analysis and summary for one schema."""

    violations: list[BlastRadiusViolation]
    analysis: dict[str, BlastRadiusResult] = field(default_factory=dict)
    summary: BlastRadiusSummary | None = None


# ---------------------------------------------------------------------------
# Graph construction
# ---------------------------------------------------------------------------


def _collect_type_fields(
    document: DocumentNode,
) -> dict[str, dict[str, FieldInfo]]:
    """Map each object type to its ``field name -> FieldInfo`` table."""
    type_fields: dict[str, dict[str, FieldInfo]] = {}
    for type_def in iter_object_types(document):
        fields = type_fields.setdefault(type_def.name.value, {})
        for field_def in type_def.fields or ():
            fields[field_def.name.value] = analyze_field_type(field_def.type)
    return type_fields


def build_nullability_graph(document: DocumentNode) -> NullabilityGraph:
    """Build the ``Type.field -> {Dependent.requiredField}`` graph.

    Every object field is a node, even when it has no outgoing edges.
    Dependent types that are not object types (unions, interfaces, enums)
    contribute no edges.  Each call returns a new graph.
    """
    type_fields = _collect_type_fields(document)
    non_null: dict[str, list[str]] = {
        type_name: [name for name, info in fields.items() if info.is_non_null]
        for type_name, fields in type_fields.items()
    }

    graph: NullabilityGraph = {}
    for type_name, fields in type_fields.items():
        for field_name, info in fields.items():
            edges = graph.setdefault(f"{type_name}.{field_name}", set())
            dependent = info.dependent_type
            if dependent is None or dependent not in non_null:
                continue
            for required in non_null[dependent]:
                edges.add(f"{dependent}.{required}")
    return graph


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def classify_severity(blast_radius: int, config: BlastRadiusConfig) -> str:
    """Map a blast radius to ``critical`` / ``warning`` / ``info``."""
    if blast_radius >= config.max_blast_radius:
        return SEVERITY_CRITICAL
    if blast_radius >= config.warning_threshold:
        return SEVERITY_WARNING
    return SEVERITY_INFO


def is_critical_path(field_path: str, config: BlastRadiusConfig) -> bool:
    """Return True if *field_path* starts with any configured critical path."""
    return any(field_path.startswith(prefix) for prefix in config.critical_type_paths)


def _reachable(graph: NullabilityGraph, start: str) -> list[str]:
    """Iterative DFS from *start*; the visited set bounds it on cyclic graphs."""
    visited: set[str] = set()
    order: list[str] = []
    stack = [start]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        order.append(current)
        # Reverse-sorted push so the smallest neighbour is expanded first.
        stack.extend(sorted(graph.get(current, ()), reverse=True))
    return order


def analyze_blast_radius(
    graph: NullabilityGraph,
    config: BlastRadiusConfig | None = None,
) -> dict[str, BlastRadiusResult]:
    """Compute the blast radius of every field node in *graph*."""
    if config is None:
        config = BlastRadiusConfig()

    analysis: dict[str, BlastRadiusResult] = {}
    for field_path in graph:
        affected = _reachable(graph, field_path)
        radius = len(affected)
        analysis[field_path] = BlastRadiusResult(
            blast_radius=radius,
            affected_fields=affected,
            severity=classify_severity(radius, config),
            is_critical_path=is_critical_path(field_path, config),
        )
    return analysis


def identify_violations(
    analysis: dict[str, BlastRadiusResult],
    config: BlastRadiusConfig | None = None,
) -> list[BlastRadiusViolation]:
    """Apply the violation policy to an analysis.

    - radius >= ``max_blast_radius``: always a ``critical`` violation;
    - ``warning_threshold`` <= radius < ``max_blast_radius``: a ``warning``
      violation only on a critical path;
    - anything smaller is never a violation.
    """
    if config is None:
        config = BlastRadiusConfig()

    violations: list[BlastRadiusViolation] = []
    for field_path, info in analysis.items():
        if info.blast_radius >= config.max_blast_radius:
            violations.append(
                BlastRadiusViolation(
                    field_path=field_path,
                    blast_radius=info.blast_radius,
                    severity=SEVERITY_CRITICAL,
                    message=(
                        f"Field {field_path} has a null blast radius of "
                        f"{info.blast_radius}, exceeding maximum of "
                        f"{config.max_blast_radius}"
                    ),
                )
            )
        elif info.blast_radius >= config.warning_threshold and info.is_critical_path:
            violations.append(
                BlastRadiusViolation(
                    field_path=field_path,
                    blast_radius=info.blast_radius,
                    severity=SEVERITY_WARNING,
                    message=(
                        f"Critical path field {field_path} has a concerning "
                        f"null blast radius of {info.blast_radius}"
                    ),
                )
            )
    return violations


def summarize_blast_radius(analysis: dict[str, BlastRadiusResult]) -> BlastRadiusSummary:
    """Summarize an analysis.

    ``violations_by_severity`` counts the severity tier of every analyzed
    field, not only policy violations; ``average_blast_radius`` is 0.0 for
    an empty analysis.
    """
    by_severity = dict.fromkeys(SEVERITIES, 0)
    total = 0
    largest = 0
    critical_paths = 0
    for info in analysis.values():
        by_severity[info.severity] += 1
        total += info.blast_radius
        largest = max(largest, info.blast_radius)
        if info.is_critical_path:
            critical_paths += 1

    average = total / len(analysis) if analysis else 0.0
    return BlastRadiusSummary(
        total_fields=len(analysis),
        violations_by_severity=by_severity,
        average_blast_radius=average,
        max_blast_radius=largest,
        critical_paths_affected=critical_paths,
    )


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def analyze_document(
    document: DocumentNode,
    config: BlastRadiusConfig | None = None,
) -> BlastRadiusReport:
    """Build the nullability graph for *document* and analyze it."""
    if config is None:
        config = BlastRadiusConfig()
    graph = build_nullability_graph(document)
    analysis = analyze_blast_radius(graph, config)
    violations = identify_violations(analysis, config)
    logger.debug(
        "Nullability graph: %d fields, %d blast-radius violations",
        len(graph),
        len(violations),
    )
    return BlastRadiusReport(
        violations=violations,
        analysis=analysis,
        summary=summarize_blast_radius(analysis),
    )


def check_blast_radius(
    schema_text: str,
    config: BlastRadiusConfig | None = None,
) -> BlastRadiusReport:
    """Parse *schema_text* and run :func:`analyze_document` on it.

    Raises
    ------
    SchemaParseError
        If the schema text is malformed.
    """
    return analyze_document(parse_schema(schema_text), config)
