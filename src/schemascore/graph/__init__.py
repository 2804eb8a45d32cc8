"""Graph domain: type-reference cycles and null blast radius."""

from schemascore.graph.blast_radius import (
    BlastRadiusConfig,
    BlastRadiusReport,
    BlastRadiusResult,
    BlastRadiusSummary,
    BlastRadiusViolation,
    NullabilityGraph,
    analyze_blast_radius,
    analyze_document,
    build_nullability_graph,
    check_blast_radius,
    classify_severity,
    identify_violations,
    is_critical_path,
    summarize_blast_radius,
)
from schemascore.graph.cycles import (
    Cycle,
    CycleAnalysis,
    CycleInfo,
    CycleSummary,
    TypeGraph,
    analyze_cycles,
    build_type_graph,
    count_cycles,
    find_cycles,
    format_cycle,
    normalize_cycle,
    summarize_cycles,
)

__all__ = [
    "BlastRadiusConfig",
    "BlastRadiusReport",
    "BlastRadiusResult",
    "BlastRadiusSummary",
    "BlastRadiusViolation",
    "Cycle",
    "CycleAnalysis",
    "CycleInfo",
    "CycleSummary",
    "NullabilityGraph",
    "TypeGraph",
    "analyze_blast_radius",
    "analyze_cycles",
    "analyze_document",
    "build_nullability_graph",
    "build_type_graph",
    "check_blast_radius",
    "classify_severity",
    "count_cycles",
    "find_cycles",
    "format_cycle",
    "identify_violations",
    "is_critical_path",
    "normalize_cycle",
    "summarize_blast_radius",
    "summarize_cycles",
]
