"""Type-reference graph and cycle detection.

Builds a mapping from each object type to the complex types its fields
reference, then enumerates the unique cycles in that graph.  A cycle is a
tuple of type names whose last element repeats the first; its canonical
form starts at the lexicographically smallest member, so ``A -> B -> C -> A``
and ``B -> C -> A -> B`` are the same cycle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from schemascore.schema.parser import parse_schema
from schemascore.schema.types import base_type_name, is_complex_type, iter_object_types

if TYPE_CHECKING:
    from graphql import DocumentNode

logger = logging.getLogger(__name__)

TypeGraph = dict[str, list[str]]
Cycle = tuple[str, ...]

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CycleInfo:
    """A single canonical cycle."""

    path: Cycle  # closed: path[-1] == path[0]
    length: int  # distinct hops, i.e. len(path) - 1
    types: frozenset[str]


@dataclass(frozen=True)
class CycleSummary:
    """Aggregate statistics over all unique cycles."""

    total_cycles: int
    cycles_by_length: dict[int, int]
    type_involvement: dict[str, int]
    longest_cycle: CycleInfo | None
    shortest_cycle: CycleInfo | None


@dataclass(frozen=True)
class CycleAnalysis:
    """Result of :func:`analyze_cycles`."""

    total_cycles: int
    cycles: list[CycleInfo] = field(default_factory=list)
    summary: CycleSummary | None = None


# ---------------------------------------------------------------------------
# Graph construction
# ---------------------------------------------------------------------------


def build_type_graph(document: DocumentNode) -> TypeGraph:
    """Map every object type to the complex types its fields reference.

    Targets keep field declaration order without repeats.  Each call returns
    a new graph.  Object types without complex fields still get an (empty)
    entry, and a field typed as its own enclosing type becomes a self-edge.
    """
    graph: TypeGraph = {}
    for type_def in iter_object_types(document):
        edges = graph.setdefault(type_def.name.value, [])
        for field_def in type_def.fields or ():
            target = base_type_name(field_def.type)
            if is_complex_type(target) and target not in edges:
                edges.append(target)
    return graph


# ---------------------------------------------------------------------------
# Cycle search
# ---------------------------------------------------------------------------


def normalize_cycle(cycle: Cycle) -> Cycle:
    """Rotate a closed cycle so it starts at its smallest member.

    The closing element is dropped before rotating and re-appended after,
    so the result is closed too.
    """
    body = list(cycle[:-1])
    if not body:
        return tuple(cycle)
    min_idx = body.index(min(body))
    rotated = body[min_idx:] + body[:min_idx]
    return (*rotated, rotated[0])


def find_cycles(graph: TypeGraph) -> list[Cycle]:
    """Return the unique canonical cycles of *graph*, in discovery order.

    Depth-first search from every unvisited node, following edges in
    declaration order.  A single path buffer is pushed on entry and popped on
    exit; hitting a node that is still on the recursion stack closes a cycle
    from that node's position in the path.  The search order decides which
    cycles are found, so edges are never reordered.
    Targets that are not keys of *graph* (unions, interfaces, undeclared
    types) are treated as leaves.
    """
    found: dict[Cycle, None] = {}
    visited: set[str] = set()
    on_stack: set[str] = set()
    path: list[str] = []

    def _visit(type_name: str) -> None:
        visited.add(type_name)
        on_stack.add(type_name)
        path.append(type_name)

        for dependency in graph.get(type_name, ()):
            if dependency not in visited:
                _visit(dependency)
            elif dependency in on_stack:
                start = path.index(dependency)
                cycle: Cycle = (*path[start:], dependency)
                found.setdefault(normalize_cycle(cycle), None)

        path.pop()
        on_stack.discard(type_name)

    for type_name in graph:
        if type_name not in visited:
            _visit(type_name)

    return list(found)


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


def _cycle_info(cycle: Cycle) -> CycleInfo:
    return CycleInfo(path=cycle, length=len(cycle) - 1, types=frozenset(cycle))


def summarize_cycles(cycles: list[Cycle]) -> CycleSummary:
    """Group cycles by length, count type involvement, find extremes.

    Involvement counts every position a type occupies in a closed path, so
    the starting type of each cycle is counted for its closing repeat too.
    On ties the first cycle found is kept as longest/shortest.
    """
    by_length: dict[int, int] = {}
    involvement: dict[str, int] = {}
    longest: CycleInfo | None = None
    shortest: CycleInfo | None = None

    for cycle in cycles:
        info = _cycle_info(cycle)
        by_length[info.length] = by_length.get(info.length, 0) + 1
        for type_name in cycle:
            involvement[type_name] = involvement.get(type_name, 0) + 1
        if longest is None or info.length > longest.length:
            longest = info
        if shortest is None or info.length < shortest.length:
            shortest = info

    return CycleSummary(
        total_cycles=len(cycles),
        cycles_by_length=by_length,
        type_involvement=involvement,
        longest_cycle=longest,
        shortest_cycle=shortest,
    )


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def analyze_cycles(document: DocumentNode) -> CycleAnalysis:
    """Build the type graph for *document* and report its unique cycles."""
    graph = build_type_graph(document)
    cycles = find_cycles(graph)
    logger.debug("Type graph: %d types, %d unique cycles", len(graph), len(cycles))
    return CycleAnalysis(
        total_cycles=len(cycles),
        cycles=[_cycle_info(c) for c in cycles],
        summary=summarize_cycles(cycles),
    )


def count_cycles(schema_text: str) -> CycleAnalysis:
    """Parse *schema_text* and run :func:`analyze_cycles` on it.

    Raises
    ------
    SchemaParseError
        If the schema text is malformed.
    """
    return analyze_cycles(parse_schema(schema_text))


def format_cycle(cycle: Cycle) -> str:
    """Render a cycle as ``A → B → A``."""
    return " → ".join(cycle)
