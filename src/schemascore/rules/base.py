"""Rule contract and the result types every rule produces."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, Union

if TYPE_CHECKING:
    from graphql import DocumentNode

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Location:
    """Where in the schema a violation was found.  All parts are optional."""

    line: int | None = None
    column: int | None = None
    field: str | None = None
    type: str | None = None
    coordinate: str | None = None  # "Type.field" or "Type"


@dataclass(frozen=True)
class Violation:
    """A single rule violation."""

    message: str
    location: Location = field(default_factory=Location)


Violations = Union[list[Violation], int]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of running one rule against a document.

    ``violations`` is either the list of violations or a bare count.
    ``error`` is set (and ``violations`` empty) when the rule itself failed.
    """

    rule: str
    violations: Violations
    message: str
    error: str | None = None

    @property
    def violation_count(self) -> int:
        if isinstance(self.violations, int):
            return self.violations
        return len(self.violations)


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class Rule(Protocol):
    """Anything with a name, a weight and a ``validate(document)`` method."""

    name: str
    weight: float

    def validate(self, document: DocumentNode) -> ValidationResult: ...
