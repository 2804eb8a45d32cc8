"""Rules domain: the rule contract, graph-backed rules and pattern rules."""

from schemascore.rules.base import Location, Rule, ValidationResult, Violation
from schemascore.rules.graph_rules import CycleCounterRule, NullBlastRadiusRule
from schemascore.rules.patterns import (
    BooleanPrefixRule,
    CompositeKeyRule,
    DeprecationRule,
    NullableExternalRule,
    PiiRule,
    PluralCollectionsRule,
    ProblemUnionRule,
)
from schemascore.rules.registry import default_rules

__all__ = [
    "BooleanPrefixRule",
    "CompositeKeyRule",
    "CycleCounterRule",
    "DeprecationRule",
    "Location",
    "NullBlastRadiusRule",
    "NullableExternalRule",
    "PiiRule",
    "PluralCollectionsRule",
    "ProblemUnionRule",
    "Rule",
    "ValidationResult",
    "Violation",
    "default_rules",
]
