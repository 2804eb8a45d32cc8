"""The fixed, ordered rule battery."""

from __future__ import annotations

from typing import TYPE_CHECKING

from schemascore.config import ScorerConfig
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

if TYPE_CHECKING:
    from schemascore.rules.base import Rule


def default_rules(config: ScorerConfig | None = None) -> list[Rule]:
    """Return fresh instances of every rule, in scoring order.

    Order and weights are fixed; *config* only tunes the thresholds of the
    composite-key and blast-radius rules.
    """
    if config is None:
        config = ScorerConfig()

    return [
        PiiRule(),
        CompositeKeyRule(max_keys=config.max_composite_keys),
        CycleCounterRule(),
        NullBlastRadiusRule(config.blast_radius),
        DeprecationRule(),
        ProblemUnionRule(),
        NullableExternalRule(),
        PluralCollectionsRule(),
        BooleanPrefixRule(),
    ]
