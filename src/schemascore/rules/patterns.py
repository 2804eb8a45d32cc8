"""Single-pass naming and directive rules.

Each rule walks the document once, keeps no state between calls, and
reports one :class:`Violation` per offending field or type.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import inflect
from graphql import ListTypeNode, NamedTypeNode, NonNullTypeNode, StringValueNode

from schemascore.rules.base import Location, ValidationResult, Violation
from schemascore.schema.types import iter_field_definitions, iter_object_types, node_position

if TYPE_CHECKING:
    from graphql import DirectiveNode, DocumentNode, FieldDefinitionNode

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PII_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"email",
        r"phone",
        r"address",
        r"street",
        r"ssn",
        r"social.*security",
        r"passport",
        r"license",
        r"birthday",
        r"dob",
        r"birth.*date",
        r"name",
        r"zip",
        r"postal",
        r"credit.*card",
        r"card.*number",
        r"tax.*id",
        r"nationality",
        r"citizenship",
    )
)

_DEPRECATION_DATE_RE = re.compile(r"\d{2}-\d{2}-\d{4}")
_MIGRATION_PHRASE = "please migrate to"

# Last word of a camelCase / snake_case identifier.
_WORD_RE = re.compile(r"[A-Z]{2,}(?![a-z])|[A-Z]?[a-z0-9]+|[A-Z]+")

_inflector = inflect.engine()

# Singular nouns that inflect strips like a plural "s" (address, class, bus, status).
_SINGULAR_ENDINGS = ("ss", "us")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _has_directive(directives: tuple[DirectiveNode, ...] | None, name: str) -> bool:
    return any(d.name.value == name for d in directives or ())


def _field_violation(message: str, type_name: str, field_def: FieldDefinitionNode) -> Violation:
    line, column = node_position(field_def)
    field_name = field_def.name.value
    return Violation(
        message=message,
        location=Location(
            line=line,
            column=column,
            field=field_name,
            type=type_name,
            coordinate=f"{type_name}.{field_name}",
        ),
    )


def is_potential_pii(field_name: str) -> bool:
    """Return True if *field_name* looks like it holds personal data."""
    return any(p.search(field_name) for p in PII_PATTERNS)


def is_plural(field_name: str) -> bool:
    """Return True if the last word of *field_name* is a plural noun.

    A word counts as plural when inflect can singularize it and pluralizing
    that singular gives the word back.  Uninflected nouns (``sheep``,
    ``series``) count as plural.
    """
    words = _WORD_RE.findall(field_name)
    if not words:
        return False
    word = words[-1].lower()
    if word.endswith(_SINGULAR_ENDINGS):
        return False
    singular = _inflector.singular_noun(word)
    if singular is not False:
        return _inflector.plural_noun(singular) == word
    return _inflector.plural_noun(word) == word


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class PiiRule:
    """Fields whose names suggest PII must carry ``@pii``."""

    name = "PII"
    weight = 10

    def validate(self, document: DocumentNode) -> ValidationResult:
        violations: list[Violation] = []
        for type_name, field_def in iter_field_definitions(document):
            field_name = field_def.name.value
            if is_potential_pii(field_name) and not _has_directive(field_def.directives, "pii"):
                violations.append(
                    _field_violation(
                        f'Field "{field_name}" appears to contain PII but is not '
                        "marked with @pii directive",
                        type_name,
                        field_def,
                    )
                )
        return ValidationResult(
            rule=self.name,
            violations=violations,
            message=(
                f"Found {len(violations)} fields that are potentially PII but are "
                "not marked with the @pii directive."
            ),
        )


class CompositeKeyRule:
    """Object types may declare at most ``max_keys`` ``@key`` directives."""

    name = "Composite Keys"
    weight = 5

    def __init__(self, max_keys: int = 2) -> None:
        self.max_keys = max_keys

    def validate(self, document: DocumentNode) -> ValidationResult:
        violations: list[Violation] = []
        for type_def in iter_object_types(document):
            key_count = sum(1 for d in type_def.directives or () if d.name.value == "key")
            if key_count > self.max_keys:
                type_name = type_def.name.value
                line, column = node_position(type_def)
                violations.append(
                    Violation(
                        message=(
                            f'Type "{type_name}" has {key_count} composite keys, which '
                            f"exceeds the maximum of {self.max_keys}"
                        ),
                        location=Location(
                            line=line, column=column, type=type_name, coordinate=type_name
                        ),
                    )
                )
        return ValidationResult(
            rule=self.name,
            violations=violations,
            message=(
                f"Found {len(violations)} types with more than "
                f"{self.max_keys} composite keys."
            ),
        )


class DeprecationRule:
    """``@deprecated`` needs a reason with a DD-MM-YYYY date and a migration path."""

    name = "Deprecation"
    weight = 5

    def validate(self, document: DocumentNode) -> ValidationResult:
        violations: list[Violation] = []
        for type_name, field_def in iter_field_definitions(document):
            field_name = field_def.name.value
            for directive in field_def.directives or ():
                if directive.name.value != "deprecated":
                    continue
                reason = next(
                    (a.value for a in directive.arguments or () if a.name.value == "reason"),
                    None,
                )
                if not isinstance(reason, StringValueNode):
                    message = f'Field "{field_name}" is deprecated without a reason'
                elif not (
                    _DEPRECATION_DATE_RE.search(reason.value)
                    and _MIGRATION_PHRASE in reason.value.lower()
                ):
                    message = f'Field "{field_name}" has an invalid deprecation reason'
                else:
                    continue
                violations.append(_field_violation(message, type_name, field_def))
        return ValidationResult(
            rule=self.name,
            violations=violations,
            message=(
                f"Found {len(violations)} invalid deprecations"
                if violations
                else "All deprecations are valid."
            ),
        )


class ProblemUnionRule:
    """Mutations must return a ``...Result`` union rather than a bare type."""

    name = "Problem Union"
    weight = 10

    def validate(self, document: DocumentNode) -> ValidationResult:
        violations: list[Violation] = []
        for type_def in iter_object_types(document):
            if type_def.name.value != "Mutation":
                continue
            for field_def in type_def.fields or ():
                field_type = field_def.type
                if isinstance(field_type, NamedTypeNode) and not field_type.name.value.endswith(
                    "Result"
                ):
                    violations.append(
                        _field_violation(
                            f'Mutation "{field_def.name.value}" does not return a union '
                            "type ending in 'Result'",
                            "Mutation",
                            field_def,
                        )
                    )
        return ValidationResult(
            rule=self.name,
            violations=violations,
            message=(
                f"Found {len(violations)} mutations not returning proper union types"
                if violations
                else "All mutations return a valid union type."
            ),
        )


class NullableExternalRule:
    """Fields resolved by another subgraph (``@external``) must be nullable."""

    name = "Nullable External"
    weight = 15

    def validate(self, document: DocumentNode) -> ValidationResult:
        violations: list[Violation] = []
        for type_name, field_def in iter_field_definitions(document):
            if isinstance(field_def.type, NonNullTypeNode) and _has_directive(
                field_def.directives, "external"
            ):
                violations.append(
                    _field_violation(
                        f'Field "{field_def.name.value}" is external but not nullable',
                        type_name,
                        field_def,
                    )
                )
        return ValidationResult(
            rule=self.name,
            violations=violations,
            message=(
                f"Found {len(violations)} external fields that are not nullable"
                if violations
                else "All external fields are nullable."
            ),
        )


class PluralCollectionsRule:
    """List-typed fields should have plural names."""

    name = "Plural Collections"
    weight = 5

    def validate(self, document: DocumentNode) -> ValidationResult:
        violations: list[Violation] = []
        for type_name, field_def in iter_field_definitions(document):
            if isinstance(field_def.type, ListTypeNode) and not is_plural(field_def.name.value):
                violations.append(
                    _field_violation(
                        f'Field "{field_def.name.value}" returns a list but is not plural',
                        type_name,
                        field_def,
                    )
                )
        return ValidationResult(
            rule=self.name,
            violations=violations,
            message=(
                f"Found {len(violations)} collection fields that are not plural"
                if violations
                else "All collection fields are plural."
            ),
        )


class BooleanPrefixRule:
    """Boolean fields should not be prefixed with ``is``."""

    name = "Boolean Prefix"
    weight = 5

    def validate(self, document: DocumentNode) -> ValidationResult:
        violations: list[Violation] = []
        for type_name, field_def in iter_field_definitions(document):
            field_type = field_def.type
            if (
                isinstance(field_type, NamedTypeNode)
                and field_type.name.value == "Boolean"
                and field_def.name.value.startswith("is")
            ):
                violations.append(
                    _field_violation(
                        f'Field "{field_def.name.value}" is a boolean and should not be '
                        "prefixed with 'is'",
                        type_name,
                        field_def,
                    )
                )
        return ValidationResult(
            rule=self.name,
            violations=violations,
            message=(
                f"Found {len(violations)} boolean fields incorrectly prefixed with 'is'"
                if violations
                else "All boolean fields are correctly named."
            ),
        )
