"""Type-system helpers: scalar classification, wrapper unwrapping, field walks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from graphql import (
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from graphql import DocumentNode, FieldDefinitionNode, Node, TypeNode

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BUILTIN_SCALARS: frozenset[str] = frozenset(
    {"String", "Int", "Float", "Boolean", "ID", "Date", "DateTime", "Time", "JSON"}
)

UNKNOWN_TYPE = "Unknown"

_FIELD_CONTAINERS = (
    ObjectTypeDefinitionNode,
    InterfaceTypeDefinitionNode,
    ObjectTypeExtensionNode,
    InterfaceTypeExtensionNode,
)

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldInfo:
    """Shape of a declared field type once List/NonNull wrappers are peeled off."""

    type_name: str
    is_non_null: bool
    is_list: bool
    dependent_type: str | None  # base type when complex, else None


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def is_complex_type(type_name: str) -> bool:
    """Return True for anything that is not a built-in scalar."""
    return type_name not in BUILTIN_SCALARS


def base_type_name(type_node: TypeNode) -> str:
    """Strip List and NonNull wrappers and return the named type."""
    while isinstance(type_node, (NonNullTypeNode, ListTypeNode)):
        type_node = type_node.type
    return type_node.name.value  # type: ignore[union-attr]


def analyze_field_type(type_node: TypeNode) -> FieldInfo:
    """Describe a field's type.

    ``is_non_null`` refers to the field itself (the outermost wrapper), and
    ``is_list`` is set when any list wrapper is present.  ``[User!]`` is a
    nullable list field, ``[User]!`` a non-null one.
    """
    is_non_null = isinstance(type_node, NonNullTypeNode)
    is_list = False
    node = type_node
    while not isinstance(node, NamedTypeNode):
        if isinstance(node, ListTypeNode):
            is_list = True
        node = node.type
    name = node.name.value
    return FieldInfo(
        type_name=name,
        is_non_null=is_non_null,
        is_list=is_list,
        dependent_type=name if is_complex_type(name) else None,
    )


# ---------------------------------------------------------------------------
# Document walks
# ---------------------------------------------------------------------------


def iter_object_types(document: DocumentNode) -> Iterator[ObjectTypeDefinitionNode]:
    """Yield object type definitions in declaration order (extensions excluded)."""
    for definition in document.definitions:
        if isinstance(definition, ObjectTypeDefinitionNode):
            yield definition


def iter_field_definitions(
    document: DocumentNode,
) -> Iterator[tuple[str, FieldDefinitionNode]]:
    """Yield ``(enclosing_type_name, field)`` for every field definition.

    Covers object and interface definitions and their extensions.  Fields of
    an extension report ``Unknown`` as their enclosing type, since only a
    definition names the owning type.
    """
    for definition in document.definitions:
        if not isinstance(definition, _FIELD_CONTAINERS):
            continue
        if isinstance(definition, (ObjectTypeDefinitionNode, InterfaceTypeDefinitionNode)):
            type_name = definition.name.value
        else:
            type_name = UNKNOWN_TYPE
        for field in definition.fields or ():
            yield type_name, field


def count_field_definitions(document: DocumentNode) -> int:
    """Count every field definition in the document."""
    return sum(1 for _ in iter_field_definitions(document))


def node_position(node: Node) -> tuple[int | None, int | None]:
    """Return the 1-based ``(line, column)`` where *node* starts, if known."""
    loc = node.loc
    if loc is None:
        return None, None
    return loc.start_token.line, loc.start_token.column
