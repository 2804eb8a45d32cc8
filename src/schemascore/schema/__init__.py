"""Schema domain: SDL parsing and type-system helpers."""

from schemascore.schema.parser import parse_schema
from schemascore.schema.types import (
    BUILTIN_SCALARS,
    FieldInfo,
    analyze_field_type,
    base_type_name,
    count_field_definitions,
    is_complex_type,
    iter_field_definitions,
    iter_object_types,
    node_position,
)

__all__ = [
    "BUILTIN_SCALARS",
    "FieldInfo",
    "analyze_field_type",
    "base_type_name",
    "count_field_definitions",
    "is_complex_type",
    "iter_field_definitions",
    "iter_object_types",
    "node_position",
    "parse_schema",
]
