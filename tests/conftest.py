"""Shared test fixtures for schemascore."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


PROFILE_SCHEMA = """
type Query {
  user: User!
}

type User {
  id: ID!
  name: String!
  profile: Profile!
}

type Profile {
  email: String!
  address: Address!
}

type Address {
  street: String!
  city: String!
  country: String!
}
"""

CLEAN_SCHEMA = """
type Query {
  product(id: ID!): Product
}

type Product {
  id: ID!
  title: String
}
"""


@pytest.fixture()
def profile_schema() -> str:
    """Four types chained through non-null fields (Query -> User -> Profile -> Address)."""
    return PROFILE_SCHEMA


@pytest.fixture()
def clean_schema() -> str:
    """A schema that passes every rule."""
    return CLEAN_SCHEMA


@pytest.fixture()
def write_schema(tmp_path: Path) -> Callable[[str], Path]:
    """Write SDL text to ``schema.graphql`` under *tmp_path* and return the path."""

    def _write(text: str, name: str = "schema.graphql") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
