"""Parse SDL text into a graphql-core document."""

from __future__ import annotations

from graphql import DocumentNode, GraphQLSyntaxError, parse

from schemascore.errors import SchemaParseError


def parse_schema(schema_text: str) -> DocumentNode:
    """Parse *schema_text* into a :class:`graphql.DocumentNode`.

    Raises
    ------
    SchemaParseError
        If the text is not valid GraphQL SDL.  The first reported source
        location is carried on the exception.
    """
    try:
        return parse(schema_text)
    except GraphQLSyntaxError as exc:
        line: int | None = None
        column: int | None = None
        if exc.locations:
            line = exc.locations[0].line
            column = exc.locations[0].column
        msg = f"Invalid schema: {exc.message}"
        raise SchemaParseError(msg, line=line, column=column) from exc
