"""schemascore - structural health scoring for GraphQL schemas."""

__version__ = "0.4.0"
