"""Exception hierarchy shared by the parser, scorer, config loader and reporter."""

from __future__ import annotations


class SchemaScoreError(Exception):
    """Base class for all schemascore errors."""


class SchemaParseError(SchemaScoreError):
    """Raised when schema text cannot be parsed.

    Fatal: no graph is built and no partial report is produced.
    """

    def __init__(
        self, message: str, *, line: int | None = None, column: int | None = None
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


class RuleEvaluationError(SchemaScoreError):
    """Raised when a single rule fails during its own traversal."""

    def __init__(self, rule_name: str, cause: BaseException) -> None:
        super().__init__(f"Rule '{rule_name}' failed: {cause}")
        self.rule_name = rule_name
        self.cause = cause


class ReportTransportError(SchemaScoreError):
    """Raised when forwarding a report to the reporting endpoint fails."""


class ConfigError(SchemaScoreError):
    """Raised when ``schemascore.yml`` holds structurally invalid values."""
