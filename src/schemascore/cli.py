"""schemascore CLI entry point."""

from __future__ import annotations

import json
import logging
import math
import sys
from pathlib import Path

import click

from schemascore import __version__


@click.group()
@click.version_option(version=__version__, prog_name="schemascore")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output (log each rule).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool) -> None:
    """schemascore - structural health scoring for GraphQL schemas."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _read_schema(schema: Path) -> str:
    try:
        return schema.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        click.echo(f"Error: cannot read {schema}: {exc}", err=True)
        sys.exit(2)


def _parse_headers(raw: tuple[str, ...]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for item in raw:
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            msg = f"Invalid header {item!r}, expected 'Name: value'"
            raise click.BadParameter(msg, param_hint="--header")
        headers[name.strip()] = value.strip()
    return headers


# ---------------------------------------------------------------------------
# score
# ---------------------------------------------------------------------------


@main.command()
@click.argument("schema", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Config file, which must exist (default: ./schemascore.yml if present).",
)
@click.option("--subgraph", default=None, help="Subgraph name recorded in the report.")
@click.option("--endpoint", default=None, help="POST the report to this URL.")
@click.option(
    "--header",
    "headers",
    multiple=True,
    help="Extra HTTP header for --endpoint, as 'Name: value'. Repeatable.",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Report transport timeout in seconds (default: 10).",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "json"]),
    default=None,
    help="Output format (default: rich if TTY, json if piped).",
)
@click.option(
    "--min-score",
    type=float,
    default=None,
    help="Exit 1 if the score is below this value.",
)
def score(
    *,
    schema: Path,
    config_path: Path | None,
    subgraph: str | None,
    endpoint: str | None,
    headers: tuple[str, ...],
    timeout: float | None,
    fmt: str | None,
    min_score: float | None,
) -> None:
    """Score a GraphQL SDL file against the full rule battery.

    Exit codes: 0 = scored, 1 = below --min-score,
    2 = unreadable/invalid schema or configuration error.
    """
    from dataclasses import replace

    from schemascore.config import CONFIG_FILENAME, load_config
    from schemascore.errors import ConfigError, SchemaParseError
    from schemascore.report import format_json, format_rich
    from schemascore.reporter import DEFAULT_TIMEOUT, ReporterConfig, forward_report
    from schemascore.scorer import validate

    if fmt is None:
        fmt = "rich" if sys.stdout.isatty() else "json"

    try:
        config = load_config(config_path or Path.cwd() / CONFIG_FILENAME)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    reporter = config.reporter
    if endpoint is not None:
        reporter = ReporterConfig(endpoint=endpoint)
    if reporter is not None:
        extra = _parse_headers(headers)
        reporter = replace(
            reporter,
            headers={**reporter.headers, **extra},
            timeout=timeout if timeout is not None else reporter.timeout,
        )

    try:
        report = validate(_read_schema(schema), config=config, subgraph_name=subgraph)
    except SchemaParseError as exc:
        click.echo(f"Error: {exc} (line {exc.line}, column {exc.column})", err=True)
        sys.exit(2)

    output = format_rich(report) if fmt == "rich" else format_json(report)
    click.echo(output)

    if reporter is not None:
        thread = forward_report(report, reporter)
        thread.join(timeout=(reporter.timeout or DEFAULT_TIMEOUT) + 1.0)

    if min_score is not None and (math.isnan(report.score) or report.score < min_score):
        sys.exit(1)


# ---------------------------------------------------------------------------
# cycles
# ---------------------------------------------------------------------------


@main.command()
@click.argument("schema", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "json"]),
    default="rich",
    help="Output format.",
)
def cycles(*, schema: Path, fmt: str) -> None:
    """List the unique type-reference cycles in a schema."""
    from schemascore.errors import SchemaParseError
    from schemascore.graph.cycles import count_cycles, format_cycle

    try:
        analysis = count_cycles(_read_schema(schema))
    except SchemaParseError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    summary = analysis.summary
    if fmt == "json":
        payload: dict[str, object] = {
            "totalCycles": analysis.total_cycles,
            "cycles": [
                {"path": list(c.path), "length": c.length, "types": sorted(c.types)}
                for c in analysis.cycles
            ],
        }
        if summary is not None:
            payload["summary"] = {
                "cyclesByLength": {str(k): v for k, v in summary.cycles_by_length.items()},
                "typeInvolvementCount": summary.type_involvement,
                "longestCycle": (
                    list(summary.longest_cycle.path) if summary.longest_cycle else None
                ),
                "shortestCycle": (
                    list(summary.shortest_cycle.path) if summary.shortest_cycle else None
                ),
            }
        click.echo(json.dumps(payload, indent=2))
        return

    if not analysis.cycles:
        click.echo("✓ No cycles found")
        return
    for info in analysis.cycles:
        click.echo(f"✗ [{info.length}] {format_cycle(info.path)}")
    click.echo("")
    click.echo(f"{analysis.total_cycles} cycles found")
    if summary is not None:
        by_length = ", ".join(
            f"{length}: {count}" for length, count in sorted(summary.cycles_by_length.items())
        )
        click.echo(f"By length: {by_length}")


# ---------------------------------------------------------------------------
# blast-radius
# ---------------------------------------------------------------------------


@main.command("blast-radius")
@click.argument("schema", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--max", "max_radius", type=int, default=5, help="Critical blast radius.")
@click.option("--warning", "warning_threshold", type=int, default=3, help="Warning threshold.")
@click.option(
    "--critical-path",
    "critical_paths",
    multiple=True,
    help="Business-critical field prefix, e.g. 'Query.user'. Repeatable.",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "json"]),
    default="rich",
    help="Output format.",
)
def blast_radius(
    *,
    schema: Path,
    max_radius: int,
    warning_threshold: int,
    critical_paths: tuple[str, ...],
    fmt: str,
) -> None:
    """Report fields whose null result would wipe out many required reads."""
    from schemascore.errors import SchemaParseError
    from schemascore.graph.blast_radius import BlastRadiusConfig, check_blast_radius

    config = BlastRadiusConfig(
        max_blast_radius=max_radius,
        warning_threshold=warning_threshold,
        critical_type_paths=critical_paths,
    )
    try:
        result = check_blast_radius(_read_schema(schema), config)
    except SchemaParseError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    summary = result.summary
    if fmt == "json":
        payload: dict[str, object] = {
            "violations": [
                {
                    "fieldPath": v.field_path,
                    "blastRadius": v.blast_radius,
                    "severity": v.severity,
                    "message": v.message,
                }
                for v in result.violations
            ],
        }
        if summary is not None:
            payload["summary"] = {
                "totalFields": summary.total_fields,
                "violationsByType": summary.violations_by_severity,
                "averageBlastRadius": summary.average_blast_radius,
                "maxBlastRadius": summary.max_blast_radius,
                "criticalPathsAffected": summary.critical_paths_affected,
            }
        click.echo(json.dumps(payload, indent=2))
        return

    for v in result.violations:
        click.echo(f"✗ [{v.severity}] {v.message}")
    if result.violations:
        click.echo("")
    if summary is not None:
        click.echo(
            f"{summary.total_fields} fields analyzed, "
            f"{len(result.violations)} violations, "
            f"average radius {summary.average_blast_radius:.2f}, "
            f"max {summary.max_blast_radius}"
        )
