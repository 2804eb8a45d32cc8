"""Scorer configuration: thresholds and reporting endpoint from ``schemascore.yml``."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import yaml

from schemascore.errors import ConfigError
from schemascore.graph.blast_radius import BlastRadiusConfig
from schemascore.reporter import DEFAULT_TIMEOUT, ReporterConfig

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "schemascore.yml"

# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScorerConfig:
    """Tunable thresholds for the rule battery, plus the optional reporter."""

    blast_radius: BlastRadiusConfig = field(default_factory=BlastRadiusConfig)
    max_composite_keys: int = 2
    reporter: ReporterConfig | None = None


# ---------------------------------------------------------------------------
# Section parsing
# ---------------------------------------------------------------------------


def _as_int(value: object, context: str) -> int:
    not_integral = isinstance(value, float) and not value.is_integer()
    if isinstance(value, bool) or not isinstance(value, (int, float, str)) or not_integral:
        msg = f"{context} must be an integer, got {value!r}"
        raise ConfigError(msg)
    try:
        return int(value)
    except ValueError as exc:
        msg = f"{context} must be an integer, got {value!r}"
        raise ConfigError(msg) from exc


def _parse_blast_radius(section: dict[str, Any]) -> BlastRadiusConfig:
    defaults = BlastRadiusConfig()
    max_radius = defaults.max_blast_radius
    warning = defaults.warning_threshold
    if "max_blast_radius" in section:
        max_radius = _as_int(section["max_blast_radius"], "blast_radius.max_blast_radius")
    if "warning_threshold" in section:
        warning = _as_int(section["warning_threshold"], "blast_radius.warning_threshold")

    paths_raw = section.get("critical_type_paths", [])
    if isinstance(paths_raw, str):
        paths_raw = [paths_raw]
    if not isinstance(paths_raw, list):
        msg = "blast_radius.critical_type_paths must be a list of strings"
        raise ConfigError(msg)

    return BlastRadiusConfig(
        max_blast_radius=max_radius,
        warning_threshold=warning,
        critical_type_paths=tuple(str(p) for p in paths_raw),
    )


def _parse_reporter(section: dict[str, Any]) -> ReporterConfig | None:
    endpoint = section.get("endpoint")
    if not endpoint:
        return None

    headers_raw = section.get("headers") or {}
    if not isinstance(headers_raw, dict):
        msg = "reporter.headers must be a mapping"
        raise ConfigError(msg)

    timeout_raw = section.get("timeout", DEFAULT_TIMEOUT)
    try:
        timeout = float(timeout_raw)
    except (TypeError, ValueError) as exc:
        msg = f"reporter.timeout must be a number, got {timeout_raw!r}"
        raise ConfigError(msg) from exc

    return ReporterConfig(
        endpoint=str(endpoint),
        headers={str(k): str(v) for k, v in headers_raw.items()},
        timeout=timeout,
    )


def parse_config(data: object) -> ScorerConfig:
    """Build a :class:`ScorerConfig` from already-loaded YAML data.

    Missing or non-mapping sections fall back to defaults.

    Raises
    ------
    ConfigError
        When a value is present but has the wrong type.
    """
    if not isinstance(data, dict):
        return ScorerConfig()

    blast_section = data.get("blast_radius")
    blast = (
        _parse_blast_radius(blast_section)
        if isinstance(blast_section, dict)
        else BlastRadiusConfig()
    )

    max_keys = 2
    keys_section = data.get("composite_keys")
    if isinstance(keys_section, dict) and "max_keys" in keys_section:
        max_keys = _as_int(keys_section["max_keys"], "composite_keys.max_keys")

    reporter_section = data.get("reporter")
    reporter = _parse_reporter(reporter_section) if isinstance(reporter_section, dict) else None

    return ScorerConfig(blast_radius=blast, max_composite_keys=max_keys, reporter=reporter)


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------


def load_config(config_path: Path) -> ScorerConfig:
    """Load ``schemascore.yml`` from *config_path*.

    Falls back to defaults for a missing or unreadable file.

    Raises
    ------
    ConfigError
        When the file parses but holds invalid values.
    """
    if not config_path.is_file():
        return ScorerConfig()

    try:
        with config_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError):
        logger.warning("Failed to read %s, using default configuration", config_path)
        return ScorerConfig()

    return parse_config(data)
