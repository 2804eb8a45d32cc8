"""Tests for the ``schemascore`` CLI commands: score, cycles, blast-radius."""

from __future__ import annotations

import json
import unittest.mock
from typing import TYPE_CHECKING

from click.testing import CliRunner

from schemascore import __version__
from schemascore.cli import main

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _empty_config(tmp_path: Path) -> Path:
    config = tmp_path / "empty.yml"
    config.write_text("", encoding="utf-8")
    return config


def _score(schema: Path, tmp_path: Path, *extra: str) -> tuple[int, str]:
    runner = CliRunner()
    result = runner.invoke(
        main,
        [
            "score",
            str(schema),
            "--config",
            str(_empty_config(tmp_path)),
            "--format",
            "json",
            *extra,
        ],
    )
    return result.exit_code, result.output


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------


class TestMain:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("score", "cycles", "blast-radius"):
            assert command in result.output


# ---------------------------------------------------------------------------
# score
# ---------------------------------------------------------------------------


class TestScoreCommand:
    def test_clean_schema_json(
        self, tmp_path: Path, clean_schema: str, write_schema: Callable[[str], Path]
    ) -> None:
        code, output = _score(write_schema(clean_schema), tmp_path, "--subgraph", "products")
        assert code == 0
        data = json.loads(output)
        assert data["score"] == 100.0
        assert data["totalFields"] == 3
        assert data["subgraphName"] == "products"
        assert len(data["ruleResults"]) == 9

    def test_rich_output(
        self, tmp_path: Path, clean_schema: str, write_schema: Callable[[str], Path]
    ) -> None:
        schema = write_schema(clean_schema)
        result = CliRunner().invoke(
            main,
            ["score", str(schema), "--config", str(_empty_config(tmp_path)), "--format", "rich"],
        )
        assert result.exit_code == 0
        assert "Schema Score" in result.output
        assert "100.00" in result.output

    def test_min_score_failure(
        self, tmp_path: Path, write_schema: Callable[[str], Path]
    ) -> None:
        schema = write_schema("type Query {\n  isActive: Boolean\n}\n")
        code, _ = _score(schema, tmp_path, "--min-score", "50")
        assert code == 1

    def test_min_score_pass(
        self, tmp_path: Path, clean_schema: str, write_schema: Callable[[str], Path]
    ) -> None:
        code, _ = _score(write_schema(clean_schema), tmp_path, "--min-score", "90")
        assert code == 0

    def test_parse_error_exits_2(
        self, tmp_path: Path, write_schema: Callable[[str], Path]
    ) -> None:
        code, output = _score(write_schema("type Query {\n  a: \n"), tmp_path)
        assert code == 2
        assert "Invalid schema" in output
        assert "line" in output

    def test_config_file_is_applied(
        self, tmp_path: Path, profile_schema: str, write_schema: Callable[[str], Path]
    ) -> None:
        config = tmp_path / "schemascore.yml"
        config.write_text("blast_radius:\n  max_blast_radius: 20\n", encoding="utf-8")
        result = CliRunner().invoke(
            main,
            [
                "score",
                str(write_schema(profile_schema)),
                "--config",
                str(config),
                "--format",
                "json",
            ],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        blast = next(r for r in data["ruleResults"] if r["rule"] == "Null Blast Radius")
        assert blast["violations"] == []

    def test_invalid_config_exits_2(
        self, tmp_path: Path, clean_schema: str, write_schema: Callable[[str], Path]
    ) -> None:
        config = tmp_path / "schemascore.yml"
        config.write_text("composite_keys:\n  max_keys: many\n", encoding="utf-8")
        result = CliRunner().invoke(
            main, ["score", str(write_schema(clean_schema)), "--config", str(config)]
        )
        assert result.exit_code == 2
        assert "composite_keys.max_keys" in result.output

    def test_missing_config_exits_2(
        self, tmp_path: Path, clean_schema: str, write_schema: Callable[[str], Path]
    ) -> None:
        result = CliRunner().invoke(
            main,
            [
                "score",
                str(write_schema(clean_schema)),
                "--config",
                str(tmp_path / "typo.yml"),
            ],
        )
        assert result.exit_code == 2
        assert "typo.yml" in result.output

    def test_endpoint_forwards_report(
        self, tmp_path: Path, clean_schema: str, write_schema: Callable[[str], Path]
    ) -> None:
        resp = unittest.mock.MagicMock()
        resp.status_code = 200
        resp.is_success = True
        with unittest.mock.patch(
            "schemascore.reporter.httpx.post", return_value=resp
        ) as mock_post:
            code, _ = _score(
                write_schema(clean_schema),
                tmp_path,
                "--endpoint",
                "http://localhost:4000/reports",
                "--header",
                "Authorization: Bearer t",
                "--timeout",
                "2",
            )
        assert code == 0
        mock_post.assert_called_once()
        kwargs = mock_post.call_args.kwargs
        assert kwargs["headers"]["Authorization"] == "Bearer t"
        assert kwargs["timeout"] == 2.0

    def test_transport_failure_does_not_change_exit_code(
        self, tmp_path: Path, clean_schema: str, write_schema: Callable[[str], Path]
    ) -> None:
        resp = unittest.mock.MagicMock()
        resp.status_code = 500
        resp.reason_phrase = "Internal Server Error"
        resp.is_success = False
        with unittest.mock.patch("schemascore.reporter.httpx.post", return_value=resp):
            code, _ = _score(
                write_schema(clean_schema), tmp_path, "--endpoint", "http://localhost:4000/r"
            )
        assert code == 0

    def test_bad_header(
        self, tmp_path: Path, clean_schema: str, write_schema: Callable[[str], Path]
    ) -> None:
        code, output = _score(
            write_schema(clean_schema),
            tmp_path,
            "--endpoint",
            "http://localhost:4000/r",
            "--header",
            "no-colon",
        )
        assert code == 2
        assert "Name: value" in output


# ---------------------------------------------------------------------------
# cycles
# ---------------------------------------------------------------------------


class TestCyclesCommand:
    SDL = "type User { posts: [Post] }\ntype Post { author: User }\n"

    def test_json(self, write_schema: Callable[[str], Path]) -> None:
        result = CliRunner().invoke(
            main, ["cycles", str(write_schema(self.SDL)), "--format", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["totalCycles"] == 1
        assert data["cycles"][0]["path"] == ["Post", "User", "Post"]
        assert data["summary"]["cyclesByLength"] == {"2": 1}
        assert data["summary"]["longestCycle"] == ["Post", "User", "Post"]

    def test_rich(self, write_schema: Callable[[str], Path]) -> None:
        result = CliRunner().invoke(main, ["cycles", str(write_schema(self.SDL))])
        assert result.exit_code == 0
        assert "Post → User → Post" in result.output

    def test_no_cycles(self, clean_schema: str, write_schema: Callable[[str], Path]) -> None:
        result = CliRunner().invoke(main, ["cycles", str(write_schema(clean_schema))])
        assert result.exit_code == 0
        assert "No cycles found" in result.output

    def test_parse_error(self, write_schema: Callable[[str], Path]) -> None:
        result = CliRunner().invoke(main, ["cycles", str(write_schema("type {"))])
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# blast-radius
# ---------------------------------------------------------------------------


class TestBlastRadiusCommand:
    def test_json(self, profile_schema: str, write_schema: Callable[[str], Path]) -> None:
        result = CliRunner().invoke(
            main,
            [
                "blast-radius",
                str(write_schema(profile_schema)),
                "--critical-path",
                "Query.user",
                "--critical-path",
                "User.profile",
                "--format",
                "json",
            ],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [v["fieldPath"] for v in data["violations"]] == ["Query.user", "User.profile"]
        assert data["summary"]["totalFields"] == 9
        assert data["summary"]["maxBlastRadius"] == 9
        assert data["summary"]["criticalPathsAffected"] == 2
        assert data["summary"]["violationsByType"] == {"critical": 2, "warning": 1, "info": 6}

    def test_thresholds(self, profile_schema: str, write_schema: Callable[[str], Path]) -> None:
        result = CliRunner().invoke(
            main,
            ["blast-radius", str(write_schema(profile_schema)), "--max", "10", "--format", "json"],
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["violations"] == []

    def test_rich(self, profile_schema: str, write_schema: Callable[[str], Path]) -> None:
        result = CliRunner().invoke(main, ["blast-radius", str(write_schema(profile_schema))])
        assert result.exit_code == 0
        assert "[critical]" in result.output
        assert "9 fields analyzed" in result.output
