"""
End-to-end tests for the qs-serde CLI.

These tests generate sample data with the bundled script, then drive the
typer app the way a shell user would:
1. ``schema`` renders the bound columns
2. ``decode`` turns a file into JSON Lines (file or stdout)
3. Decode failures exit non-zero unless ``--skip-malformed`` is set
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from querystring_serde.main import app
from scripts import generate_data

DEFAULT_ROWS = 50
DEFAULT_SEED = 123
MALFORMED_RATE = 0.3

runner = CliRunner()


@pytest.fixture
def quiet_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "WARNING")


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "hits.tsv"
    generate_data._generate_lines(path, rows=DEFAULT_ROWS, seed=DEFAULT_SEED)
    return path


def _schema_args() -> list[str]:
    return [
        "--columns",
        generate_data.SAMPLE_COLUMNS,
        "--types",
        generate_data.SAMPLE_COLUMN_TYPES,
    ]


class TestSchemaCommand:
    def test_renders_columns(self, quiet_logs):
        result = runner.invoke(app, ["schema", *_schema_args()])

        assert result.exit_code == 0, result.output
        for name in generate_data.SAMPLE_COLUMNS.split(","):
            assert name in result.output

    def test_mismatch_exits_non_zero(self, quiet_logs):
        result = runner.invoke(app, ["schema", "--columns", "a,b", "--types", "int"])

        assert result.exit_code == 1
        assert "error:" in result.output

    def test_uses_settings_when_no_options(self, quiet_logs, monkeypatch):
        monkeypatch.setenv("QS_COLUMNS", "key,visits")
        monkeypatch.setenv("QS_COLUMN_TYPES", "string,bigint")

        result = runner.invoke(app, ["schema"])

        assert result.exit_code == 0, result.output
        assert "visits" in result.output
        assert "bigint" in result.output


class TestDecodeCommand:
    def test_decodes_generated_file_to_output(self, quiet_logs, sample_file, tmp_path):
        output = tmp_path / "hits.jsonl"

        result = runner.invoke(
            app, ["decode", str(sample_file), *_schema_args(), "--output", str(output)]
        )

        assert result.exit_code == 0, result.output
        rows = [json.loads(line) for line in output.read_text(encoding="utf-8").splitlines()]
        assert len(rows) == DEFAULT_ROWS
        for index, row in enumerate(rows):
            assert row["key"] == f"evt-{index:08d}"
            assert isinstance(row["uid"], int)
            assert isinstance(row["clicks"], int)
            assert isinstance(row["dwell"], float)
            assert isinstance(row["vip"], bool)
            assert row["page"].startswith("/")
            assert "+" not in row["ua"] or "(+http" in row["ua"]
        assert any(row["score"] is None for row in rows)
        assert "Decode Summary" in result.output

    def test_decodes_to_stdout(self, quiet_logs, sample_file):
        result = runner.invoke(
            app, ["decode", str(sample_file), *_schema_args(), "--no-summary"]
        )

        assert result.exit_code == 0, result.output
        lines = [line for line in result.stdout.splitlines() if line.strip()]
        assert len(lines) == DEFAULT_ROWS
        assert json.loads(lines[0])["key"] == "evt-00000000"

    def test_fails_fast_on_malformed_lines(self, quiet_logs, tmp_path):
        path = tmp_path / "broken.tsv"
        generate_data._generate_lines(path, rows=DEFAULT_ROWS, seed=DEFAULT_SEED, malformed_rate=1.0)

        result = runner.invoke(
            app, ["decode", str(path), *_schema_args(), "--output", str(tmp_path / "out.jsonl")]
        )

        assert result.exit_code == 1
        assert "error:" in result.output

    def test_skip_malformed_keeps_good_lines(self, quiet_logs, tmp_path):
        path = tmp_path / "mixed.tsv"
        broken = generate_data._generate_lines(
            path, rows=DEFAULT_ROWS, seed=DEFAULT_SEED, malformed_rate=MALFORMED_RATE
        )
        output = tmp_path / "mixed.jsonl"

        result = runner.invoke(
            app,
            [
                "decode",
                str(path),
                *_schema_args(),
                "--skip-malformed",
                "--output",
                str(output),
                "--no-summary",
            ],
        )

        assert result.exit_code == 0, result.output
        assert broken > 0
        decoded = output.read_text(encoding="utf-8").splitlines()
        assert len(decoded) == DEFAULT_ROWS - broken


def test_info_command_shows_settings(quiet_logs, monkeypatch):
    monkeypatch.setenv("QS_COLUMNS", "key,hits")

    result = runner.invoke(app, ["info"])

    assert result.exit_code == 0, result.output
    assert "columns=key,hits" in result.output


def test_generate_data_cli(tmp_path: Path):
    output = tmp_path / "gen" / "hits.tsv"

    result = runner.invoke(generate_data.app, [str(output), "--rows", "10", "--seed", "1"])

    assert result.exit_code == 0, result.output
    assert len(output.read_text(encoding="utf-8").splitlines()) == 10
    assert generate_data.SAMPLE_COLUMN_TYPES in result.output
