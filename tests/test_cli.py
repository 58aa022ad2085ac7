"""Tests for the classify and ingest commands."""

import json
import os
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from mindstash.cli import cli


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = dict(os.environ)
    env["HOME"] = str(tmp_path)
    return env


def _drop_folder(tmp_path: Path) -> Path:
    root = tmp_path / "drop"
    (root / "nested").mkdir(parents=True)
    (root / "alpha.txt").write_text("first note", encoding="utf-8")
    (root / "nested" / "beta.md").write_text("# second", encoding="utf-8")
    (root / "photo.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (root / ".hidden.txt").write_text("secret", encoding="utf-8")
    return root


def test_cli_help_displays_commands() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "mindstash gathers pasted text" in result.output
    for command in ("classify", "ingest", "config"):
        assert command in result.output


def test_classify_json_reports_type_and_metadata() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["classify", "https://x.com/jack/status/20", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload == {
        "type": "TWEET",
        "content": "https://x.com/jack/status/20",
        "metadata": {"author": "@jack"},
    }


def test_classify_table_output() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["classify", "just a thought"])

    assert result.exit_code == 0
    assert "NOTE" in result.output


def test_ingest_json_lists_new_assets(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    root = _drop_folder(tmp_path)

    result = runner.invoke(
        cli,
        ["ingest", str(root), "--paste", "https://example.com/article", "--json"],
        env=env,
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["counts"]["ingested"] == 4
    assert payload["counts"]["pasted"] == 1
    assert payload["counts"]["total"] == 5
    assert payload["counts"]["by_type"]["LINK"] == 1
    titles = {asset["title"] for asset in payload["results"]}
    assert {"alpha.txt", "beta.md", "photo.png", ".hidden.txt"} <= titles


def test_ingest_filters_and_searches(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    root = _drop_folder(tmp_path)

    result = runner.invoke(
        cli,
        ["ingest", str(root), "--type", "note", "--search", "SECOND", "--json"],
        env=env,
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [asset["title"] for asset in payload["results"]] == ["beta.md"]
    assert payload["context"]["query"]["filter_type"] == "NOTE"


def test_ingest_summary_mode_prints_summary_line(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    root = _drop_folder(tmp_path)

    result = runner.invoke(cli, ["ingest", str(root), "--summary"], env=env)

    assert result.exit_code == 0
    assert "Ingest summary for" in result.output
    assert "ingested=4" in result.output


def test_ingest_requires_input(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["ingest", "--json"], env=env)

    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["error"]["code"] == "cli_error"


def test_ingest_json_conflicts_with_quiet(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["ingest", "--paste", "hello", "--json", "--quiet"], env=env)

    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert "--json cannot be combined with --quiet" in payload["error"]["message"]


def test_ingest_skip_hidden_leaves_out_dot_files(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    root = _drop_folder(tmp_path)

    result = runner.invoke(cli, ["ingest", str(root), "--skip-hidden", "--json"], env=env)

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["counts"]["ingested"] == 3
    assert ".hidden.txt" not in {asset["title"] for asset in payload["results"]}


def test_blank_paste_is_not_counted(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(
        cli, ["ingest", "--paste", "   ", "--paste", "a real note", "--json"], env=env
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["counts"]["pasted"] == 1
    assert payload["counts"]["total"] == 1
