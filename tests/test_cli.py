from __future__ import annotations

import json
from pathlib import Path

import pytest

pytest.importorskip("rich_click")
pytest.importorskip("rich")

from click.testing import CliRunner

import treefilter
from treefilter import KeyValuePairProperty
from treefilter.cli.errors import UsageError
from treefilter.cli.main import cli
from treefilter.cli.options import parse_property_args
from treefilter.cli.render import RenderSettings, render_result
from treefilter.cli.results import CommandMeta, CommandResult, ErrorInfo


def _json(output: str) -> dict:
    return json.loads(output.strip())


def test_cli_no_args_shows_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage:" in result.output


def test_cli_version_json() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["version", "--json"])
    assert result.exit_code == 0
    payload = _json(result.output)
    assert payload["ok"] is True
    assert payload["command"] == "version"
    assert payload["data"]["version"] == treefilter.__version__
    assert "durationMs" in payload["meta"]


def test_cli_version_table_output() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert treefilter.__version__ in result.output


# =============================================================================
# parse
# =============================================================================


def test_cli_parse_json_lists_segments() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "parse", "/A|B/C[K=V]/**"])
    assert result.exit_code == 0
    payload = _json(result.output)
    segments = payload["data"]["segments"]
    assert [s["expression"] for s in segments] == ["A|B", "C[K=V]", "**"]
    assert segments[0]["kind"] == "OperatorExpression"
    assert segments[1]["kind"] == "ValueAndPropertyExpression"
    assert segments[2]["matchAllBelow"] is True
    assert payload["meta"]["filter"] == "/A|B/C[K=V]/**"


def test_cli_parse_table_keeps_brackets() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "/Test[category=fast]"])
    assert result.exit_code == 0
    assert "Test[category=fast]" in result.output


def test_cli_parse_syntax_error_json() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "A)", "--json"])
    assert result.exit_code == 2
    payload = _json(result.output)
    assert payload["ok"] is False
    assert payload["error"]["type"] == "filter_syntax_error"
    assert payload["error"]["details"] == {"position": 1}


def test_cli_parse_validation_error_table() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "/**/B"])
    assert result.exit_code == 2
    assert "Invalid filter:" in result.output
    assert "** wildcard" in result.output


def test_cli_parse_warns_without_leading_separator() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "parse", "A/B"])
    assert result.exit_code == 0
    assert _json(result.output)["warnings"]


# =============================================================================
# match
# =============================================================================


def test_cli_match_paths_json() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "match", "-f", "/A/**", "/A/B", "/C"])
    assert result.exit_code == 0
    data = _json(result.output)["data"]
    assert data["results"] == [
        {"path": "/A/B", "matched": True},
        {"path": "/C", "matched": False},
    ]
    assert data["matched"] == 1
    assert data["total"] == 2


def test_cli_match_exits_1_when_nothing_matches() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "match", "-f", "/A", "/B"])
    assert result.exit_code == 1
    assert _json(result.output)["data"]["matched"] == 0


def test_cli_match_reads_stdin() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "match", "-f", "/A/*"], input="/A/B\n\n/C/D\n")
    assert result.exit_code == 0
    data = _json(result.output)["data"]
    assert data["total"] == 2
    assert data["matched"] == 1


def test_cli_match_filter_from_env() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "match", "/A"], env={"TREEFILTER_FILTER": "/A"})
    assert result.exit_code == 0
    assert _json(result.output)["meta"]["filter"] == "/A"


def test_cli_match_with_properties() -> None:
    runner = CliRunner()
    args = ["--json", "match", "-f", "/T[Category=fast]", "/T"]
    assert runner.invoke(cli, [*args, "-p", "Category=fast"]).exit_code == 0
    assert runner.invoke(cli, [*args, "-p", "Category=slow"]).exit_code == 1


def test_cli_match_matched_only() -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--json", "match", "-f", "/A|B", "--matched-only", "/A", "/B", "/C"]
    )
    assert result.exit_code == 0
    data = _json(result.output)["data"]
    assert [r["path"] for r in data["results"]] == ["/A", "/B"]
    assert data["total"] == 3


def test_cli_match_invalid_property() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "match", "-f", "/A", "-p", "novalue", "/A"])
    assert result.exit_code == 2
    assert _json(result.output)["error"]["type"] == "usage_error"


def test_cli_match_invalid_path() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "match", "-f", "/A", "A"])
    assert result.exit_code == 2
    assert _json(result.output)["error"]["type"] == "invalid_path"


def test_cli_match_table_output() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["match", "-f", "/A", "/A", "/B"])
    assert result.exit_code == 0
    assert "yes" in result.output
    assert "no" in result.output
    assert "1 of 2 path(s) matched" in result.output


def test_cli_output_from_env() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["version"], env={"TREEFILTER_OUTPUT": "json"})
    assert result.exit_code == 0
    assert _json(result.output)["command"] == "version"


def test_cli_log_file_receives_debug_logs(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "treefilter.log"
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--json", "--log-file", str(log_file), "match", "-f", "/A", "/A"]
    )
    assert result.exit_code == 0
    text = log_file.read_text(encoding="utf-8")
    assert "Parsed filter '/A' into 1 segment(s)" in text
    assert "matched '/A'" in text


# =============================================================================
# Rendering
# =============================================================================


def test_syntax_error_renders_hint(capsys: pytest.CaptureFixture[str]) -> None:
    result = CommandResult(
        ok=False,
        command="parse",
        data=None,
        warnings=[],
        meta=CommandMeta(duration_ms=0),
        error=ErrorInfo(
            type="filter_syntax_error",
            message="Unbalanced ']': no matching '[' (at position 1)",
            hint="Escape literal special characters with a backslash, e.g. \\( or \\[",
            details={"position": 1},
        ),
    )
    render_result(result, settings=RenderSettings(output="table", quiet=False, verbosity=1))
    captured = capsys.readouterr()
    assert "Filter syntax error:" in captured.err
    assert "no matching '['" in captured.err
    assert "\\[" in captured.err
    assert '"position": 1' in captured.err


def test_quiet_suppresses_error_details(capsys: pytest.CaptureFixture[str]) -> None:
    result = CommandResult(
        ok=False,
        command="match",
        meta=CommandMeta(duration_ms=0),
        error=ErrorInfo(type="usage_error", message="Invalid property"),
    )
    render_result(result, settings=RenderSettings(output="table", quiet=True, verbosity=0))
    captured = capsys.readouterr()
    assert "Usage error: Invalid property" in captured.err
    assert "Hint" not in captured.err


def test_parse_property_args_keeps_value_text() -> None:
    bag = parse_property_args(("Url=http://h/p?a=b", "Empty="))
    assert list(bag) == [
        KeyValuePairProperty("Url", "http://h/p?a=b"),
        KeyValuePairProperty("Empty", ""),
    ]


@pytest.mark.parametrize("raw", ["novalue", "=value"])
def test_parse_property_args_rejects_missing_key(raw: str) -> None:
    with pytest.raises(UsageError) as exc:
        parse_property_args((raw,))
    assert exc.value.exit_code == 2
    assert exc.value.details == {"property": raw}
