from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .results import CommandResult


@dataclass(frozen=True, slots=True)
class RenderSettings:
    output: str  # "table" | "json"
    quiet: bool
    verbosity: int


def _error_title(error_type: str) -> str:
    normalized = (error_type or "").strip()
    mapping = {
        "usage_error": "Usage error",
        "filter_syntax_error": "Filter syntax error",
        "filter_validation_error": "Invalid filter",
        "invalid_path": "Invalid node path",
    }
    return mapping.get(normalized, "Error")


def _render_error_details(
    *,
    stderr: Console,
    command: str,
    error_type: str,
    hint: str | None,
    details: dict[str, Any] | None,
    settings: RenderSettings,
) -> None:
    if settings.quiet:
        return

    if hint:
        stderr.print(Text(f"Hint: {hint}"))

    if error_type == "usage_error" and not hint:
        stderr.print(f"Hint: run `treefilter {command} --help`")

    if details and settings.verbosity >= 1:
        stderr.print(Panel.fit(Text(json.dumps(details, ensure_ascii=False, indent=2))))


def _segments_table(segments: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("segment")
    table.add_column("kind")
    for row in segments:
        table.add_row(
            str(row.get("index", "")), Text(str(row.get("expression", ""))), row.get("kind", "")
        )
    return table


def _match_table(results: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("path")
    table.add_column("matched")
    if not results:
        table.add_row("No paths", "")
        return table
    for row in results:
        matched = bool(row.get("matched"))
        table.add_row(
            Text(str(row.get("path", ""))),
            Text("yes", style="green") if matched else Text("no", style="red"),
        )
    return table


def render_result(result: CommandResult, *, settings: RenderSettings) -> int:
    stdout = Console(file=sys.stdout, force_terminal=False)
    stderr = Console(file=sys.stderr, force_terminal=False)

    if settings.output == "json":
        payload = result.model_dump(by_alias=True, mode="json")
        sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")
        return 0

    # table/human output
    if not result.ok:
        if result.error is not None:
            title = _error_title(result.error.type)
            # Filter text is user input; keep rich from reading [..] as markup
            stderr.print(Text(f"{title}: {result.error.message}"))
            _render_error_details(
                stderr=stderr,
                command=result.command,
                error_type=result.error.type,
                hint=result.error.hint,
                details=result.error.details,
                settings=settings,
            )
        else:
            stderr.print("Error")
        return 0

    data = result.data if isinstance(result.data, dict) else {}
    renderable: Any
    if result.command == "version":
        renderable = Text(str(data.get("version", "")), style="bold")
    elif result.command == "parse":
        renderable = _segments_table(data.get("segments", []))
    elif result.command == "match":
        renderable = _match_table(data.get("results", []))
    else:
        renderable = Text(json.dumps(result.data, ensure_ascii=False, indent=2))

    stdout.print(renderable)

    if result.command == "match" and not settings.quiet:
        stderr.print(f"{data.get('matched', 0)} of {data.get('total', 0)} path(s) matched")

    return 0
