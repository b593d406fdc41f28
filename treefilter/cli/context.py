from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from treefilter.exceptions import (
    FilterSyntaxError,
    FilterValidationError,
    InvalidNodePathError,
    TreeFilterError,
)

from .errors import CLIError
from .results import CommandMeta, CommandResult, ErrorInfo

OutputFormat = Literal["table", "json"]


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int
    log_file: Path | None
    enable_log_file: bool = True


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    if isinstance(exc, TreeFilterError):
        return 2
    return 1


def error_info_for_exception(exc: Exception) -> ErrorInfo:
    if isinstance(exc, CLIError):
        return ErrorInfo(type=exc.error_type, message=exc.message, details=exc.details)
    if isinstance(exc, FilterSyntaxError):
        details = {"position": exc.position} if exc.position is not None else None
        return ErrorInfo(
            type="filter_syntax_error",
            message=str(exc),
            hint="Escape literal special characters with a backslash, e.g. \\( or \\[",
            details=details,
        )
    if isinstance(exc, FilterValidationError):
        details = {"fragment": exc.fragment} if exc.fragment is not None else None
        return ErrorInfo(type="filter_validation_error", message=str(exc), details=details)
    if isinstance(exc, InvalidNodePathError):
        return ErrorInfo(type="invalid_path", message=str(exc), details=None)
    return ErrorInfo(type=exc.__class__.__name__, message=str(exc), details=None)


def build_result(
    *,
    ok: bool,
    command: str,
    started_at: float,
    data: Any | None,
    warnings: list[str],
    filter: str | None = None,  # noqa: A002
    error: ErrorInfo | None = None,
) -> CommandResult:
    duration_ms = int(max(0.0, (time.time() - started_at) * 1000))
    meta = CommandMeta(duration_ms=duration_ms, filter=filter)
    return CommandResult(
        ok=ok,
        command=command,
        data=data,
        warnings=warnings,
        meta=meta,
        error=error,
    )
