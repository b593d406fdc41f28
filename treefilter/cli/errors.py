"""Errors raised by CLI commands, as opposed to library errors from treefilter itself."""

from __future__ import annotations

from typing import Any


class CLIError(Exception):
    """An error carrying the `error.type` and exit code reported in the result envelope."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: int = 1,
        error_type: str = "error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.error_type = error_type
        self.details = details

    def __str__(self) -> str:
        return self.message


class UsageError(CLIError):
    """Command-line input that click accepted but the command cannot use."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, exit_code=2, error_type="usage_error", details=details)
