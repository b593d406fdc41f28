from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CLIModel(BaseModel):
    """Base model for CLI output envelopes (camelCase aliases on the wire)."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class ErrorInfo(CLIModel):
    type: str
    message: str
    hint: str | None = None
    details: dict[str, Any] | None = None


class CommandMeta(CLIModel):
    duration_ms: int = Field(..., alias="durationMs")
    filter: str | None = None


class CommandResult(CLIModel):
    ok: bool
    command: str
    data: Any | None = None
    warnings: list[str] = Field(default_factory=list)
    meta: CommandMeta
    error: ErrorInfo | None = None


class SegmentInfo(CLIModel):
    """One parsed path segment, as reported by `treefilter parse`."""

    index: int
    expression: str
    kind: str
    match_all_below: bool = Field(False, alias="matchAllBelow")


class PathMatch(CLIModel):
    """Outcome for a single path, as reported by `treefilter match`."""

    path: str
    matched: bool
