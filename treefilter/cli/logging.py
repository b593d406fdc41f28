"""
Logging setup for the CLI.

Library modules only create loggers; handlers are attached here, for the
duration of a single CLI invocation, and removed again afterwards.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGER_NAME = "treefilter"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class LoggingState:
    level: int
    propagate: bool
    handlers: list[logging.Handler] = field(default_factory=list)
    added: list[logging.Handler] = field(default_factory=list)


def _level_for_verbosity(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(
    *,
    verbosity: int,
    log_file: Path | None,
    enable_file: bool = True,
) -> LoggingState:
    """Attach stderr (and optional file) handlers to the package logger.

    Returns the previous logger state for restore_logging().
    """
    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    previous = LoggingState(
        level=logger.level,
        propagate=logger.propagate,
        handlers=list(logger.handlers),
    )

    level = _level_for_verbosity(verbosity)
    console_handler = RichHandler(
        console=Console(file=sys.stderr, force_terminal=False),
        show_time=False,
        show_path=verbosity >= 2,
        rich_tracebacks=False,
    )
    console_handler.setLevel(level)
    previous.added.append(console_handler)

    if enable_file and log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        previous.added.append(file_handler)

    logger.handlers = list(previous.added)
    logger.setLevel(min(h.level for h in previous.added))
    logger.propagate = False
    return previous


def restore_logging(state: LoggingState) -> None:
    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    for handler in state.added:
        handler.close()
    logger.handlers = list(state.handlers)
    logger.setLevel(state.level)
    logger.propagate = state.propagate
