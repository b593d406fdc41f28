from __future__ import annotations

import logging

import click
import rich_click

from treefilter import TreeNodeFilter

from ..context import CLIContext
from ..options import output_options, parse_property_args, property_options
from ..results import PathMatch
from ..runner import CommandOutput, run_command

logger = logging.getLogger(__name__)


def _read_paths_from_stdin() -> list[str]:
    stream = click.get_text_stream("stdin")
    return [line.strip() for line in stream if line.strip()]


@click.command(name="match", cls=rich_click.RichCommand)
@click.option(
    "-f",
    "--filter",
    "filter_string",
    required=True,
    envvar="TREEFILTER_FILTER",
    show_envvar=True,
    help="Tree node filter, e.g. '/Asm/Ns/(A|B)/**'.",
)
@click.argument("paths", nargs=-1)
@property_options
@click.option("--matched-only", is_flag=True, help="Only report paths that matched.")
@output_options
@click.pass_obj
def match_cmd(
    ctx: CLIContext,
    filter_string: str,
    paths: tuple[str, ...],
    properties: tuple[str, ...],
    *,
    matched_only: bool,
) -> None:
    """Evaluate node PATHS against a filter.

    Reads paths from stdin, one per line, when none are given. Exits with 1 when
    no path matched.
    """

    def fn(_: CLIContext, warnings: list[str]) -> CommandOutput:
        node_filter = TreeNodeFilter(filter_string)
        bag = parse_property_args(properties)
        candidates = list(paths) if paths else _read_paths_from_stdin()
        if not candidates:
            warnings.append("No paths given.")

        results = []
        matched = 0
        for path in candidates:
            ok = node_filter.matches(path, bag)
            matched += ok
            if ok or not matched_only:
                results.append(PathMatch(path=path, matched=ok).model_dump(by_alias=True))
        logger.info(f"{matched} of {len(candidates)} path(s) matched {filter_string!r}")

        return CommandOutput(
            data={
                "filter": node_filter.filter,
                "results": results,
                "matched": matched,
                "total": len(candidates),
            },
            filter=node_filter.filter,
            exit_code=0 if matched else 1,
        )

    run_command(ctx, command="match", fn=fn)
