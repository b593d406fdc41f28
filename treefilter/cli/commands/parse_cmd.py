from __future__ import annotations

import click
import rich_click

from treefilter import TreeNodeFilter, ValueExpression

from ..context import CLIContext
from ..options import output_options
from ..results import SegmentInfo
from ..runner import CommandOutput, run_command


@click.command(name="parse", cls=rich_click.RichCommand)
@click.argument("filter_string", metavar="FILTER")
@output_options
@click.pass_obj
def parse_cmd(ctx: CLIContext, filter_string: str) -> None:
    """Parse and validate FILTER, showing the expression for each path segment."""

    def fn(_: CLIContext, warnings: list[str]) -> CommandOutput:
        node_filter = TreeNodeFilter(filter_string)
        segments = [
            SegmentInfo(
                index=index,
                expression=segment.to_string(),
                kind=type(segment).__name__,
                match_all_below=isinstance(segment, ValueExpression)
                and segment.is_match_all_below,
            ).model_dump(by_alias=True)
            for index, segment in enumerate(node_filter.segments)
        ]
        if not filter_string.startswith("/"):
            warnings.append(
                "Filter does not start with '/'; segments are still matched from the root."
            )
        return CommandOutput(
            data={"filter": node_filter.filter, "segments": segments},
            filter=node_filter.filter,
        )

    run_command(ctx, command="parse", fn=fn)
