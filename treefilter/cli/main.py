from __future__ import annotations

from pathlib import Path

import click
import rich_click

import treefilter

from .context import CLIContext
from .logging import configure_logging, restore_logging


@click.group(
    name="treefilter",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=rich_click.RichGroup,
)
@click.option(
    "--output",
    type=click.Choice(["table", "json"]),
    default="table",
    envvar="TREEFILTER_OUTPUT",
    show_envvar=True,
)
@click.option("--json", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential stderr output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    envvar="TREEFILTER_LOG_FILE",
    help="Also write debug logs to this file.",
)
@click.version_option(version=treefilter.__version__, prog_name="treefilter")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    output: str,
    json_flag: bool,
    quiet: bool,
    verbose: int,
    log_file: str | None,
) -> None:
    """Select nodes of a slash-delimited hierarchy with tree node filters."""
    if click_ctx.invoked_subcommand is None:
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(0)

    out = "json" if json_flag else output
    effective_log_file = Path(log_file) if log_file else None

    click_ctx.obj = CLIContext(
        output=out,  # type: ignore[arg-type]
        quiet=quiet,
        verbosity=verbose,
        log_file=effective_log_file,
        enable_log_file=effective_log_file is not None,
    )

    previous_logging = configure_logging(
        verbosity=verbose,
        log_file=effective_log_file,
        enable_file=effective_log_file is not None,
    )
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


# Register commands
from .commands.match_cmd import match_cmd as _match_cmd  # noqa: E402
from .commands.parse_cmd import parse_cmd as _parse_cmd  # noqa: E402
from .commands.version_cmd import version_cmd as _version_cmd  # noqa: E402

cli.add_command(_version_cmd)
cli.add_command(_parse_cmd)
cli.add_command(_match_cmd)


def main() -> None:
    cli()
