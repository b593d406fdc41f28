from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import click

from treefilter import KeyValuePairProperty, PropertyBag

from .context import CLIContext
from .errors import UsageError

F = TypeVar("F", bound=Callable[..., object])


def _override_output(ctx: click.Context, param: click.Parameter, value: object) -> object:
    # --output table|json and the --json flag both land here
    if not value:
        return value
    obj = ctx.obj
    if isinstance(obj, CLIContext):
        obj.output = "json" if param.name == "json_flag" else value  # type: ignore[assignment]
    return value


def output_options(fn: F) -> F:
    """Let a subcommand override the group's output format, e.g. `parse X --json`."""
    fn = click.option(
        "--output",
        type=click.Choice(["table", "json"]),
        default=None,
        help="Override output format for this command.",
        callback=_override_output,
        expose_value=False,
    )(fn)
    fn = click.option(
        "--json",
        "json_flag",
        is_flag=True,
        help="Alias for --output json.",
        callback=_override_output,
        expose_value=False,
    )(fn)
    return fn


def property_options(fn: F) -> F:
    return click.option(
        "-p",
        "--property",
        "properties",
        multiple=True,
        metavar="KEY=VALUE",
        help="Node property (repeatable). Applies to every path.",
    )(fn)


def parse_property_args(values: tuple[str, ...]) -> PropertyBag:
    """Turn repeated `-p KEY=VALUE` arguments into a PropertyBag.

    The value may be empty or contain further `=`; the key may not be empty.
    """
    props: list[KeyValuePairProperty] = []
    for raw in values:
        key, sep, value = raw.partition("=")
        if not sep or not key:
            raise UsageError(
                f"Invalid property {raw!r}: expected KEY=VALUE.",
                details={"property": raw},
            )
        props.append(KeyValuePairProperty(key, value))
    return PropertyBag(props)
