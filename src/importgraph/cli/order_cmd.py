"""``importgraph order [ENTRY]...`` -- Print a compilation order.

Each line is a group of files whose dependencies all appear on earlier
lines. A group with several files is an import cycle; its members have to be
compiled together.

Exit Codes:
    0 -- Order printed.
    1 -- Build failed.
    2 -- Invalid configuration or no entry points.
"""

from __future__ import annotations

import sys

import click

from importgraph.cli.common import EXIT_OK, build_options, build_or_exit, resolve_config


@click.command("order")
@build_options
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def order_command(output_format: str, **options: object) -> None:
    """Print the files reachable from ENTRY_POINTS, dependencies first."""
    from importgraph.cli.output import print_json, print_order

    config = resolve_config(**options)  # type: ignore[arg-type]
    graph = build_or_exit(config)
    groups = graph.compilation_order()

    if output_format == "json":
        print_json({"order": [[str(f) for f in group] for group in groups]})
    else:
        print_order(groups, config.project_root)
    sys.exit(EXIT_OK)
