"""``importgraph cycles [ENTRY]...`` -- Report import cycles.

The graph builder accepts cycles; this command is for projects that treat
them as fatal.

Exit Codes:
    0 -- No cycles.
    1 -- At least one cycle found, or the build failed.
    2 -- Invalid configuration or no entry points.
"""

from __future__ import annotations

import sys

import click

from importgraph.cli.common import (
    EXIT_FAILURE,
    EXIT_OK,
    build_options,
    build_or_exit,
    resolve_config,
)


@click.command("cycles")
@build_options
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def cycles_command(output_format: str, **options: object) -> None:
    """Find import cycles among the files reachable from ENTRY_POINTS.

    A cycle is a group of files that import each other, directly or
    transitively, or a single file that imports itself.
    """
    from importgraph.cli.output import print_cycles, print_json

    config = resolve_config(**options)  # type: ignore[arg-type]
    graph = build_or_exit(config)
    cycles = graph.find_cycles()

    if output_format == "json":
        print_json({"cycles": [[str(f) for f in c] for c in cycles]})
    else:
        print_cycles(cycles, config.project_root)
    sys.exit(EXIT_FAILURE if cycles else EXIT_OK)
