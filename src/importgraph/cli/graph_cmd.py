"""``importgraph graph [ENTRY]...`` -- Build and display the dependency graph.

Exit Codes:
    0 -- Graph built successfully.
    1 -- Build failed (unresolvable import or unreadable file).
    2 -- Invalid configuration or no entry points.
"""

from __future__ import annotations

import sys

import click

from importgraph.cli.common import EXIT_OK, build_options, build_or_exit, resolve_config


@click.command("graph")
@build_options
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def graph_command(output_format: str, **options: object) -> None:
    """Discover every file reachable from ENTRY_POINTS and list its imports.

    Examples:

        importgraph graph contracts/Token.sol

        importgraph graph --lib node_modules --format json contracts/*.sol
    """
    from importgraph.cli.output import print_graph, print_json

    config = resolve_config(**options)  # type: ignore[arg-type]
    graph = build_or_exit(config)

    if output_format == "json":
        print_json(
            {
                "entry_points": [str(e) for e in graph.entry_points],
                "files": graph.to_dict(),
                "cycles": [[str(f) for f in c] for c in graph.find_cycles()],
            }
        )
    else:
        print_graph(graph, config.project_root)
    sys.exit(EXIT_OK)
