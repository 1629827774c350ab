"""importgraph CLI -- Source dependency graphs for compilers and bundlers.

Entry point for the ``importgraph`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    graph   -- Build the dependency graph and list every file's imports.
    cycles  -- Report import cycles (exit 1 if any).
    order   -- Print a dependencies-first compilation order.

Usage::

    importgraph graph contracts/Token.sol
    importgraph graph --lib node_modules --remap @oz/=node_modules/@openzeppelin/ contracts/Token.sol
    importgraph cycles --policy collect-all src/main.c
    importgraph order --jobs 8 contracts/Token.sol
    importgraph -v graph                     # entry points from importgraph.yaml
"""

from __future__ import annotations

import logging

import click
from rich.logging import RichHandler

from importgraph import __version__
from importgraph.cli.cycles_cmd import cycles_command
from importgraph.cli.graph_cmd import graph_command
from importgraph.cli.order_cmd import order_command
from importgraph.cli.output import err_console


def _configure_logging(verbosity: int) -> None:
    if verbosity == 0:
        return
    level = logging.INFO if verbosity == 1 else logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", count=True, help="-v for progress, -vv for every import.")
def cli(verbose: int) -> None:
    """importgraph: Source dependency graphs for compilers and bundlers.

    Discovers every file reachable from a set of entry points through
    import and include statements, and reports the graph, its cycles,
    and a compilation order.
    """
    _configure_logging(verbose)


# Register all subcommands
cli.add_command(graph_command)
cli.add_command(cycles_command)
cli.add_command(order_command)
