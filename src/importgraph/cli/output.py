"""Rich output formatting helpers for the importgraph CLI.

Paths inside the project root are shown relative to it; everything else
(library files outside the root, for instance) is shown in full.
"""

from __future__ import annotations

import json
from collections.abc import Hashable
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from importgraph.core.graph import DependencyGraph
from importgraph.exceptions import (
    DependencyGraphBuildError,
    ExtractionError,
    ImportGraphError,
    ResolutionError,
)

console = Console()
err_console = Console(stderr=True)


def display_path(file: Hashable, root: Path | None = None) -> str:
    """Render a file identity for humans, relative to ``root`` when possible."""
    if root is None:
        return str(file)
    try:
        return Path(str(file)).relative_to(root).as_posix()
    except ValueError:
        return str(file)


def print_graph(graph: DependencyGraph, root: Path | None = None) -> None:
    """Print one row per resolved file with its direct imports.

    Args:
        graph: The built dependency graph.
        root: Project root used to shorten paths.
    """
    if not len(graph):
        console.print("[dim]No files resolved.[/dim]")
        return

    dependents = graph.reverse()
    entries = set(graph.entry_points)
    table = Table(title="Dependency Graph", show_header=True, header_style="bold")
    table.add_column("File", style="bold")
    table.add_column("Imports")
    table.add_column("Imported by", justify="right")

    for file in graph.resolved_files():
        name = Text(display_path(file, root))
        if file in entries:
            name.append(" (entry)", style="cyan")
        deps = sorted(display_path(d, root) for d in graph.dependencies_of(file))
        table.add_row(
            name,
            "\n".join(deps) if deps else Text("-", style="dim"),
            str(len(dependents[file])),
        )

    console.print(table)
    _print_graph_summary(graph)


def _print_graph_summary(graph: DependencyGraph) -> None:
    """Print a one-line summary after the graph table."""
    edges = sum(1 for _ in graph.edges())
    cycles = graph.find_cycles()
    parts = [
        f"[bold]{len(graph)}[/bold] files",
        f"{edges} imports",
        f"{len(graph.entry_points)} entry points",
    ]
    if cycles:
        parts.append(f"[yellow]{len(cycles)} cycles[/yellow]")
    else:
        parts.append("[green]no cycles[/green]")
    console.print(" | ".join(parts))


def print_cycles(cycles: list[list[Hashable]], root: Path | None = None) -> None:
    """Print every import cycle, one panel line per cycle."""
    if not cycles:
        console.print(
            Panel("[bold green]No import cycles[/bold green]", title="Cycle Check")
        )
        return

    console.print(
        Panel(f"[bold yellow]{len(cycles)} import cycle(s)[/bold yellow]", title="Cycle Check")
    )
    for number, cycle in enumerate(cycles, start=1):
        members = [display_path(file, root) for file in cycle]
        if len(members) == 1:
            line = Text.assemble((f"  {number}. ", "yellow"), members[0], " imports itself")
        else:
            line = Text.assemble((f"  {number}. ", "yellow"), ", ".join(members))
        console.print(line)


def print_order(groups: list[list[Hashable]], root: Path | None = None) -> None:
    """Print the compilation order, dependencies first."""
    table = Table(title="Compilation Order", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("File(s)")
    for number, group in enumerate(groups, start=1):
        names = [display_path(file, root) for file in group]
        cell: Text | str = "\n".join(names)
        if len(group) > 1:
            cell = Text("\n".join(names), style="yellow")
        table.add_row(str(number), cell)
    console.print(table)


def print_build_errors(error: ImportGraphError, root: Path | None = None) -> None:
    """Print a failed build with file, specifier and cause for each error."""
    if isinstance(error, DependencyGraphBuildError):
        errors: list[ImportGraphError] = list(error.errors)
    else:
        errors = [error]

    err_console.print(
        Panel(
            f"[bold red]Build failed with {len(errors)} error(s)[/bold red]",
            title="Dependency Graph",
        )
    )
    for item in errors:
        err_console.print(Text(f"  - {_describe(item, root)}", style="red"))


def _describe(error: ImportGraphError, root: Path | None) -> str:
    if isinstance(error, ResolutionError):
        if error.source_file is None:
            where = "entry point"
        else:
            where = display_path(error.source_file, root)
        detail = f"{where}: cannot resolve {error.specifier!r}"
        cause = error.cause
    elif isinstance(error, ExtractionError):
        detail = f"{display_path(error.file, root)}: cannot read imports"
        cause = error.cause
    else:
        return str(error)
    if cause is not None:
        detail += f" ({str(cause) or type(cause).__name__})"
    elif str(error):
        detail += f" ({str(error).rsplit(': ', 1)[-1]})"
    return detail


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout.

    Args:
        data: Any JSON-serializable data structure.
    """
    console.print_json(json.dumps(data, default=str))
