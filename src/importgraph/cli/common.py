"""Options and build plumbing shared by the importgraph subcommands.

Every subcommand builds a graph the same way: load ``importgraph.yaml`` (if
any), apply command-line overrides, wire a ``FileSystemResolver`` and the
default extractor registry, and run the sequential or concurrent engine.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from importgraph.config import ImportGraphConfig, find_config, load_config
from importgraph.core.graph import DependencyGraph, build, build_async
from importgraph.exceptions import ConfigError, ImportGraphError
from importgraph.sources import FileSystemResolver, default_registry

F = TypeVar("F", bound=Callable[..., Any])

# Exit codes shared by all subcommands.
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _parse_remaps(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str] | None:
    if not values:
        return None
    remaps: dict[str, str] = {}
    for value in values:
        prefix, sep, target = value.partition("=")
        if not sep or not prefix:
            raise click.BadParameter(f"expected PREFIX=TARGET, got {value!r}")
        remaps[prefix] = target
    return remaps


def build_options(func: F) -> F:
    """Attach the options every graph-building subcommand accepts."""
    decorators = [
        click.argument("entry_points", nargs=-1),
        click.option(
            "--config", "config_path",
            type=click.Path(exists=True, dir_okay=False),
            default=None,
            help="Configuration file (default: importgraph.yaml in --root).",
        ),
        click.option(
            "--root",
            type=click.Path(exists=True, file_okay=False),
            default=None,
            help="Project root (default: config file directory or cwd).",
        ),
        click.option(
            "--lib", "library_paths",
            multiple=True,
            help="Library directory searched for bare imports (repeatable).",
        ),
        click.option(
            "--remap", "remappings",
            multiple=True,
            callback=_parse_remaps,
            help="Import prefix rewrite PREFIX=TARGET (repeatable).",
        ),
        click.option(
            "--search-source-dir/--no-search-source-dir",
            default=None,
            help="Search the importing file's directory for bare imports.",
        ),
        click.option(
            "--policy",
            type=click.Choice(["fail-fast", "collect-all"]),
            default=None,
            help="Stop at the first error or report all of them.",
        ),
        click.option(
            "--jobs", "-j",
            type=click.IntRange(min=0),
            default=None,
            help="Concurrent collaborator calls; 0 builds sequentially.",
        ),
        click.option(
            "--timeout",
            type=click.FloatRange(min=0, min_open=True),
            default=None,
            help="Seconds allowed per file read or import lookup (with --jobs).",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def resolve_config(
    entry_points: tuple[str, ...],
    config_path: str | None,
    root: str | None,
    library_paths: tuple[str, ...],
    remappings: dict[str, str] | None,
    search_source_dir: bool | None,
    policy: str | None,
    jobs: int | None,
    timeout: float | None,
) -> ImportGraphConfig:
    """Merge the configuration file with command-line overrides.

    Exits with code 2 if the configuration is invalid or no entry points
    are given anywhere.
    """
    try:
        path = Path(config_path) if config_path else find_config(root or Path.cwd())
        config = load_config(path) if path is not None else ImportGraphConfig()
        config = config.with_overrides(
            project_root=Path(root).resolve() if root else None,
            entry_points=entry_points or None,
            library_paths=library_paths or None,
            remappings=remappings,
            search_source_dir=search_source_dir,
            policy=policy,
            jobs=jobs,
            timeout=timeout,
        )
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_USAGE)

    if not config.entry_points:
        click.echo(
            "Error: no entry points given on the command line or in the configuration.",
            err=True,
        )
        sys.exit(EXIT_USAGE)
    return config


def build_graph(config: ImportGraphConfig) -> DependencyGraph:
    """Build the dependency graph described by ``config``.

    Raises:
        ImportGraphError: Any build failure, for the caller to report.
    """
    resolver = FileSystemResolver(
        project_root=config.project_root,
        library_paths=config.library_paths,
        remappings=config.remappings,
        search_source_dir=config.search_source_dir,
    )
    extractor = default_registry()
    if config.concurrent:
        return asyncio.run(
            build_async(
                resolver,
                extractor,
                config.entry_points,
                config.policy,
                max_concurrency=config.jobs,
                timeout=config.timeout,
            )
        )
    return build(resolver, extractor, config.entry_points, config.policy)


def build_or_exit(config: ImportGraphConfig) -> DependencyGraph:
    """Build the graph, printing the errors and exiting 1 on failure."""
    from importgraph.cli.output import print_build_errors

    try:
        return build_graph(config)
    except ImportGraphError as exc:
        print_build_errors(exc, config.project_root)
        sys.exit(EXIT_FAILURE)
