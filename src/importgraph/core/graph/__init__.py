"""Source dependency graph construction.

All public names are re-exported here so callers can write
``from importgraph.core.graph import build, DependencyGraph``.

Components
----------
- ``GraphStore`` -- admitted files and their dependency sets; the source of
  truth for "has this file been visited".
- ``DependencyGraphBuilder`` / ``build`` -- sequential depth-first traversal.
- ``ConcurrentGraphBuilder`` / ``build_async`` -- asyncio traversal.
- ``DependencyGraph`` -- the immutable result.
- ``find_cycles`` / ``strongly_connected_components`` -- cycle analysis.
"""

from importgraph.core.graph.builder import DependencyGraphBuilder, build
from importgraph.core.graph.concurrent import ConcurrentGraphBuilder, build_async
from importgraph.core.graph.cycles import find_cycles, strongly_connected_components
from importgraph.core.graph.models import (
    DependencyGraph,
    FailurePolicy,
    FileIdentity,
    FileState,
)
from importgraph.core.graph.store import GraphStore

__all__ = [
    "ConcurrentGraphBuilder",
    "DependencyGraph",
    "DependencyGraphBuilder",
    "FailurePolicy",
    "FileIdentity",
    "FileState",
    "GraphStore",
    "build",
    "build_async",
    "find_cycles",
    "strongly_connected_components",
]
