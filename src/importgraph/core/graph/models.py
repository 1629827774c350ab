"""Dependency graph snapshot and the value types shared by the engines.

The ``DependencyGraph`` is the immutable result of a build: a mapping from
each resolved file identity to the frozen set of files it directly imports,
plus the entry points the build started from. It is produced once by
``GraphStore.snapshot()`` and never mutated afterwards.
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Hashable, Iterator, Mapping, Sequence
from enum import Enum
from types import MappingProxyType

from importgraph.core.graph.cycles import (
    find_cycles,
    strongly_connected_components,
)
from importgraph.exceptions import UnknownFileError

# Canonical, resolver-produced handle for a source file. The bundled
# filesystem resolver uses absolute POSIX path strings, but the engines only
# rely on equality and hashing.
FileIdentity = Hashable


class FailurePolicy(Enum):
    """What a build does when a visit fails.

    FAIL_FAST aborts the traversal and raises the first error. COLLECT_ALL
    keeps visiting independent branches and raises a single
    ``DependencyGraphBuildError`` listing every failure.
    """

    FAIL_FAST = "fail-fast"
    COLLECT_ALL = "collect-all"

    @classmethod
    def parse(cls, value: str | FailurePolicy) -> FailurePolicy:
        """Accept either a member or its CLI/config spelling."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "-")
        for member in cls:
            if member.value == normalized:
                return member
        choices = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown failure policy {value!r} (expected one of: {choices})")


class FileState(Enum):
    """Lifecycle of an admitted file. There is no transition back to PENDING."""

    PENDING = "pending"
    COMPLETE = "complete"
    FAILED = "failed"


class DependencyGraph:
    """Immutable mapping from file identity to its direct dependencies.

    Iteration, ``resolved_files()`` and ``to_dict()`` follow admission
    order, which is deterministic for the sequential engine.
    """

    def __init__(
        self,
        dependencies: Mapping[FileIdentity, frozenset[FileIdentity]],
        entry_points: Sequence[FileIdentity] = (),
    ) -> None:
        self._dependencies = MappingProxyType(dict(dependencies))
        self._entry_points = tuple(entry_points)

    @property
    def entry_points(self) -> tuple[FileIdentity, ...]:
        """The (resolved) entry points the build started from."""
        return self._entry_points

    def resolved_files(self) -> tuple[FileIdentity, ...]:
        """Return every admitted file, in admission order."""
        return tuple(self._dependencies)

    def dependencies_of(self, file: FileIdentity) -> frozenset[FileIdentity]:
        """Return the direct dependencies of ``file``.

        Raises:
            UnknownFileError: If ``file`` was never admitted.
        """
        try:
            return self._dependencies[file]
        except KeyError:
            raise UnknownFileError(file) from None

    def dependents_of(self, file: FileIdentity) -> frozenset[FileIdentity]:
        """Return the files that import ``file`` directly."""
        if file not in self._dependencies:
            raise UnknownFileError(file)
        return frozenset(
            source for source, deps in self._dependencies.items() if file in deps
        )

    def edges(self) -> Iterator[tuple[FileIdentity, FileIdentity]]:
        """Yield every ``(file, dependency)`` pair."""
        for source, deps in self._dependencies.items():
            for dep in deps:
                yield source, dep

    def transitive_dependencies(self, file: FileIdentity) -> frozenset[FileIdentity]:
        """Compute every file reachable from ``file`` through import edges.

        Uses BFS over the dependency edges. The file itself is included only
        when it sits on a cycle.
        """
        if file not in self._dependencies:
            raise UnknownFileError(file)
        reached: set[FileIdentity] = set()
        queue: deque[FileIdentity] = deque([file])
        while queue:
            current = queue.popleft()
            for dep in self._dependencies.get(current, ()):
                if dep not in reached:
                    reached.add(dep)
                    queue.append(dep)
        return frozenset(reached)

    def find_cycles(self) -> list[list[FileIdentity]]:
        """Return every import cycle as a strongly connected component.

        A component counts as a cycle if it has more than one file, or a
        single file that imports itself.
        """
        return find_cycles(self._dependencies)

    @property
    def has_cycles(self) -> bool:
        return bool(self.find_cycles())

    def compilation_order(self) -> list[list[FileIdentity]]:
        """Group files so that every group's dependencies come before it.

        Each group is a strongly connected component; groups with more than
        one file must be compiled together.
        """
        return strongly_connected_components(self._dependencies)

    def reverse(self) -> dict[FileIdentity, set[FileIdentity]]:
        """Build the reverse adjacency map (file -> direct dependents)."""
        reverse: dict[FileIdentity, set[FileIdentity]] = defaultdict(set)
        for source, dep in self.edges():
            reverse[dep].add(source)
        return {file: set(reverse.get(file, ())) for file in self._dependencies}

    def to_dict(self) -> dict[str, list[str]]:
        """Serialize to ``{file: sorted dependencies}`` for JSON output."""
        return {
            str(file): sorted(str(dep) for dep in deps)
            for file, deps in self._dependencies.items()
        }

    def __contains__(self, file: object) -> bool:
        return file in self._dependencies

    def __iter__(self) -> Iterator[FileIdentity]:
        return iter(self._dependencies)

    def __len__(self) -> int:
        return len(self._dependencies)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DependencyGraph):
            return NotImplemented
        return dict(self._dependencies) == dict(other._dependencies)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        edge_count = sum(len(deps) for deps in self._dependencies.values())
        return f"DependencyGraph(files={len(self)}, edges={edge_count})"
