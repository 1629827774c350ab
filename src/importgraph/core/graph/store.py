"""Graph store: the mutable state behind a dependency graph build.

The store records which files have been *admitted* for processing and the
dependency set of each. Admission happens before a file's imports are
explored, which is what lets the traversal engines break import cycles: a
later visit that reaches the same file sees it admitted and does not
recurse.

``try_admit`` is the single correctness-critical primitive. It is an atomic
check-and-set, so two concurrent visits that discover the same dependency
cannot both decide they are the first to process it. All mutators hold the
same lock, so the store may be shared between asyncio tasks and worker
threads alike.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable

from importgraph.core.graph.models import (
    DependencyGraph,
    FileIdentity,
    FileState,
)
from importgraph.exceptions import GraphStoreError, UnknownFileError


class GraphStore:
    """Admission registry and per-file dependency sets.

    Dependency sets are kept as insertion-ordered dicts so that debug output
    follows the declared import order; snapshots expose them as frozensets.
    Entries are only ever added, never removed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._dependencies: dict[FileIdentity, dict[FileIdentity, None]] = {}
        self._states: dict[FileIdentity, FileState] = {}

    def is_admitted(self, file: FileIdentity) -> bool:
        """Return True once ``file`` has been admitted, even if still pending."""
        with self._lock:
            return file in self._dependencies

    def try_admit(self, file: FileIdentity) -> bool:
        """Admit ``file`` if it is not admitted yet.

        Returns:
            True if this call performed the admission, False if the file was
            already admitted.
        """
        with self._lock:
            if file in self._dependencies:
                return False
            self._dependencies[file] = {}
            self._states[file] = FileState.PENDING
            return True

    def admit(self, file: FileIdentity) -> None:
        """Admit ``file`` with an empty dependency set. Idempotent."""
        self.try_admit(file)

    def add_dependency(self, file: FileIdentity, dependency: FileIdentity) -> None:
        """Record the edge ``file -> dependency``.

        Raises:
            GraphStoreError: If ``file`` was never admitted.
        """
        with self._lock:
            deps = self._dependencies.get(file)
            if deps is None:
                raise GraphStoreError(
                    f"Cannot add dependency {dependency} to unadmitted file {file}"
                )
            deps[dependency] = None

    def mark_complete(self, file: FileIdentity) -> None:
        self._transition(file, FileState.COMPLETE)

    def mark_failed(self, file: FileIdentity) -> None:
        self._transition(file, FileState.FAILED)

    def _transition(self, file: FileIdentity, state: FileState) -> None:
        with self._lock:
            current = self._states.get(file)
            if current is None:
                raise GraphStoreError(f"Cannot mark unadmitted file {file} as {state.value}")
            if current is not FileState.PENDING:
                raise GraphStoreError(
                    f"File {file} is already {current.value}; cannot mark {state.value}"
                )
            self._states[file] = state

    def state_of(self, file: FileIdentity) -> FileState:
        """Return the lifecycle state of an admitted file.

        Raises:
            UnknownFileError: If ``file`` was never admitted.
        """
        with self._lock:
            try:
                return self._states[file]
            except KeyError:
                raise UnknownFileError(file) from None

    def dependencies_of(self, file: FileIdentity) -> tuple[FileIdentity, ...]:
        """Return the dependencies recorded so far, in insertion order."""
        with self._lock:
            try:
                return tuple(self._dependencies[file])
            except KeyError:
                raise UnknownFileError(file) from None

    def resolved_files(self) -> tuple[FileIdentity, ...]:
        """Return every admitted file, in admission order."""
        with self._lock:
            return tuple(self._dependencies)

    def snapshot(
        self,
        entry_points: Iterable[FileIdentity] = (),
        *,
        only_complete: bool = False,
    ) -> DependencyGraph:
        """Freeze the store into an immutable ``DependencyGraph``.

        Args:
            entry_points: Resolved entry points to record on the graph.
            only_complete: Keep only files whose visit completed. Used for
                the partial graph of a failed collect-all build.
        """
        with self._lock:
            frozen = {
                file: frozenset(deps)
                for file, deps in self._dependencies.items()
                if not only_complete or self._states[file] is FileState.COMPLETE
            }
        entries = [e for e in entry_points if e in frozen]
        return DependencyGraph(frozen, entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._dependencies)
