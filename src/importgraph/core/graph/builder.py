"""Sequential traversal engine: depth-first discovery with immediate admission.

Algorithm
---------
For each entry point that is not admitted yet, a *visit* begins:

1. Admit the file in the ``GraphStore`` before doing any other work on it.
   This is the cycle-breaking step: a later visit that reaches the file again
   finds it admitted and does not descend.
2. Ask the extractor for the file's import specifiers.
3. For each specifier, in declared order, resolve it, record the edge, and if
   the dependency was not admitted yet, visit it before moving on to the next
   specifier.

The recursion of step 3 is carried on an explicit stack of frames, one per
file being visited, each holding an iterator over the file's remaining
specifiers. The visit order is exactly that of the recursive formulation,
but a deep import chain costs heap memory instead of interpreter stack.

Failures
--------
A failed extraction or resolution fails that file's visit and abandons its
remaining specifiers. Under ``FailurePolicy.FAIL_FAST`` the error propagates
immediately and no graph is returned. Under ``FailurePolicy.COLLECT_ALL`` the
error is recorded, traversal continues with the parent file's next
specifier, and a ``DependencyGraphBuildError`` listing every error is raised
at the end.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from importgraph.core.graph.models import (
    DependencyGraph,
    FailurePolicy,
    FileIdentity,
)
from importgraph.core.graph.store import GraphStore
from importgraph.exceptions import (
    DependencyGraphBuildError,
    ExtractionError,
    ResolutionError,
)
from importgraph.sources.base import ImportExtractor, ImportResolver

logger = logging.getLogger(__name__)

BuildFailure = ExtractionError | ResolutionError


# ---------------------------------------------------------------------------
# Collaborator calls with error normalization
# ---------------------------------------------------------------------------


def _reject_awaitable(result: object, method: object) -> None:
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise TypeError(
            f"{getattr(method, '__qualname__', method)} is asynchronous; "
            "use build_async() for async collaborators"
        )


def extract_imports(extractor: ImportExtractor, file: FileIdentity) -> list[str]:
    """Call the extractor, normalizing any failure into ``ExtractionError``."""
    try:
        specifiers = extractor.get_imports(file)
    except ExtractionError:
        raise
    except Exception as exc:
        raise ExtractionError(file, exc) from exc
    _reject_awaitable(specifiers, extractor.get_imports)
    return list(specifiers)


def resolve_import(
    resolver: ImportResolver, source_file: FileIdentity, specifier: str
) -> FileIdentity:
    """Call the resolver, normalizing any failure into ``ResolutionError``."""
    try:
        dependency = resolver.resolve_import(source_file, specifier)
    except ResolutionError:
        raise
    except Exception as exc:
        raise ResolutionError(source_file, specifier, exc) from exc
    _reject_awaitable(dependency, resolver.resolve_import)
    return dependency


def resolve_entry_point(resolver: ImportResolver, locator: FileIdentity) -> FileIdentity:
    """Normalize an entry point through the resolver."""
    try:
        entry = resolver.resolve_entry_point(locator)
    except ResolutionError:
        raise
    except Exception as exc:
        raise ResolutionError(None, str(locator), exc) from exc
    _reject_awaitable(entry, resolver.resolve_entry_point)
    return entry


# ---------------------------------------------------------------------------
# DependencyGraphBuilder
# ---------------------------------------------------------------------------


@dataclass
class _Frame:
    """A file whose visit is in progress and the specifiers it has left."""

    file: FileIdentity
    pending: Iterator[str]


class DependencyGraphBuilder:
    """Builds a ``DependencyGraph`` one file at a time.

    A builder holds no per-build state; ``build()`` may be called repeatedly
    and always starts from a fresh ``GraphStore``.

    Args:
        resolver: Maps specifiers to file identities.
        extractor: Lists the import specifiers of a file.
        policy: Failure policy, as a ``FailurePolicy`` or its string value.
    """

    def __init__(
        self,
        resolver: ImportResolver,
        extractor: ImportExtractor,
        policy: FailurePolicy | str = FailurePolicy.FAIL_FAST,
    ) -> None:
        self._resolver = resolver
        self._extractor = extractor
        self._policy = FailurePolicy.parse(policy)

    @property
    def policy(self) -> FailurePolicy:
        return self._policy

    def build(self, entry_points: Iterable[FileIdentity]) -> DependencyGraph:
        """Discover every file reachable from ``entry_points``.

        Args:
            entry_points: File identities or raw locators, processed in order.

        Returns:
            The complete, immutable dependency graph.

        Raises:
            ExtractionError: First extraction failure (fail-fast).
            ResolutionError: First resolution failure (fail-fast).
            DependencyGraphBuildError: Every failure, plus the partial graph
                of completed files (collect-all).
        """
        store = GraphStore()
        errors: list[BuildFailure] = []
        entries: list[FileIdentity] = []

        for locator in entry_points:
            try:
                entry = resolve_entry_point(self._resolver, locator)
            except ResolutionError as exc:
                self._record(exc, errors)
                continue
            if entry not in entries:
                entries.append(entry)
            if store.try_admit(entry):
                logger.debug("Visiting entry point %s", entry)
                self._visit(store, entry, errors)

        if errors:
            logger.info(
                "Dependency graph build failed: %d error(s), %d file(s) admitted",
                len(errors),
                len(store),
            )
            raise DependencyGraphBuildError(
                errors, store.snapshot(entries, only_complete=True)
            )

        graph = store.snapshot(entries)
        logger.info("Built %r from %d entry point(s)", graph, len(entries))
        return graph

    def _visit(
        self, store: GraphStore, root: FileIdentity, errors: list[BuildFailure]
    ) -> None:
        """Depth-first visit of ``root``, which the caller has just admitted."""
        stack: list[_Frame] = []
        frame = self._open(store, root, errors)
        if frame is not None:
            stack.append(frame)

        while stack:
            frame = stack[-1]
            specifier = next(frame.pending, None)
            if specifier is None:
                stack.pop()
                store.mark_complete(frame.file)
                continue

            try:
                dependency = resolve_import(self._resolver, frame.file, specifier)
            except ResolutionError as exc:
                stack.pop()
                store.mark_failed(frame.file)
                self._record(exc, errors)
                continue

            store.add_dependency(frame.file, dependency)
            logger.debug("%s -> %s (%r)", frame.file, dependency, specifier)

            if store.try_admit(dependency):
                child = self._open(store, dependency, errors)
                if child is not None:
                    stack.append(child)

    def _open(
        self, store: GraphStore, file: FileIdentity, errors: list[BuildFailure]
    ) -> _Frame | None:
        """Extract the imports of a freshly admitted file."""
        try:
            specifiers = extract_imports(self._extractor, file)
        except ExtractionError as exc:
            store.mark_failed(file)
            self._record(exc, errors)
            return None
        logger.debug("Admitted %s with %d import(s)", file, len(specifiers))
        return _Frame(file=file, pending=iter(specifiers))

    def _record(self, error: BuildFailure, errors: list[BuildFailure]) -> None:
        if self._policy is FailurePolicy.FAIL_FAST:
            raise error
        logger.warning("%s", error)
        errors.append(error)


def build(
    resolver: ImportResolver,
    extractor: ImportExtractor,
    entry_points: Iterable[FileIdentity],
    policy: FailurePolicy | str = FailurePolicy.FAIL_FAST,
) -> DependencyGraph:
    """Build a dependency graph with the sequential engine.

    Convenience wrapper around ``DependencyGraphBuilder``.
    """
    return DependencyGraphBuilder(resolver, extractor, policy).build(entry_points)
