"""Concurrent traversal engine built on asyncio.

Each admitted file is visited by its own task, so the I/O latency of
independent branches overlaps. Within one file the specifiers are still
resolved in declared order; a dependency that wins admission is dispatched
as a new task immediately instead of being visited inline.

Correctness rests on ``GraphStore.try_admit``: exactly one task admits a
given file, and only that task ever calls the extractor for it or resolves
its specifiers. Tasks that lose the race simply record the edge.

The build completes when the set of outstanding tasks is empty; tasks
spawned by running tasks join the set before their parent finishes, so the
final snapshot is taken only after every dispatched visit is done.

Collaborators may implement their methods as coroutines, which are awaited
directly, or as plain methods, which run in a worker thread. ``timeout``
bounds each individual collaborator call. A worker thread that times out is
left to finish on its own and its result is discarded, but it keeps its
``max_concurrency`` slot until it returns, so the number of running
collaborator calls never exceeds the bound.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from importgraph.core.graph.builder import BuildFailure
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


class ConcurrentGraphBuilder:
    """Builds a ``DependencyGraph`` with one asyncio task per file.

    Produces the same key set and per-key dependency sets as
    ``DependencyGraphBuilder`` for the same collaborators; only the admission
    order (and therefore ``resolved_files()`` order) may differ.

    A builder holds no per-build state. ``build()`` may run several times at
    once, on one event loop or on several, and each run gets its own
    ``max_concurrency`` budget.

    Args:
        resolver: Maps specifiers to file identities.
        extractor: Lists the import specifiers of a file.
        policy: Failure policy, as a ``FailurePolicy`` or its string value.
        max_concurrency: Upper bound on simultaneous collaborator calls.
            None means unbounded.
        timeout: Seconds allowed for each collaborator call. None disables.
    """

    def __init__(
        self,
        resolver: ImportResolver,
        extractor: ImportExtractor,
        policy: FailurePolicy | str = FailurePolicy.FAIL_FAST,
        *,
        max_concurrency: int | None = None,
        timeout: float | None = None,
    ) -> None:
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self._resolver = resolver
        self._extractor = extractor
        self._policy = FailurePolicy.parse(policy)
        self._max_concurrency = max_concurrency
        self._timeout = timeout

    @property
    def policy(self) -> FailurePolicy:
        return self._policy

    async def build(self, entry_points: Iterable[FileIdentity]) -> DependencyGraph:
        """Discover every file reachable from ``entry_points`` concurrently.

        Raises:
            ExtractionError: First failure to complete (fail-fast).
            ResolutionError: First failure to complete (fail-fast).
            DependencyGraphBuildError: Every failure, plus the partial graph
                of completed files (collect-all).
        """
        semaphore = (
            asyncio.Semaphore(self._max_concurrency)
            if self._max_concurrency is not None
            else None
        )
        store = GraphStore()
        errors: list[BuildFailure] = []
        entries: list[FileIdentity] = []
        pending: set[asyncio.Task[None]] = set()

        def spawn(file: FileIdentity) -> None:
            visit = self._visit(store, file, errors, spawn, semaphore)
            pending.add(asyncio.ensure_future(visit))

        try:
            for locator in entry_points:
                try:
                    entry = await self._resolve_entry(locator, semaphore)
                except ResolutionError as exc:
                    self._record(exc, errors)
                    continue
                if entry not in entries:
                    entries.append(entry)
                if store.try_admit(entry):
                    logger.debug("Dispatching entry point %s", entry)
                    spawn(entry)

            while pending:
                done, _ = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                pending.difference_update(done)
                failures = [
                    t.exception()
                    for t in done
                    if not t.cancelled() and t.exception() is not None
                ]
                if failures:
                    raise failures[0]  # type: ignore[misc]
        finally:
            if pending:
                logger.debug("Cancelling %d outstanding visit(s)", len(pending))
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)

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

    async def _visit(
        self,
        store: GraphStore,
        file: FileIdentity,
        errors: list[BuildFailure],
        spawn: Callable[[FileIdentity], None],
        semaphore: asyncio.Semaphore | None,
    ) -> None:
        try:
            specifiers = await self._extract(file, semaphore)
            logger.debug("Admitted %s with %d import(s)", file, len(specifiers))
            for specifier in specifiers:
                dependency = await self._resolve(file, specifier, semaphore)
                store.add_dependency(file, dependency)
                logger.debug("%s -> %s (%r)", file, dependency, specifier)
                if store.try_admit(dependency):
                    spawn(dependency)
        except (ExtractionError, ResolutionError) as exc:
            store.mark_failed(file)
            self._record(exc, errors)
            return
        store.mark_complete(file)

    def _record(self, error: BuildFailure, errors: list[BuildFailure]) -> None:
        if self._policy is FailurePolicy.FAIL_FAST:
            raise error
        logger.warning("%s", error)
        errors.append(error)

    # -----------------------------------------------------------------------
    # Collaborator calls
    # -----------------------------------------------------------------------

    async def _call(
        self,
        semaphore: asyncio.Semaphore | None,
        method: Callable[..., Any],
        *args: Any,
    ) -> Any:
        if semaphore is not None:
            await semaphore.acquire()
        if inspect.iscoroutinefunction(method):
            try:
                return await self._bounded(method(*args))
            finally:
                if semaphore is not None:
                    semaphore.release()

        worker = asyncio.ensure_future(asyncio.to_thread(method, *args))
        worker.add_done_callback(functools.partial(_finish_worker, semaphore))
        # Shielded: a timeout abandons the thread but must not free its slot.
        return await self._bounded(asyncio.shield(worker))

    async def _bounded(self, call: Awaitable[Any]) -> Any:
        if self._timeout is None:
            return await call
        return await asyncio.wait_for(call, self._timeout)

    async def _extract(
        self, file: FileIdentity, semaphore: asyncio.Semaphore | None
    ) -> list[str]:
        try:
            return list(await self._call(semaphore, self._extractor.get_imports, file))
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(file, exc) from exc

    async def _resolve(
        self,
        source_file: FileIdentity,
        specifier: str,
        semaphore: asyncio.Semaphore | None,
    ) -> FileIdentity:
        try:
            return await self._call(
                semaphore, self._resolver.resolve_import, source_file, specifier
            )
        except ResolutionError:
            raise
        except Exception as exc:
            raise ResolutionError(source_file, specifier, exc) from exc

    async def _resolve_entry(
        self, locator: FileIdentity, semaphore: asyncio.Semaphore | None
    ) -> FileIdentity:
        try:
            return await self._call(semaphore, self._resolver.resolve_entry_point, locator)
        except ResolutionError:
            raise
        except Exception as exc:
            raise ResolutionError(None, str(locator), exc) from exc


def _finish_worker(
    semaphore: asyncio.Semaphore | None, worker: asyncio.Future[Any]
) -> None:
    """Release a worker thread's slot once the thread has actually returned."""
    if not worker.cancelled():
        # A timed-out worker has no awaiter left; consume its outcome here.
        worker.exception()
    if semaphore is not None:
        semaphore.release()


async def build_async(
    resolver: ImportResolver,
    extractor: ImportExtractor,
    entry_points: Iterable[FileIdentity],
    policy: FailurePolicy | str = FailurePolicy.FAIL_FAST,
    *,
    max_concurrency: int | None = None,
    timeout: float | None = None,
) -> DependencyGraph:
    """Build a dependency graph with the concurrent engine.

    Convenience wrapper around ``ConcurrentGraphBuilder``.
    """
    builder = ConcurrentGraphBuilder(
        resolver,
        extractor,
        policy,
        max_concurrency=max_concurrency,
        timeout=timeout,
    )
    return await builder.build(entry_points)
