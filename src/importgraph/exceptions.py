"""importgraph exception hierarchy.

All public exceptions inherit from ImportGraphError, giving callers a single
base class to catch when they want to handle any importgraph-specific failure
without swallowing unrelated errors.

The two errors a build can surface for user code are ``ExtractionError`` (a
file could not be read or its imports could not be parsed) and
``ResolutionError`` (an import specifier could not be mapped to a file). Both
carry enough context for a driver to point the user at the failing statement.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Hashable, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from importgraph.core.graph.models import DependencyGraph


class ImportGraphError(Exception):
    """Base exception for all importgraph errors."""


class ExtractionError(ImportGraphError):
    """Raised when the imports of a file cannot be extracted.

    Covers unreadable files, undecodable content, and syntax the extractor
    cannot parse. Not retried by the traversal engine.

    Attributes:
        file: Identity of the file whose imports could not be extracted.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        file: Hashable,
        cause: BaseException | None = None,
        message: str | None = None,
    ) -> None:
        self.file = file
        self.cause = cause
        if message is None:
            message = f"Cannot extract imports from {file}"
            if cause is not None:
                message += f": {str(cause) or type(cause).__name__}"
        super().__init__(message)


class ResolutionError(ImportGraphError):
    """Raised when an import specifier cannot be mapped to a file.

    Attributes:
        source_file: Identity of the importing file. None when an entry-point
            locator itself could not be resolved.
        specifier: The raw import string as written in the source.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        source_file: Hashable | None,
        specifier: str,
        cause: BaseException | None = None,
        message: str | None = None,
    ) -> None:
        self.source_file = source_file
        self.specifier = specifier
        self.cause = cause
        if message is None:
            if source_file is None:
                message = f"Cannot resolve entry point {specifier!r}"
            else:
                message = f"Cannot resolve {specifier!r} imported from {source_file}"
            if cause is not None:
                message += f": {str(cause) or type(cause).__name__}"
        super().__init__(message)


class GraphStoreError(ImportGraphError):
    """Raised on misuse of the graph store, such as adding an edge from a
    file that was never admitted."""


class UnknownFileError(ImportGraphError, KeyError):
    """Raised when a dependency graph is queried for a file it never admitted."""

    def __init__(self, file: Hashable) -> None:
        self.file = file
        super().__init__(f"File was never admitted to the graph: {file}")

    def __str__(self) -> str:
        return str(self.args[0])


class DependencyGraphBuildError(ImportGraphError):
    """Aggregate failure raised by a collect-all build.

    Attributes:
        errors: Every extraction or resolution error, in the order recorded.
        partial_graph: Graph of the files whose visit completed without error.
    """

    def __init__(
        self,
        errors: Sequence[ExtractionError | ResolutionError],
        partial_graph: DependencyGraph,
    ) -> None:
        self.errors = list(errors)
        self.partial_graph = partial_graph
        noun = "error" if len(self.errors) == 1 else "errors"
        super().__init__(
            f"Dependency graph build failed with {len(self.errors)} {noun}"
        )

    def errors_by_file(
        self,
    ) -> dict[Hashable | None, list[ExtractionError | ResolutionError]]:
        """Group the recorded errors by the file that triggered them."""
        grouped: dict[Hashable | None, list[ExtractionError | ResolutionError]] = (
            defaultdict(list)
        )
        for error in self.errors:
            if isinstance(error, ExtractionError):
                grouped[error.file].append(error)
            else:
                grouped[error.source_file].append(error)
        return dict(grouped)


class ConfigError(ImportGraphError):
    """Raised when a project configuration file is unreadable or invalid."""
