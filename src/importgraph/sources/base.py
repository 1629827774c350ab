"""Collaborator contracts consumed by the traversal engines.

The graph builder never reads files or interprets import syntax itself. It
drives two collaborators:

- ``ImportExtractor.get_imports(file)`` -- the ordered list of raw import
  specifiers written in a file.
- ``ImportResolver.resolve_import(source_file, specifier)`` -- the canonical
  identity of the file a specifier refers to.

Correct deduplication depends entirely on the resolver: two specifiers that
refer to the same underlying file MUST resolve to equal identities.

Implementations may define either method as ``async def``. The concurrent
engine awaits coroutines directly and runs plain methods in a worker thread;
the sequential engine requires plain methods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable
from pathlib import Path

from importgraph.exceptions import ExtractionError


class ImportExtractor(ABC):
    """Produces the raw import specifiers of a source file."""

    @abstractmethod
    def get_imports(self, file: Hashable) -> list[str]:
        """Return the import specifiers of ``file`` in source order.

        Args:
            file: Identity of the file, as produced by the resolver.

        Returns:
            Raw, unresolved specifiers. Duplicates are allowed.

        Raises:
            ExtractionError: If the file cannot be read or parsed.
        """


class ImportResolver(ABC):
    """Maps raw import specifiers to canonical file identities."""

    @abstractmethod
    def resolve_import(self, source_file: Hashable, specifier: str) -> Hashable:
        """Resolve ``specifier`` as written in ``source_file``.

        Raises:
            ResolutionError: If the specifier does not map to an existing file.
        """

    def resolve_entry_point(self, locator: Hashable) -> Hashable:
        """Normalize a caller-supplied entry point into a file identity.

        The default treats the locator as an identity already.

        Raises:
            ResolutionError: If the locator does not map to an existing file.
        """
        return locator


class SourceFileExtractor(ImportExtractor):
    """Extractor for file identities that are filesystem paths.

    Reads the file as UTF-8 and hands the text to ``parse_imports``. Read and
    decode failures are reported as ``ExtractionError`` with the original
    exception as cause.
    """

    encoding = "utf-8"

    def get_imports(self, file: Hashable) -> list[str]:
        path = Path(str(file))
        try:
            source = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise ExtractionError(file, exc) from exc
        return self.parse_imports(source)

    @abstractmethod
    def parse_imports(self, source: str) -> list[str]:
        """Return the import specifiers found in ``source``, in order."""
