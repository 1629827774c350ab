"""In-memory collaborators for graph builder tests.

``DictExtractor`` and ``DictResolver`` model a project as plain dicts so
tests can describe any topology (diamonds, cycles, missing files) without
touching the file system. Both count their calls, which is how the
"extracted and resolved exactly once" properties are checked.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from collections.abc import Iterable
from pathlib import Path

from importgraph.exceptions import ExtractionError, ResolutionError
from importgraph.sources.base import ImportExtractor, ImportResolver


class DictExtractor(ImportExtractor):
    """Returns imports from a ``file -> [specifier, ...]`` mapping."""

    def __init__(
        self,
        imports: dict[str, list[str]],
        unreadable: Iterable[str] = (),
    ) -> None:
        self.imports = imports
        self.unreadable = set(unreadable)
        self.calls: Counter[str] = Counter()

    def get_imports(self, file: str) -> list[str]:
        self.calls[file] += 1
        if file in self.unreadable:
            raise ExtractionError(file, PermissionError(f"Permission denied: {file}"))
        if file not in self.imports:
            raise ExtractionError(file, FileNotFoundError(f"No such file: {file}"))
        return list(self.imports[file])


class DictResolver(ImportResolver):
    """Resolves ``./name`` or ``name`` to ``name`` if it is a known file.

    ``aliases`` maps extra specifiers onto canonical names, which models two
    spellings of the same underlying file.
    """

    def __init__(
        self,
        files: Iterable[str],
        aliases: dict[str, str] | None = None,
    ) -> None:
        self.files = set(files)
        self.aliases = aliases or {}
        self.calls: Counter[tuple[str, str]] = Counter()

    def resolve_import(self, source_file: str, specifier: str) -> str:
        self.calls[(source_file, specifier)] += 1
        target = self.aliases.get(specifier, specifier.removeprefix("./"))
        if target not in self.files:
            raise ResolutionError(source_file, specifier)
        return target

    def resolved_sources(self) -> Counter[str]:
        """How many specifiers were resolved per importing file."""
        per_file: Counter[str] = Counter()
        for (source, _), count in self.calls.items():
            per_file[source] += count
        return per_file


class AsyncDictExtractor(DictExtractor):
    """``DictExtractor`` with a coroutine ``get_imports`` that yields control."""

    def __init__(self, *args: object, delay: float = 0.0, **kwargs: object) -> None:
        super().__init__(*args, **kwargs)  # type: ignore[arg-type]
        self.delay = delay

    async def get_imports(self, file: str) -> list[str]:  # type: ignore[override]
        await asyncio.sleep(self.delay)
        return DictExtractor.get_imports(self, file)


class AsyncDictResolver(DictResolver):
    """``DictResolver`` with a coroutine ``resolve_import`` that yields control."""

    async def resolve_import(self, source_file: str, specifier: str) -> str:  # type: ignore[override]
        await asyncio.sleep(0)
        return DictResolver.resolve_import(self, source_file, specifier)


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Write ``{relative path: content}`` under ``root`` and return ``root``."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


def project(imports: dict[str, list[str]], **extractor_kwargs: object) -> tuple[DictResolver, DictExtractor]:
    """Build a resolver/extractor pair over the same set of files."""
    return DictResolver(imports), DictExtractor(imports, **extractor_kwargs)  # type: ignore[arg-type]


def abs_path(root: Path, relative: str) -> str:
    """File identity the filesystem resolver produces for ``relative``."""
    return (root / relative).resolve().as_posix()
