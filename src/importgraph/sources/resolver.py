"""Filesystem import resolver.

Maps a raw specifier written in a source file to the absolute, normalized
path of the file it refers to. File identities are POSIX path strings, so
two specifiers that reach the same file through different routes
(``./a/../b.sol`` and ``./b.sol``, or a symlinked directory) resolve to the
same identity.

Resolution Rules
----------------
1. **Remappings.** If the specifier starts with a remapped prefix, the
   longest such prefix is replaced by its target first. The rewritten
   specifier then goes through the rules below.
2. **Relative** specifiers (``./x``, ``../x``) resolve against the directory
   of the importing file.
3. **Absolute** specifiers are used as is.
4. **Bare** specifiers are searched in order: the importing file's directory
   (only with ``search_source_dir``), the project root, then each library
   path.

The first candidate that exists as a regular file wins. If none does, a
``ResolutionError`` carrying the importing file and the raw specifier is
raised.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Mapping
from pathlib import Path

from importgraph.exceptions import ResolutionError
from importgraph.sources.base import ImportResolver

logger = logging.getLogger(__name__)


class FileSystemResolver(ImportResolver):
    """Resolves path-style import specifiers against the file system.

    Args:
        project_root: Root directory of the project. Bare specifiers and
            entry-point locators are resolved against it.
        library_paths: Extra directories searched for bare specifiers, in
            order (e.g. ``node_modules``). Relative entries are interpreted
            against ``project_root``.
        remappings: Prefix rewrites applied before any lookup, e.g.
            ``{"@openzeppelin/": "node_modules/@openzeppelin/"}``.
        search_source_dir: Also search the importing file's directory for
            bare specifiers, before the project root (C include semantics).
    """

    def __init__(
        self,
        project_root: str | Path = ".",
        library_paths: Iterable[str | Path] = (),
        remappings: Mapping[str, str] | None = None,
        search_source_dir: bool = False,
    ) -> None:
        self.project_root = Path(project_root).resolve()
        self.library_paths = tuple(
            (self.project_root / Path(p)).resolve() for p in library_paths
        )
        # Longest prefix first so the most specific remapping wins.
        self.remappings = dict(
            sorted((remappings or {}).items(), key=lambda item: len(item[0]), reverse=True)
        )
        self.search_source_dir = search_source_dir

    def resolve_import(self, source_file: Hashable, specifier: str) -> str:
        source = Path(str(source_file))
        target = self._remap(specifier)

        for candidate in self._candidates(source, target):
            found = self._existing_file(candidate)
            if found is not None:
                return found

        raise ResolutionError(
            source_file,
            specifier,
            message=(
                f"Cannot resolve {specifier!r} imported from {source_file}: "
                "no such file"
            ),
        )

    def resolve_entry_point(self, locator: Hashable) -> str:
        path = Path(str(locator))
        if not path.is_absolute():
            path = self.project_root / path
        found = self._existing_file(path)
        if found is None:
            raise ResolutionError(
                None,
                str(locator),
                message=f"Cannot resolve entry point {str(locator)!r}: no such file",
            )
        return found

    def _remap(self, specifier: str) -> str:
        for prefix, replacement in self.remappings.items():
            if specifier.startswith(prefix):
                remapped = replacement + specifier[len(prefix):]
                logger.debug("Remapped %r to %r", specifier, remapped)
                return remapped
        return specifier

    def _candidates(self, source: Path, target: str) -> list[Path]:
        path = Path(target)
        if path.is_absolute():
            return [path]
        if target.startswith(("./", "../")) or target in (".", ".."):
            return [source.parent / path]

        search_dirs: list[Path] = []
        if self.search_source_dir:
            search_dirs.append(source.parent)
        search_dirs.append(self.project_root)
        search_dirs.extend(self.library_paths)
        return [directory / path for directory in search_dirs]

    @staticmethod
    def _existing_file(candidate: Path) -> str | None:
        try:
            resolved = candidate.resolve()
            if resolved.is_file():
                return resolved.as_posix()
        except OSError:
            logger.debug("Cannot stat %s", candidate, exc_info=True)
        return None
