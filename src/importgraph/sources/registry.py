"""Extractor registry: dispatch import extraction by file suffix.

A project may mix languages (Solidity contracts next to C headers, for
instance). The ``ExtractorRegistry`` is itself an ``ImportExtractor`` that
picks the registered extractor for each file's suffix, so the traversal
engines only ever see one extractor.

``default_registry()`` pre-registers the built-in extractors. Custom
extractors can be added with ``register()``; a later registration for a
suffix replaces the earlier one.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from pathlib import PurePath

from importgraph.exceptions import ExtractionError
from importgraph.sources.base import ImportExtractor
from importgraph.sources.includes import IncludeExtractor
from importgraph.sources.solidity import SolidityImportExtractor


class ExtractorRegistry(ImportExtractor):
    """Registry of import extractors keyed by lower-case file suffix."""

    def __init__(self) -> None:
        self._extractors: dict[str, ImportExtractor] = {}

    def register(
        self, extractor: ImportExtractor, suffixes: Iterable[str] | None = None
    ) -> None:
        """Register ``extractor`` for the given suffixes.

        Args:
            extractor: The extractor to register.
            suffixes: Suffixes such as ``".sol"``. Defaults to the
                extractor's ``suffixes`` attribute.

        Raises:
            ValueError: If no suffixes are given or declared.
        """
        if suffixes is None:
            suffixes = getattr(extractor, "suffixes", ())
        suffixes = tuple(suffixes)
        if not suffixes:
            raise ValueError(f"No suffixes given for {type(extractor).__name__}")
        for suffix in suffixes:
            key = suffix.lower()
            if not key.startswith("."):
                key = "." + key
            self._extractors[key] = extractor

    @property
    def suffixes(self) -> tuple[str, ...]:
        return tuple(sorted(self._extractors))

    def extractor_for(self, file: Hashable) -> ImportExtractor | None:
        """Return the extractor registered for ``file``'s suffix, if any."""
        return self._extractors.get(PurePath(str(file)).suffix.lower())

    def get_imports(self, file: Hashable) -> list[str]:
        extractor = self.extractor_for(file)
        if extractor is None:
            raise ExtractionError(
                file,
                message=(
                    f"Cannot extract imports from {file}: no extractor for "
                    f"suffix {PurePath(str(file)).suffix or '(none)'!r}"
                ),
            )
        return extractor.get_imports(file)


def default_registry() -> ExtractorRegistry:
    """Create an ExtractorRegistry with the built-in extractors.

    1. ``SolidityImportExtractor`` -- ``.sol``
    2. ``IncludeExtractor`` -- C and C++ sources and headers
    """
    registry = ExtractorRegistry()
    registry.register(SolidityImportExtractor())
    registry.register(IncludeExtractor())
    return registry
