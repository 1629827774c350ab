"""Import extraction and resolution collaborators.

The traversal engines consume only the ``ImportExtractor`` and
``ImportResolver`` contracts from ``importgraph.sources.base``. The concrete
classes here make the engines usable on real projects:

- ``SolidityImportExtractor`` and ``IncludeExtractor`` read source files.
- ``ExtractorRegistry`` dispatches between extractors by file suffix.
- ``FileSystemResolver`` maps specifiers to absolute paths.
"""

from importgraph.sources.base import (
    ImportExtractor,
    ImportResolver,
    SourceFileExtractor,
)
from importgraph.sources.includes import IncludeExtractor, parse_includes
from importgraph.sources.registry import ExtractorRegistry, default_registry
from importgraph.sources.resolver import FileSystemResolver
from importgraph.sources.solidity import SolidityImportExtractor, parse_solidity_imports

__all__ = [
    "ExtractorRegistry",
    "FileSystemResolver",
    "ImportExtractor",
    "ImportResolver",
    "IncludeExtractor",
    "SolidityImportExtractor",
    "SourceFileExtractor",
    "default_registry",
    "parse_includes",
    "parse_solidity_imports",
]
