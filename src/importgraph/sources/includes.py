"""Include extractor for C and C++ sources.

Only the quoted form ``#include "path"`` names a project file; the
angle-bracket form ``#include <path>`` refers to system headers and is
skipped.
"""

from __future__ import annotations

import re

from importgraph.sources.base import SourceFileExtractor
from importgraph.sources.comments import strip_comments

_INCLUDE_PATTERN = re.compile(r'^[ \t]*#[ \t]*include[ \t]*"([^"\n]+)"', re.MULTILINE)


def parse_includes(source: str) -> list[str]:
    """Return the quoted include paths of a C/C++ source, in source order."""
    return _INCLUDE_PATTERN.findall(strip_comments(source))


class IncludeExtractor(SourceFileExtractor):
    """Extracts quoted ``#include`` paths from C and C++ files."""

    suffixes = (".c", ".h", ".cc", ".cpp", ".cxx", ".hh", ".hpp", ".hxx")

    def parse_imports(self, source: str) -> list[str]:
        return parse_includes(source)
