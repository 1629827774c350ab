"""Comment stripping shared by the C-family extractors.

Solidity and C/C++ share ``//`` line comments and ``/* */`` block comments.
String literals are matched first so that comment markers inside a quoted
import path are left alone.
"""

from __future__ import annotations

import re

_TOKEN_PATTERN = re.compile(
    r"""("(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*')"""  # string literal
    r"""|(//[^\n]*|/\*.*?\*/)""",  # comment
    re.DOTALL,
)


def _replace(match: re.Match[str]) -> str:
    if match.group(1) is not None:
        return match.group(1)
    # Keep line structure so line-anchored patterns still work.
    return "\n" * match.group(2).count("\n") or " "


def strip_comments(source: str) -> str:
    """Remove ``//`` and ``/* */`` comments, leaving string literals intact."""
    return _TOKEN_PATTERN.sub(_replace, source)
