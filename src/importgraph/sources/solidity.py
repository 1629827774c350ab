"""Import extractor for Solidity sources (``.sol``).

Recognizes every form of the Solidity import directive:

- ``import "./Token.sol";``
- ``import "./Token.sol" as Token;``
- ``import * as Token from "./Token.sol";``
- ``import {ERC20, IERC20 as I} from "./Token.sol";``

Specifiers are returned exactly as written, in source order, including
duplicates. Comments are stripped before matching so commented-out imports
are ignored.
"""

from __future__ import annotations

import re

from importgraph.sources.base import SourceFileExtractor
from importgraph.sources.comments import strip_comments

_IMPORT_PATTERN = re.compile(
    r"""\bimport\s+
        (?:
            (?:"(?P<plain_dq>[^"\n]*)"|'(?P<plain_sq>[^'\n]*)')     # import "x" [as N]
          | (?:\*\s*as\s+\w+|\{[^}]*\}|\w+)\s+
            from\s+(?:"(?P<from_dq>[^"\n]*)"|'(?P<from_sq>[^'\n]*)')  # import ... from "x"
        )""",
    re.VERBOSE,
)

_PATH_GROUPS = ("plain_dq", "plain_sq", "from_dq", "from_sq")


def _path(match: re.Match[str]) -> str:
    return next(p for p in match.group(*_PATH_GROUPS) if p is not None)


def parse_solidity_imports(source: str) -> list[str]:
    """Return the import paths of a Solidity source, in source order."""
    return [_path(match) for match in _IMPORT_PATTERN.finditer(strip_comments(source))]


class SolidityImportExtractor(SourceFileExtractor):
    """Extracts import paths from Solidity files."""

    suffixes = (".sol",)

    def parse_imports(self, source: str) -> list[str]:
        return parse_solidity_imports(source)
