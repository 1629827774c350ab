"""Tests for Solidity import extraction."""

from __future__ import annotations

from pathlib import Path

import pytest

from importgraph.exceptions import ExtractionError
from importgraph.sources import SolidityImportExtractor, parse_solidity_imports
from importgraph.sources.comments import strip_comments


class TestImportForms:
    """Every import directive form yields its path."""

    @pytest.mark.parametrize(
        "statement",
        [
            'import "./Token.sol";',
            "import './Token.sol';",
            'import "./Token.sol" as Token;',
            'import * as Token from "./Token.sol";',
            'import {ERC20} from "./Token.sol";',
            'import {ERC20, IERC20 as I} from "./Token.sol";',
            'import {\n    ERC20,\n    IERC20\n} from "./Token.sol";',
            'import Token from "./Token.sol";',
        ],
    )
    def test_form(self, statement: str) -> None:
        assert parse_solidity_imports(statement) == ["./Token.sol"]

    def test_source_order_and_duplicates(self) -> None:
        source = (
            'import "b.sol";\n'
            'import {X} from "a.sol";\n'
            'import "b.sol";\n'
        )
        assert parse_solidity_imports(source) == ["b.sol", "a.sol", "b.sol"]

    def test_no_imports(self) -> None:
        assert parse_solidity_imports("pragma solidity ^0.8.0;\ncontract C {}\n") == []

    @pytest.mark.parametrize(
        ("statement", "path"),
        [
            ("import \"it's.sol\";", "it's.sol"),
            ("import {A} from 'say \"hi\".sol';", 'say "hi".sol'),
        ],
    )
    def test_other_quote_inside_path(self, statement: str, path: str) -> None:
        assert parse_solidity_imports(statement) == [path]

    def test_identifier_containing_import_ignored(self) -> None:
        source = 'contract C { function reimport() public {} }\nimport "x.sol";'
        assert parse_solidity_imports(source) == ["x.sol"]


class TestComments:
    """Commented-out imports are ignored."""

    def test_line_comment(self) -> None:
        source = '// import "old.sol";\nimport "new.sol";'
        assert parse_solidity_imports(source) == ["new.sol"]

    def test_block_comment(self) -> None:
        source = '/*\nimport "old.sol";\n*/\nimport "new.sol";'
        assert parse_solidity_imports(source) == ["new.sol"]

    def test_comment_marker_inside_string_kept(self) -> None:
        source = 'import "lib//weird/*path.sol";'
        assert parse_solidity_imports(source) == ["lib//weird/*path.sol"]

    def test_strip_keeps_line_structure(self) -> None:
        stripped = strip_comments("a /* one\ntwo\nthree */ b")
        assert stripped.count("\n") == 2
        assert stripped.startswith("a ")
        assert stripped.endswith(" b")


class TestSolidityImportExtractor:
    """Reading files from disk."""

    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "Token.sol"
        path.write_text('import "./IERC20.sol";\n', encoding="utf-8")
        assert SolidityImportExtractor().get_imports(str(path)) == ["./IERC20.sol"]

    def test_missing_file(self, tmp_path: Path) -> None:
        missing = tmp_path / "Missing.sol"
        with pytest.raises(ExtractionError) as exc_info:
            SolidityImportExtractor().get_imports(str(missing))
        assert exc_info.value.file == str(missing)
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_undecodable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "Binary.sol"
        path.write_bytes(b"\xff\xfe\x00import")
        with pytest.raises(ExtractionError) as exc_info:
            SolidityImportExtractor().get_imports(str(path))
        assert isinstance(exc_info.value.cause, UnicodeDecodeError)
