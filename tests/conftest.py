"""Shared fixtures for importgraph tests."""

from __future__ import annotations

import pathlib

import pytest

from tests.helpers import write_tree


@pytest.fixture
def solidity_project(tmp_path: pathlib.Path) -> pathlib.Path:
    """A small acyclic Solidity project with a remapped library.

    contracts/Token.sol -> contracts/interfaces/IERC20.sol
                        -> lib/openzeppelin/utils/Math.sol -> SafeCast.sol
    contracts/Vault.sol -> contracts/Token.sol
    """
    return write_tree(
        tmp_path / "solidity",
        {
            "contracts/Token.sol": (
                "// SPDX-License-Identifier: MIT\n"
                "pragma solidity ^0.8.20;\n\n"
                'import "./interfaces/IERC20.sol";\n'
                'import {Math} from "@openzeppelin/utils/Math.sol";\n'
                '// import "./Unused.sol";\n\n'
                "contract Token is IERC20 {}\n"
            ),
            "contracts/Vault.sol": (
                "pragma solidity ^0.8.20;\n"
                'import * as T from "./Token.sol";\n'
                "contract Vault {}\n"
            ),
            "contracts/interfaces/IERC20.sol": "interface IERC20 {}\n",
            "lib/openzeppelin/utils/Math.sol": (
                'import "./SafeCast.sol";\nlibrary Math {}\n'
            ),
            "lib/openzeppelin/utils/SafeCast.sol": "library SafeCast {}\n",
            "importgraph.yaml": (
                "entry_points:\n"
                "  - contracts/Token.sol\n"
                "remappings:\n"
                '  "@openzeppelin/": "lib/openzeppelin/"\n'
            ),
        },
    )


@pytest.fixture
def cyclic_project(tmp_path: pathlib.Path) -> pathlib.Path:
    """A.sol and B.sol import each other; Self.sol imports itself."""
    return write_tree(
        tmp_path / "cyclic",
        {
            "A.sol": 'import "./B.sol";\n',
            "B.sol": 'import "./A.sol";\nimport "./Leaf.sol";\n',
            "Leaf.sol": "contract Leaf {}\n",
            "Self.sol": 'import "./Self.sol";\n',
        },
    )


@pytest.fixture
def broken_project(tmp_path: pathlib.Path) -> pathlib.Path:
    """Main.sol reaches two imports that do not exist."""
    return write_tree(
        tmp_path / "broken",
        {
            "Main.sol": 'import "./Ok.sol";\nimport "./Missing.sol";\n',
            "Ok.sol": 'import "./AlsoMissing.sol";\n',
        },
    )
