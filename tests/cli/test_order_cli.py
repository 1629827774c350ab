"""Tests for ``importgraph order`` command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from importgraph.cli.main import cli
from tests.helpers import abs_path


class TestOrderCommand:
    """Dependencies always come before their dependents."""

    def test_json_order(self, runner: CliRunner, solidity_project: Path) -> None:
        result = runner.invoke(
            cli, ["order", "--root", str(solidity_project), "--format", "json"]
        )
        assert result.exit_code == 0, result.output
        order = [group[0] for group in json.loads(result.output)["order"]]
        position = {file: i for i, file in enumerate(order)}
        token = abs_path(solidity_project, "contracts/Token.sol")
        math = abs_path(solidity_project, "lib/openzeppelin/utils/Math.sol")
        safe_cast = abs_path(solidity_project, "lib/openzeppelin/utils/SafeCast.sol")
        assert order[-1] == token
        assert position[safe_cast] < position[math] < position[token]

    def test_cycle_grouped(self, runner: CliRunner, cyclic_project: Path) -> None:
        result = runner.invoke(
            cli, ["order", "--root", str(cyclic_project), "--format", "json", "A.sol"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["order"] == [
            [abs_path(cyclic_project, "Leaf.sol")],
            [abs_path(cyclic_project, "A.sol"), abs_path(cyclic_project, "B.sol")],
        ]

    def test_text_output(self, runner: CliRunner, solidity_project: Path) -> None:
        result = runner.invoke(cli, ["order", "--root", str(solidity_project)])
        assert result.exit_code == 0, result.output
        assert "Compilation Order" in result.output
        assert "SafeCast.sol" in result.output
