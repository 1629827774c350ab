"""Smoke tests -- verify the package is importable and CLI is wired."""

from click.testing import CliRunner

import importgraph
from importgraph.cli.main import cli


def test_package_version() -> None:
    assert importgraph.__version__ == "0.1.0"


def test_package_license() -> None:
    assert importgraph.__license__ == "MIT"


def test_cli_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Source dependency graphs" in result.output


def test_cli_version() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_subcommands_registered() -> None:
    assert set(cli.commands) == {"graph", "cycles", "order"}
