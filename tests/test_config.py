"""Tests for importgraph.yaml loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from importgraph.config import (
    ImportGraphConfig,
    find_config,
    load_config,
    parse_config,
)
from importgraph.core.graph import FailurePolicy
from importgraph.exceptions import ConfigError


def _write(tmp_path: Path, text: str, name: str = "importgraph.yaml") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    """Reading a valid file."""

    def test_full_file(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "entry_points:\n"
            "  - contracts/Token.sol\n"
            "library_paths: [node_modules, lib]\n"
            "remappings:\n"
            "  '@oz/': 'lib/oz/'\n"
            "search_source_dir: true\n"
            "policy: collect-all\n"
            "jobs: 4\n"
            "timeout: 2\n",
        )
        config = load_config(path)
        assert config.project_root == tmp_path.resolve()
        base = tmp_path.resolve()
        assert config.entry_points == ("contracts/Token.sol",)
        assert config.library_paths == (
            (base / "node_modules").as_posix(),
            (base / "lib").as_posix(),
        )
        assert config.remappings == {"@oz/": "lib/oz/"}
        assert config.search_source_dir is True
        assert config.policy is FailurePolicy.COLLECT_ALL
        assert config.jobs == 4
        assert config.timeout == 2.0
        assert config.concurrent

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path, ""))
        assert config.entry_points == ()
        assert config.policy is FailurePolicy.FAIL_FAST
        assert not config.concurrent
        assert config.project_root == tmp_path.resolve()

    def test_project_root_relative_to_file(self, tmp_path: Path) -> None:
        (tmp_path / "src").mkdir()
        config = load_config(_write(tmp_path, "project_root: src\n"))
        assert config.project_root == (tmp_path / "src").resolve()

    def test_single_string_entry_point(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path, "entry_points: Main.sol\n"))
        assert config.entry_points == ("Main.sol",)

    def test_paths_keep_file_base_when_root_moves(self, tmp_path: Path) -> None:
        """library_paths stay relative to the file; entry points follow project_root."""
        (tmp_path / "contracts").mkdir()
        config = load_config(
            _write(
                tmp_path,
                "project_root: contracts\n"
                "entry_points: [Main.sol]\n"
                "library_paths: [lib]\n",
            )
        )
        base = tmp_path.resolve()
        assert config.project_root == base / "contracts"
        assert config.entry_points == ("Main.sol",)
        assert config.library_paths == ((base / "lib").as_posix(),)


class TestInvalidConfig:
    """Every problem is a ConfigError."""

    @pytest.mark.parametrize(
        ("text", "message"),
        [
            ("entry_point: [a]\n", "unknown key"),
            ("- a\n- b\n", "mapping"),
            ("jobs: many\n", "jobs"),
            ("jobs: true\n", "boolean"),
            ("jobs: -1\n", "jobs must be >= 0"),
            ("timeout: 0\n", "timeout must be positive"),
            ("policy: sometimes\n", "Unknown failure policy"),
            ("remappings: [a, b]\n", "remappings"),
            ("remappings: {'@a/': 1}\n", "map strings to strings"),
            ("entry_points: [1, 2]\n", "list of strings"),
            ("search_source_dir: 'yes'\n", "search_source_dir"),
        ],
    )
    def test_rejected(self, tmp_path: Path, text: str, message: str) -> None:
        with pytest.raises(ConfigError, match=message):
            load_config(_write(tmp_path, text))

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(_write(tmp_path, "entry_points: [unclosed\n"))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(tmp_path / "nope.yaml")


class TestOverrides:
    """Command-line values replace file values."""

    def test_none_is_ignored(self) -> None:
        config = ImportGraphConfig(jobs=2)
        assert config.with_overrides(jobs=None, policy=None) is config

    def test_values_replace(self) -> None:
        config = ImportGraphConfig(entry_points=("a.sol",))
        updated = config.with_overrides(entry_points=("b.sol",), policy="collect-all", jobs=3)
        assert updated.entry_points == ("b.sol",)
        assert updated.policy is FailurePolicy.COLLECT_ALL
        assert updated.jobs == 3
        assert config.entry_points == ("a.sol",)

    def test_invalid_override(self) -> None:
        with pytest.raises(ConfigError):
            ImportGraphConfig().with_overrides(policy="never")
        with pytest.raises(ConfigError):
            ImportGraphConfig().with_overrides(timeout=-1.0)


class TestFindConfig:
    """Lookup of importgraph.yaml / importgraph.yml."""

    def test_yaml_preferred(self, tmp_path: Path) -> None:
        _write(tmp_path, "", "importgraph.yml")
        yaml_path = _write(tmp_path, "", "importgraph.yaml")
        assert find_config(tmp_path) == yaml_path

    def test_yml_fallback(self, tmp_path: Path) -> None:
        yml = _write(tmp_path, "", "importgraph.yml")
        assert find_config(tmp_path) == yml

    def test_none(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None

    def test_parse_config_none_data(self, tmp_path: Path) -> None:
        config = parse_config(None, tmp_path / "importgraph.yaml")
        assert config == ImportGraphConfig(project_root=tmp_path.resolve())
