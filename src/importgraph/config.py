"""Project configuration for importgraph.

A project may keep its build settings in an ``importgraph.yaml`` file at its
root::

    entry_points:
      - contracts/Token.sol
    library_paths:
      - node_modules
    remappings:
      "@openzeppelin/": "node_modules/@openzeppelin/"
    search_source_dir: false
    policy: fail-fast        # or collect-all
    jobs: 0                  # 0 = sequential; N > 0 = concurrent, N in flight
    timeout: null            # seconds per collaborator call (concurrent only)

Every key is optional. Relative ``project_root`` and ``library_paths``
entries are interpreted against the directory holding the configuration file
and stored as absolute paths, so library paths keep their meaning when
``project_root`` or ``--root`` points elsewhere. Entry points are project
files and, like entry points given on the command line, resolve against
``project_root``. Remapping targets are not paths but rewritten import
text: the rewritten specifier is resolved like any other (relative to the
importing file, or searched in the project root and library paths).
Unknown keys and ill-typed values raise ``ConfigError`` rather than being
ignored, so a typo never silently changes a build.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from importgraph.core.graph.models import FailurePolicy
from importgraph.exceptions import ConfigError

CONFIG_FILENAMES = ("importgraph.yaml", "importgraph.yml")


@dataclass(frozen=True)
class ImportGraphConfig:
    """Resolved build settings.

    Attributes:
        project_root: Directory bare specifiers and entry points resolve against.
        entry_points: Entry-point locators, relative to ``project_root``.
        library_paths: Extra search directories for bare specifiers. Those
            read from a file are absolute; relative ones given on the
            command line resolve against ``project_root``.
        remappings: Specifier prefix rewrites, applied before resolution.
        search_source_dir: Search the importing file's directory for bare
            specifiers first.
        policy: Failure policy for the build.
        jobs: 0 selects the sequential engine; a positive value selects the
            concurrent engine with that many collaborator calls in flight.
        timeout: Per-call timeout in seconds for the concurrent engine.
    """

    project_root: Path = field(default_factory=Path.cwd)
    entry_points: tuple[str, ...] = ()
    library_paths: tuple[str, ...] = ()
    remappings: dict[str, str] = field(default_factory=dict)
    search_source_dir: bool = False
    policy: FailurePolicy = FailurePolicy.FAIL_FAST
    jobs: int = 0
    timeout: float | None = None

    @property
    def concurrent(self) -> bool:
        return self.jobs > 0

    def with_overrides(self, **overrides: Any) -> ImportGraphConfig:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        if "policy" in changes:
            try:
                changes["policy"] = FailurePolicy.parse(changes["policy"])
            except ValueError as exc:
                raise ConfigError(str(exc)) from exc
        return _validated(dataclasses.replace(self, **changes))


def _validated(config: ImportGraphConfig) -> ImportGraphConfig:
    if config.jobs < 0:
        raise ConfigError(f"jobs must be >= 0, got {config.jobs}")
    if config.timeout is not None and config.timeout <= 0:
        raise ConfigError(f"timeout must be positive, got {config.timeout}")
    return config


def _expect(data: dict[str, Any], key: str, kind: type | tuple[type, ...], source: Path) -> Any:
    value = data[key]
    # bool is an int subclass; reject it where a number is expected.
    if isinstance(value, bool) and bool not in (kind if isinstance(kind, tuple) else (kind,)):
        raise ConfigError(f"{source}: {key!r} must not be a boolean")
    if not isinstance(value, kind):
        raise ConfigError(
            f"{source}: {key!r} has type {type(value).__name__}, "
            f"expected {getattr(kind, '__name__', kind)}"
        )
    return value


def _string_list(data: dict[str, Any], key: str, source: Path) -> tuple[str, ...]:
    value = data[key]
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{source}: {key!r} must be a list of strings")
    return tuple(value)


def _paths_under(base: Path, paths: tuple[str, ...]) -> tuple[str, ...]:
    return tuple((base / p).resolve().as_posix() for p in paths)


def parse_config(data: Any, source: Path) -> ImportGraphConfig:
    """Validate raw YAML data and build an ``ImportGraphConfig``.

    Args:
        data: Result of ``yaml.safe_load`` (None for an empty file).
        source: Path of the configuration file, used for error messages and
            as the base for relative paths.

    Raises:
        ConfigError: On unknown keys or invalid values.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: top level must be a mapping")

    known = {
        "project_root", "entry_points", "library_paths", "remappings",
        "search_source_dir", "policy", "jobs", "timeout",
    }
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"{source}: unknown key(s): {', '.join(unknown)}")

    base = source.parent.resolve()
    kwargs: dict[str, Any] = {"project_root": base}

    if "project_root" in data:
        kwargs["project_root"] = (base / _expect(data, "project_root", str, source)).resolve()
    if "entry_points" in data:
        kwargs["entry_points"] = _string_list(data, "entry_points", source)
    if "library_paths" in data:
        kwargs["library_paths"] = _paths_under(
            base, _string_list(data, "library_paths", source)
        )
    if "remappings" in data:
        remappings = _expect(data, "remappings", dict, source)
        if not all(isinstance(k, str) and isinstance(v, str) for k, v in remappings.items()):
            raise ConfigError(f"{source}: 'remappings' must map strings to strings")
        kwargs["remappings"] = dict(remappings)
    if "search_source_dir" in data:
        kwargs["search_source_dir"] = _expect(data, "search_source_dir", bool, source)
    if "policy" in data:
        try:
            kwargs["policy"] = FailurePolicy.parse(_expect(data, "policy", str, source))
        except ValueError as exc:
            raise ConfigError(f"{source}: {exc}") from exc
    if "jobs" in data:
        kwargs["jobs"] = _expect(data, "jobs", int, source)
    if data.get("timeout") is not None:
        kwargs["timeout"] = float(_expect(data, "timeout", (int, float), source))

    return _validated(ImportGraphConfig(**kwargs))


def load_config(path: str | Path) -> ImportGraphConfig:
    """Read and validate a YAML configuration file.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or
            fails validation.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read configuration {path}: {exc}") from exc
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    return parse_config(data, path)


def find_config(directory: str | Path) -> Path | None:
    """Return the configuration file in ``directory``, if there is one."""
    for name in CONFIG_FILENAMES:
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    return None
