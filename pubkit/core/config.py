"""Typed configuration loading and access.

The tool works without any configuration. A ``pubkit.toml`` placed next to
the manifest can override the manifest name, the prerelease label, the exit
delay and the external commands run for each step.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_argv_list, get_float, get_str, get_table

__all__ = [
    "Config",
    "CommandsConfig",
    "ConfigError",
    "CONFIG_FILENAME",
    "ROOT_ENV_VAR",
    "load_config",
    "load_config_or_default",
    "find_project_root",
]

CONFIG_FILENAME = "pubkit.toml"
ROOT_ENV_VAR = "PUBKIT_ROOT"

DEFAULT_MANIFEST = "package.json"
DEFAULT_PRERELEASE_LABEL = "rc"
DEFAULT_EXIT_DELAY = 0.25


def _default_clean() -> list[list[str]]:
    return [
        ["rm", "-rf", "./types.d.ts", "node_modules", "package-lock.json"],
        ["npm", "i"],
    ]


def _default_compile() -> list[list[str]]:
    return [
        ["npx", "tsup", "src/types.ts", "--dts", "--dts-only", "--no-splitting", "--out-dir", "."]
    ]


def _default_publish() -> list[list[str]]:
    return [["npm", "publish", "--access", "public"]]


def _default_commit() -> list[list[str]]:
    return [
        ["git", "add", "."],
        ["git", "commit", "-m", "Version {version}"],
        ["git", "push"],
    ]


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class CommandsConfig:
    """External commands per workflow step, each a sequence of argv lists."""

    clean: list[list[str]] = field(default_factory=_default_clean)
    compile: list[list[str]] = field(default_factory=_default_compile)
    publish: list[list[str]] = field(default_factory=_default_publish)
    commit: list[list[str]] = field(default_factory=_default_commit)

    def commit_for(self, version: str) -> list[list[str]]:
        """Commit commands with ``{version}`` substituted."""
        return [[part.replace("{version}", version) for part in argv] for argv in self.commit]


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    manifest: str = DEFAULT_MANIFEST
    prerelease_label: str = DEFAULT_PRERELEASE_LABEL
    exit_delay: float = DEFAULT_EXIT_DELAY
    commands: CommandsConfig = field(default_factory=CommandsConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: If a value is present but has the wrong shape.
        """
        commands: StrDict = get_table(data, "commands") or {}

        steps: dict[str, list[list[str]]] = {}
        for step in ("clean", "compile", "publish", "commit"):
            if step not in commands:
                continue
            argv = get_argv_list(commands, step)
            if argv is None:
                raise ValueError(f"commands.{step} must be a list of non-empty string lists")
            steps[step] = argv

        label = get_str(data, "prerelease_label") or DEFAULT_PRERELEASE_LABEL
        if "." in label or "-" in label:
            raise ValueError(f"prerelease_label must not contain '.' or '-': {label!r}")

        delay = get_float(data, "exit_delay")
        if delay is not None and delay < 0:
            raise ValueError("exit_delay must be >= 0")

        return cls(
            manifest=get_str(data, "manifest") or DEFAULT_MANIFEST,
            prerelease_label=label,
            exit_delay=DEFAULT_EXIT_DELAY if delay is None else delay,
            commands=CommandsConfig(**steps),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling import and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file."""
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config if the file exists, else return defaults.

    A file that exists but is invalid is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)


def find_project_root(manifest: str = DEFAULT_MANIFEST, *, start: Path | None = None) -> Path:
    """Locate the directory the tool operates on.

    Order: ``PUBKIT_ROOT`` if it names a directory, then the nearest directory
    from ``start`` (default: cwd) upward that contains ``manifest`` or a
    ``pubkit.toml``, then ``start`` itself.
    """
    env = os.environ.get(ROOT_ENV_VAR)
    if env:
        p = Path(env).expanduser().resolve()
        if p.is_dir():
            return p

    cwd = (start or Path.cwd()).resolve()
    for parent in (cwd, *cwd.parents):
        if (parent / manifest).is_file() or (parent / CONFIG_FILENAME).is_file():
            return parent
    return cwd
