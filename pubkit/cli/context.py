from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pubkit.core.config import CONFIG_FILENAME, Config, find_project_root, load_config_or_default
from pubkit.core.result import Err
from pubkit.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: Config
    console: ConsoleProtocol
    config_error: str | None = None


def build_context() -> CLIContext:
    """Resolve the project root and config.

    An invalid ``pubkit.toml`` does not abort here: the context falls back to
    default settings and carries the error so the caller can report it and
    still exit normally.
    """
    root = find_project_root()
    console = RichConsole()

    config_result = load_config_or_default(root / CONFIG_FILENAME)
    if isinstance(config_result, Err):
        return CLIContext(
            root=root,
            config=Config(),
            console=console,
            config_error=config_result.error.message,
        )

    return CLIContext(root=root, config=config_result.value, console=console)
