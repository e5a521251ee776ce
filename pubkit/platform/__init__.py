"""Platform abstraction layer."""

from .files import atomic_write_text
from .process import ProcessError, run, run_commands, run_streamed
from .terminal import Key, SystemTerminal, TerminalIO, erase_lines

__all__ = [
    # files
    "atomic_write_text",
    # process
    "ProcessError",
    "run",
    "run_commands",
    "run_streamed",
    # terminal
    "Key",
    "SystemTerminal",
    "TerminalIO",
    "erase_lines",
]
