"""Keyboard input and cursor control for the interactive prompt.

``SystemTerminal`` owns raw mode as a scoped resource: ``raw_mode()`` restores
the saved terminal attributes on every exit path, including exceptions.
Keys are decoded into a small vocabulary (``Key``) so the prompt state machine
never sees escape sequences.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Literal, Protocol

__all__ = [
    "Key",
    "TerminalIO",
    "SystemTerminal",
    "erase_lines",
]

Key = Literal["up", "down", "enter", "cancel", "other"]

# Seconds to wait for the rest of an escape sequence before treating ESC as a keypress.
_ESCAPE_TIMEOUT = 0.05


def erase_lines(count: int) -> str:
    """Escape sequence clearing the current line and ``count`` lines above it.

    The cursor ends at column 0 of the topmost cleared line.
    """
    return "\r" + "\x1b[2K\x1b[1A" * count + "\x1b[2K"


class TerminalIO(Protocol):
    """What the prompt needs from a terminal."""

    def is_interactive(self) -> bool: ...

    def raw_mode(self) -> AbstractContextManager[None]:
        """Disable line buffering and echo until the context exits."""
        ...

    def read_key(self) -> Key:
        """Block until one key has been pressed."""
        ...

    def read_line(self) -> str:
        """Read one line in normal (cooked) mode, without the trailing newline."""
        ...

    def write(self, text: str) -> None: ...


class SystemTerminal:
    """Terminal backed by the process's stdin/stdout."""

    def is_interactive(self) -> bool:
        return bool(sys.stdin.isatty() and sys.stdout.isatty())

    @contextmanager
    def raw_mode(self) -> Iterator[None]:
        if os.name == "nt":
            yield
            return

        import termios
        import tty

        fd = sys.stdin.fileno()
        old = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old)

    def read_key(self) -> Key:
        if os.name == "nt":
            return _read_key_windows()
        return _read_key_posix(sys.stdin.fileno())

    def read_line(self) -> str:
        line = sys.stdin.readline()
        return line.rstrip("\r\n")

    def write(self, text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()


def _read_key_windows() -> Key:
    import msvcrt

    ch = msvcrt.getwch()
    if ch in ("\r", "\n"):
        return "enter"
    if ch in ("\x1b", "\x03"):
        return "cancel"
    if ch in ("\x00", "\xe0"):
        ch2 = msvcrt.getwch()
        if ch2 == "H":
            return "up"
        if ch2 == "P":
            return "down"
    return "other"


def _pending(fd: int) -> bool:
    import select

    ready, _, _ = select.select([fd], [], [], _ESCAPE_TIMEOUT)
    return bool(ready)


def _read_key_posix(fd: int) -> Key:
    # os.read bypasses sys.stdin's buffer so select() sees unread sequence bytes.
    ch = os.read(fd, 1)
    if ch in (b"\r", b"\n"):
        return "enter"
    if ch == b"\x03":
        return "cancel"
    if ch != b"\x1b":
        return "other"

    if not _pending(fd):
        return "cancel"
    c2 = os.read(fd, 1)
    if c2 not in (b"[", b"O"):
        return "other"
    c3 = os.read(fd, 1)
    if c3 == b"A":
        return "up"
    if c3 == b"B":
        return "down"
    return "other"
