"""ANSI text wrapping for the raw-mode terminal prompt.

Rich cannot be used while the prompt owns the terminal in raw mode (it needs
explicit ``\\r\\n`` line endings and exact line counts), so the prompt paints
its frames with plain escape sequences.
"""

from __future__ import annotations

import os
import sys

__all__ = ["color_enabled", "paint", "green", "cyan"]

RESET = "\x1b[0m"


def color_enabled() -> bool:
    if not sys.stdout.isatty():
        return False
    if os.getenv("NO_COLOR") is not None:
        return False
    return os.getenv("TERM", "").lower() != "dumb"


def paint(text: str, *codes: str, enabled: bool | None = None) -> str:
    """Wrap ``text`` in SGR ``codes`` (e.g. ``"1", "32"``)."""
    if enabled is None:
        enabled = color_enabled()
    if not enabled or not codes:
        return text
    return f"\x1b[{';'.join(codes)}m{text}{RESET}"


def green(text: str, *, enabled: bool | None = None) -> str:
    return paint(text, "32", enabled=enabled)


def cyan(text: str, *, enabled: bool | None = None) -> str:
    return paint(text, "36", enabled=enabled)
