"""Output abstraction layer."""

from .console import (
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)
from .formatter import color_enabled, cyan, green, paint

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "color_enabled",
    "cyan",
    "green",
    "paint",
]
