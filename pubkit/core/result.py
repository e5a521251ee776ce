"""Result type for explicit error handling.

Every fallible step of the release workflow (spawning a command, reading the
manifest, prompting the user) returns ``Ok(value)`` or ``Err(error)`` instead
of raising, so the orchestrator can decide in one place what to roll back.

Usage:
    match store.load():
        case Ok(manifest):
            print(manifest.version)
        case Err(error):
            print(f"cannot read manifest: {error.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result carrying ``value``."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed result carrying ``error``."""

    error: E


Result: TypeAlias = Union[Ok[T], Err[E]]
