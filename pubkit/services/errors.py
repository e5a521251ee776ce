"""Error type for the release workflow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "process_failed",
    "manifest_invalid",
    "invalid_version",
    "not_interactive",
    "invalid_config",
    "cancelled",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical error payload surfaced to the CLI.

    ``cancelled`` is a control signal (the user pressed Escape or Ctrl+C in a
    prompt) and is never reported as a failure.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    @property
    def is_cancellation(self) -> bool:
        return self.kind == "cancelled"

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


CANCELLED = ReleaseError(kind="cancelled", message="cancelled by user")
