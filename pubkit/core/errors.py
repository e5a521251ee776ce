"""Error codes for CLI exit status.

The interactive entry point exits with ``OK`` whether the workflow finished,
was cancelled or failed; failures (including an invalid ``pubkit.toml``) are
reported on stderr first.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")
