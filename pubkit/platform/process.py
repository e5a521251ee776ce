"""Subprocess execution with Result-based error handling.

Two modes share one entry point, ``execute``:

- ``captured``: stdout is buffered and returned as text.
- ``streamed``: the child inherits this process's stdout/stderr so long
  running commands (install, build, publish, push) are visible live.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pubkit.core.result import Err, Ok, Result

__all__ = [
    "ProcessError",
    "ProcessOutcome",
    "RunMode",
    "execute",
    "run",
    "run_streamed",
    "run_commands",
]

RunMode = Literal["captured", "streamed"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 when the process could not be spawned
            or timed out.
        stdout: Standard output (empty in streamed mode).
        stderr: Standard error, or the spawn/timeout reason.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        if self.returncode == -1 and self.stderr:
            return f"{cmd_str} failed: {self.stderr}"
        return f"{cmd_str} failed (exit {self.returncode})"


@dataclass(frozen=True, slots=True)
class ProcessOutcome:
    """Result of a command that exited with code 0."""

    returncode: int
    output: str | None


def execute(
    cmd: Sequence[str],
    cwd: Path,
    *,
    mode: RunMode = "captured",
    env: dict[str, str] | None = None,
    timeout: float | None = None,
) -> Result[ProcessOutcome, ProcessError]:
    """Run ``cmd`` to completion; Ok only when the exit code is 0."""
    command = tuple(cmd)
    captured = mode == "captured"
    try:
        proc = subprocess.run(
            list(command),
            cwd=str(cwd),
            env=env,
            capture_output=captured,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=command,
                returncode=-1,
                stdout=e.stdout if isinstance(e.stdout, str) else "",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=command, returncode=-1, stdout="", stderr=str(e)))

    stdout = (proc.stdout or "") if captured else ""
    stderr = (proc.stderr or "") if captured else ""
    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=command,
                returncode=proc.returncode,
                stdout=stdout,
                stderr=stderr,
            )
        )
    return Ok(ProcessOutcome(returncode=0, output=stdout if captured else None))


def run(
    cmd: Sequence[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout ("" if it printed nothing)."""
    result = execute(cmd, cwd, mode="captured", env=env, timeout=timeout)
    if isinstance(result, Err):
        return result
    return Ok(result.value.output or "")


def run_streamed(
    cmd: Sequence[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Execute a command with output streamed live to the terminal."""
    result = execute(cmd, cwd, mode="streamed", env=env)
    if isinstance(result, Err):
        return result
    return Ok(None)


def run_commands(
    commands: Sequence[Sequence[str]],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Run commands one after another (streamed), stopping at the first failure."""
    for cmd in commands:
        result = run_streamed(cmd, cwd, env)
        if isinstance(result, Err):
            return result
    return Ok(None)
