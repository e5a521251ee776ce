"""Manifest snapshot and guaranteed cleanup for one publish run.

``ReleaseTransaction`` is a context manager. Leaving the ``with`` block on
any path (success, cancellation, error result or exception) does two things:

1. If the run was not committed or cancelled, the version is rolled back to
   the snapshot.
2. ``devDependencies`` are written back if they were stripped, even after a
   successful publish.

Cleanup failures are reported on the console and never raised.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum, auto
from types import TracebackType

from pubkit.core.result import Err, Ok, Result
from pubkit.output.console import ConsoleProtocol
from pubkit.services.manifest import DEV_DEPENDENCIES, Manifest, ManifestError, ManifestStore

__all__ = ["ReleasePhase", "ReleaseTransaction"]


class ReleasePhase(Enum):
    IDLE = auto()
    BUILDING = auto()
    AWAITING_CONFIRMATION = auto()
    PUBLISHING = auto()
    COMMITTING = auto()
    DONE = auto()
    ROLLING_BACK = auto()
    CANCELLED = auto()


_SETTLED = {ReleasePhase.DONE, ReleasePhase.CANCELLED}


@dataclass(slots=True)
class ReleaseTransaction:
    store: ManifestStore
    manifest: Manifest
    console: ConsoleProtocol
    original_version: str
    target_version: str
    original_dev_dependencies: object | None
    dev_dependencies_position: int | None
    phase: ReleasePhase = ReleasePhase.IDLE

    @classmethod
    def begin(
        cls,
        *,
        store: ManifestStore,
        manifest: Manifest,
        target_version: str,
        console: ConsoleProtocol,
    ) -> ReleaseTransaction:
        """Snapshot ``manifest`` before any mutation."""
        return cls(
            store=store,
            manifest=manifest,
            console=console,
            original_version=manifest.version,
            target_version=target_version,
            original_dev_dependencies=copy.deepcopy(manifest.dev_dependencies),
            dev_dependencies_position=manifest.key_position(DEV_DEPENDENCIES),
        )

    def advance(self, phase: ReleasePhase) -> None:
        self.phase = phase

    def apply(self) -> Result[None, ManifestError]:
        """Write the target version and strip devDependencies for publishing."""
        self.console.info(f"Bumping version from {self.original_version} to {self.target_version}")
        self.manifest.version = self.target_version
        self.manifest.remove_dev_dependencies()
        return self.store.save(self.manifest)

    def commit(self) -> None:
        self.phase = ReleasePhase.DONE

    def cancel(self) -> None:
        self.phase = ReleasePhase.CANCELLED

    def rollback(self) -> Result[bool, ManifestError]:
        """Put the original version back. Ok(True) if the manifest was rewritten."""
        self.phase = ReleasePhase.ROLLING_BACK
        if self.manifest.version == self.original_version:
            return Ok(False)
        self.manifest.version = self.original_version
        saved = self.store.save(self.manifest)
        if isinstance(saved, Err):
            return saved
        self.console.info(f"Reverted version back to {self.original_version}")
        return Ok(True)

    def restore_dev_dependencies(self) -> Result[bool, ManifestError]:
        """Write devDependencies back at their original position if they were removed."""
        position = self.dev_dependencies_position
        if position is None or self.manifest.has_dev_dependencies:
            return Ok(False)
        self.manifest.insert(
            DEV_DEPENDENCIES,
            copy.deepcopy(self.original_dev_dependencies),
            position=position,
        )
        saved = self.store.save(self.manifest)
        if isinstance(saved, Err):
            return saved
        self.console.success(f"Restored {DEV_DEPENDENCIES} in {self.store.path.name}")
        return Ok(True)

    def __enter__(self) -> ReleaseTransaction:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self.phase not in _SETTLED:
            rolled = self.rollback()
            if isinstance(rolled, Err):
                self.console.error(f"could not revert version: {rolled.error.message}")

        restored = self.restore_dev_dependencies()
        if isinstance(restored, Err):
            self.console.error(f"could not restore {DEV_DEPENDENCIES}: {restored.error.message}")
