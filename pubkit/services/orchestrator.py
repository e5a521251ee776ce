"""Clean, build and publish workflows.

Every step runs strictly after the previous one has exited; the workflow
never holds the terminal in raw mode while a command is running because the
prompt releases it before returning.

Publish sequence:

    build (unmodified manifest) -> confirm -> bump version + strip
    devDependencies -> publish -> commit and push

The manifest mutation is wrapped in a ``ReleaseTransaction`` so a failure
after the bump rolls the version back, and devDependencies are always
restored when the run ends.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Protocol

from pubkit.core.config import Config
from pubkit.core.result import Err, Ok, Result
from pubkit.output.console import ConsoleProtocol
from pubkit.platform.process import ProcessError, run_commands
from pubkit.services.errors import ReleaseError
from pubkit.services.manifest import ManifestError, ManifestStore
from pubkit.services.transaction import ReleasePhase, ReleaseTransaction
from pubkit.services.version import BumpKind, Version, next_version, parse_version

__all__ = [
    "BumpRequest",
    "CommandRunner",
    "Prompter",
    "PublishOutcome",
    "ReleaseOrchestrator",
]

CommandRunner = Callable[[Sequence[Sequence[str]], Path], Result[None, ProcessError]]
PublishOutcome = Literal["published", "cancelled"]

CONFIRM_PUBLISH = "publish"
CONFIRM_CANCEL = "cancel"


class Prompter(Protocol):
    def select(
        self, question: str | None, options: Mapping[str, str] | Sequence[str]
    ) -> Result[str, ReleaseError]: ...


@dataclass(frozen=True, slots=True)
class BumpRequest:
    """How to derive the published version from the current one.

    ``prerelease_only`` keeps major/minor/patch as they are and only moves
    the prerelease counter; ``kind`` is ignored in that case.
    """

    kind: BumpKind
    prerelease: bool = False
    prerelease_only: bool = False


def _process_error(e: ProcessError) -> ReleaseError:
    hint = (e.stderr.strip() or None) if e.returncode != -1 else None
    return ReleaseError(kind="process_failed", message=str(e), hint=hint)


def _manifest_error(e: ManifestError) -> ReleaseError:
    return ReleaseError(
        kind="manifest_invalid",
        message=e.message,
        hint=str(e.path) if e.path else None,
    )


class ReleaseOrchestrator:
    def __init__(
        self,
        *,
        root: Path,
        config: Config,
        console: ConsoleProtocol,
        prompt: Prompter,
        runner: CommandRunner | None = None,
    ) -> None:
        self._root = root
        self._config = config
        self._console = console
        self._prompt = prompt
        self._runner = runner or run_commands
        self._store = ManifestStore(root / config.manifest)

    def current_version(self) -> Result[Version, ReleaseError]:
        loaded = self._store.load()
        if isinstance(loaded, Err):
            return Err(_manifest_error(loaded.error))
        return self._parse(loaded.value.version)

    def _parse(self, raw: str) -> Result[Version, ReleaseError]:
        version = parse_version(raw)
        if version is None:
            return Err(
                ReleaseError(
                    kind="invalid_version",
                    message=f"cannot parse version {raw!r} in {self._store.path.name}",
                    hint="Expected MAJOR.MINOR.PATCH[-LABEL.N]",
                )
            )
        return Ok(version)

    def has_prerelease(self) -> Result[bool, ReleaseError]:
        """Whether the manifest version already carries the configured prerelease label."""
        current = self.current_version()
        if isinstance(current, Err):
            return current
        return Ok(current.value.has_prerelease(self._config.prerelease_label))

    def _run(self, commands: Sequence[Sequence[str]]) -> Result[None, ReleaseError]:
        result = self._runner(commands, self._root)
        if isinstance(result, Err):
            return Err(_process_error(result.error))
        return Ok(None)

    def clean(self) -> Result[None, ReleaseError]:
        self._console.header("Running clean...")
        result = self._run(self._config.commands.clean)
        if isinstance(result, Err):
            return result
        self._console.success("Clean completed!")
        return Ok(None)

    def build(self) -> Result[None, ReleaseError]:
        self._console.header("Running build...")
        cleaned = self.clean()
        if isinstance(cleaned, Err):
            return cleaned
        result = self._run(self._config.commands.compile)
        if isinstance(result, Err):
            return result
        self._console.success("Build completed!")
        return Ok(None)

    def publish(self, request: BumpRequest) -> Result[PublishOutcome, ReleaseError]:
        self._console.header("Starting publish process...")

        loaded = self._store.load()
        if isinstance(loaded, Err):
            return Err(_manifest_error(loaded.error))
        manifest = loaded.value

        current = self._parse(manifest.version)
        if isinstance(current, Err):
            return current
        target = next_version(
            current.value,
            request.kind,
            prerelease=request.prerelease,
            prerelease_only=request.prerelease_only,
            label=self._config.prerelease_label,
        )

        with ReleaseTransaction.begin(
            store=self._store,
            manifest=manifest,
            target_version=str(target),
            console=self._console,
        ) as txn:
            return self._publish_steps(txn)

    def _publish_steps(self, txn: ReleaseTransaction) -> Result[PublishOutcome, ReleaseError]:
        version = txn.target_version

        # Build against the untouched manifest: tooling may need devDependencies.
        txn.advance(ReleasePhase.BUILDING)
        built = self.build()
        if isinstance(built, Err):
            return built

        txn.advance(ReleasePhase.AWAITING_CONFIRMATION)
        answer = self._prompt.select(
            f"Ready to publish version {version}:",
            {CONFIRM_PUBLISH: f"Publish {version}", CONFIRM_CANCEL: "Cancel"},
        )
        if isinstance(answer, Err) and not answer.error.is_cancellation:
            return answer
        if isinstance(answer, Err) or answer.value == CONFIRM_CANCEL:
            txn.cancel()
            self._console.info("Cancelled. Version not changed.")
            return Ok("cancelled")

        applied = txn.apply()
        if isinstance(applied, Err):
            return Err(_manifest_error(applied.error))

        txn.advance(ReleasePhase.PUBLISHING)
        self._console.header(f"Publishing version {version}...")
        published = self._run(self._config.commands.publish)
        if isinstance(published, Err):
            return published
        self._console.success("Publish completed!")

        txn.advance(ReleasePhase.COMMITTING)
        self._console.header("Committing and pushing...")
        committed = self._run(self._config.commands.commit_for(version))
        if isinstance(committed, Err):
            return committed
        self._console.success("Commit and push completed!")

        txn.commit()
        return Ok("published")
