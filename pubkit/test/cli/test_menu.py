from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from pubkit.cli.menu import choose_bump, run_interactive
from pubkit.core.config import CommandsConfig, Config
from pubkit.core.result import Err, Ok, Result
from pubkit.output.console import MockConsole
from pubkit.platform.process import ProcessError
from pubkit.services.errors import CANCELLED, ReleaseError
from pubkit.services.orchestrator import BumpRequest, ReleaseOrchestrator

CONFIG = Config(
    commands=CommandsConfig(
        clean=[["clean"]], compile=[["compile"]], publish=[["publish"]], commit=[["commit"]]
    )
)


@dataclass
class ScriptedPrompt:
    """Answers by question text so a test fails loudly on an unexpected menu."""

    answers: dict[str, Result[str, ReleaseError]]
    asked: list[str] = field(default_factory=list)

    def select(
        self, question: str | None, options: Mapping[str, str] | Sequence[str]
    ) -> Result[str, ReleaseError]:
        assert question is not None
        self.asked.append(question)
        answer = self.answers.get(question)
        if answer is None:
            raise AssertionError(f"unexpected prompt: {question}")
        if isinstance(answer, Ok):
            assert answer.value in options
        return answer


@dataclass
class RecordingRunner:
    calls: list[str] = field(default_factory=list)

    def __call__(self, commands: Sequence[Sequence[str]], cwd: Path) -> Result[None, ProcessError]:
        self.calls.extend(c[0] for c in commands)
        return Ok(None)


def _setup(
    tmp_path: Path, version: str, answers: dict[str, Result[str, ReleaseError]]
) -> tuple[ScriptedPrompt, ReleaseOrchestrator, RecordingRunner]:
    (tmp_path / "package.json").write_text(
        json.dumps({"version": version}, indent=4) + "\n", encoding="utf-8"
    )
    prompt = ScriptedPrompt(answers=answers)
    runner = RecordingRunner()
    orch = ReleaseOrchestrator(
        root=tmp_path, config=CONFIG, console=MockConsole(), prompt=prompt, runner=runner
    )
    return prompt, orch, runner


VERSION_Q = "Select version type to increase:"
BASE_Q = "Select base version type to increase for RC:"
ACTION_Q = "Select an action:"


@pytest.mark.parametrize("kind", ["patch", "minor", "major"])
def test_plain_bump(tmp_path: Path, kind: str) -> None:
    prompt, orch, _ = _setup(tmp_path, "1.0.0", {VERSION_Q: Ok(kind)})
    assert choose_bump(prompt, orch) == Ok(BumpRequest(kind=kind))  # type: ignore[arg-type]


def test_rc_on_existing_candidate_only_increments(tmp_path: Path) -> None:
    prompt, orch, _ = _setup(tmp_path, "1.2.4-rc.1", {VERSION_Q: Ok("rc")})
    assert choose_bump(prompt, orch) == Ok(
        BumpRequest(kind="patch", prerelease=True, prerelease_only=True)
    )
    assert prompt.asked == [VERSION_Q]


def test_bare_rc_counts_as_existing_candidate(tmp_path: Path) -> None:
    prompt, orch, _ = _setup(tmp_path, "1.2.3-rc", {VERSION_Q: Ok("rc")})
    assert choose_bump(prompt, orch) == Ok(
        BumpRequest(kind="patch", prerelease=True, prerelease_only=True)
    )
    assert prompt.asked == [VERSION_Q]


def test_bare_rc_publishes_first_numbered_candidate(tmp_path: Path) -> None:
    prompt, orch, _ = _setup(
        tmp_path,
        "1.2.3-rc",
        {
            ACTION_Q: Ok("publish"),
            VERSION_Q: Ok("rc"),
            "Ready to publish version 1.2.3-rc.1:": Ok("publish"),
        },
    )
    assert run_interactive(prompt, orch) == Ok(None)
    data = json.loads((tmp_path / "package.json").read_text(encoding="utf-8"))
    assert data["version"] == "1.2.3-rc.1"


def test_rc_on_stable_asks_for_base(tmp_path: Path) -> None:
    prompt, orch, _ = _setup(tmp_path, "1.2.3", {VERSION_Q: Ok("rc"), BASE_Q: Ok("minor")})
    assert choose_bump(prompt, orch) == Ok(BumpRequest(kind="minor", prerelease=True))
    assert prompt.asked == [VERSION_Q, BASE_Q]


def test_cancel_in_version_menu(tmp_path: Path) -> None:
    prompt, orch, _ = _setup(tmp_path, "1.0.0", {VERSION_Q: Err(CANCELLED)})
    assert choose_bump(prompt, orch) == Err(CANCELLED)


def test_cancel_in_base_menu(tmp_path: Path) -> None:
    prompt, orch, _ = _setup(tmp_path, "1.0.0", {VERSION_Q: Ok("rc"), BASE_Q: Err(CANCELLED)})
    assert choose_bump(prompt, orch) == Err(CANCELLED)


@pytest.mark.parametrize(
    ("action", "expected"),
    [("clean", ["clean"]), ("build", ["clean", "compile"])],
)
def test_run_interactive_simple_actions(
    tmp_path: Path, action: str, expected: list[str]
) -> None:
    prompt, orch, runner = _setup(tmp_path, "1.0.0", {ACTION_Q: Ok(action)})
    assert run_interactive(prompt, orch) == Ok(None)
    assert runner.calls == expected


def test_run_interactive_publish_rc_flow(tmp_path: Path) -> None:
    prompt, orch, runner = _setup(
        tmp_path,
        "1.2.3",
        {
            ACTION_Q: Ok("publish"),
            VERSION_Q: Ok("rc"),
            BASE_Q: Ok("patch"),
            "Ready to publish version 1.2.4-rc.1:": Ok("publish"),
        },
    )
    assert run_interactive(prompt, orch) == Ok(None)
    assert runner.calls == ["clean", "compile", "publish", "commit"]
    data = json.loads((tmp_path / "package.json").read_text(encoding="utf-8"))
    assert data["version"] == "1.2.4-rc.1"


def test_run_interactive_cancelled_at_top(tmp_path: Path) -> None:
    prompt, orch, runner = _setup(tmp_path, "1.0.0", {ACTION_Q: Err(CANCELLED)})
    assert run_interactive(prompt, orch) == Err(CANCELLED)
    assert runner.calls == []
