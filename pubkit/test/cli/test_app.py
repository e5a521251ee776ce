from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path

import pytest
from typer.testing import CliRunner

import pubkit.cli.app as app_module
import pubkit.services.orchestrator as orchestrator
from pubkit.core.config import ROOT_ENV_VAR, Config
from pubkit.core.result import Err, Ok, Result
from pubkit.platform.process import ProcessError
from pubkit.services.errors import CANCELLED, ReleaseError


class _Prompt:
    def __init__(self, answers: list[Result[str, ReleaseError]]) -> None:
        self.answers = answers

    def select(
        self, question: str | None, options: Mapping[str, str] | Sequence[str]
    ) -> Result[str, ReleaseError]:
        return self.answers.pop(0)


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    (tmp_path / "package.json").write_text(
        json.dumps({"version": "1.0.0", "devDependencies": {"x": "1.0.0"}}, indent=4) + "\n",
        encoding="utf-8",
    )
    (tmp_path / "pubkit.toml").write_text(
        "exit_delay = 0\n\n[commands]\n"
        'clean = [["clean"]]\ncompile = [["compile"]]\n'
        'publish = [["publish"]]\ncommit = [["commit", "{version}"]]\n',
        encoding="utf-8",
    )
    monkeypatch.setenv(ROOT_ENV_VAR, str(tmp_path))
    return tmp_path


def _install(monkeypatch: pytest.MonkeyPatch, answers: list[Result[str, ReleaseError]]) -> None:
    prompt = _Prompt(answers)
    monkeypatch.setattr(app_module, "TerminalPrompt", lambda: prompt)


def test_publish_failure_reports_and_exits_zero(
    project: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def failing(commands: Sequence[Sequence[str]], cwd: Path) -> Result[None, ProcessError]:
        if commands[0][0] == "publish":
            return Err(ProcessError(("publish",), 1, "", ""))
        return Ok(None)

    monkeypatch.setattr(orchestrator, "run_commands", failing)
    _install(monkeypatch, [Ok("publish"), Ok("minor"), Ok("publish")])

    result = CliRunner().invoke(app_module.app, [])

    assert result.exit_code == 0
    assert "publish failed (exit 1)" in result.output
    data = json.loads((project / "package.json").read_text(encoding="utf-8"))
    assert data == {"version": "1.0.0", "devDependencies": {"x": "1.0.0"}}


def test_cancel_exits_zero_without_error(project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, [Err(CANCELLED)])
    before = (project / "package.json").read_bytes()

    result = CliRunner().invoke(app_module.app, [])

    assert result.exit_code == 0
    assert "error" not in result.output
    assert (project / "package.json").read_bytes() == before


def test_invalid_config_reports_and_exits_zero(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "pubkit.toml").write_text("exit_delay = -1\n", encoding="utf-8")
    monkeypatch.setenv(ROOT_ENV_VAR, str(tmp_path))
    _install(monkeypatch, [])
    delays: list[float] = []
    monkeypatch.setattr(app_module.time, "sleep", delays.append)

    result = CliRunner().invoke(app_module.app, [])

    assert result.exit_code == 0
    assert "exit_delay must be >= 0" in result.output
    assert result.output.endswith("\n\n")
    assert delays == [Config().exit_delay]
