"""Top-level interactive flow: action menu, version menu, release-candidate branch."""

from __future__ import annotations

from typing import cast

from pubkit.core.result import Err, Ok, Result
from pubkit.services.errors import ReleaseError
from pubkit.services.orchestrator import BumpRequest, Prompter, ReleaseOrchestrator
from pubkit.services.version import BumpKind

ACTIONS = {"publish": "Publish", "build": "Build", "clean": "Clean"}
VERSION_TYPES = {
    "rc": "RC (Release Candidate)",
    "patch": "Patch",
    "minor": "Minor",
    "major": "Major",
}
BASE_TYPES = {"patch": "Patch", "minor": "Minor", "major": "Major"}


def choose_bump(
    prompt: Prompter, orchestrator: ReleaseOrchestrator
) -> Result[BumpRequest, ReleaseError]:
    """Ask how to bump. ``rc`` is a menu choice only, never a base bump kind.

    Picking ``rc`` when the current version already is a release candidate
    only moves the counter; otherwise the user picks the base bump that the
    first candidate is paired with.
    """
    choice = prompt.select("Select version type to increase:", VERSION_TYPES)
    if isinstance(choice, Err):
        return choice
    if choice.value != "rc":
        return Ok(BumpRequest(kind=cast(BumpKind, choice.value)))

    has_rc = orchestrator.has_prerelease()
    if isinstance(has_rc, Err):
        return has_rc
    if has_rc.value:
        return Ok(BumpRequest(kind="patch", prerelease=True, prerelease_only=True))

    base = prompt.select("Select base version type to increase for RC:", BASE_TYPES)
    if isinstance(base, Err):
        return base
    return Ok(BumpRequest(kind=cast(BumpKind, base.value), prerelease=True))


def run_interactive(
    prompt: Prompter, orchestrator: ReleaseOrchestrator
) -> Result[None, ReleaseError]:
    action = prompt.select("Select an action:", ACTIONS)
    if isinstance(action, Err):
        return action

    match action.value:
        case "clean":
            return orchestrator.clean()
        case "build":
            return orchestrator.build()
        case "publish":
            request = choose_bump(prompt, orchestrator)
            if isinstance(request, Err):
                return request
            published = orchestrator.publish(request.value)
            if isinstance(published, Err):
                return published
            return Ok(None)
        case other:
            raise AssertionError(f"unexpected action: {other}")
