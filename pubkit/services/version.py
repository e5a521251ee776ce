from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Literal

BumpKind = Literal["major", "minor", "patch"]

DEFAULT_PRERELEASE_LABEL = "rc"

_VERSION_RE = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:-([0-9A-Za-z.-]+))?$")


@dataclass(frozen=True, slots=True)
class Version:
    major: int
    minor: int
    patch: int
    prerelease: str | None = None

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            return f"{base}-{self.prerelease}"
        return base

    def prerelease_counter(self, label: str = DEFAULT_PRERELEASE_LABEL) -> int | None:
        """Counter of a ``<label>.N`` prerelease, else None.

        A bare ``<label>`` counts as 0 so the next prerelease is ``<label>.1``.
        """
        if self.prerelease is None:
            return None
        if self.prerelease == label:
            return 0
        head, sep, tail = self.prerelease.partition(".")
        if head != label or not sep or not tail.isdigit():
            return None
        return int(tail)

    def has_prerelease(self, label: str = DEFAULT_PRERELEASE_LABEL) -> bool:
        return self.prerelease_counter(label) is not None

    def bump(self, kind: BumpKind) -> Version:
        match kind:
            case "major":
                return Version(self.major + 1, 0, 0)
            case "minor":
                return Version(self.major, self.minor + 1, 0)
            case "patch":
                return Version(self.major, self.minor, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")

    def next_prerelease(self, label: str = DEFAULT_PRERELEASE_LABEL) -> Version:
        counter = self.prerelease_counter(label)
        n = 1 if counter is None else counter + 1
        return replace(self, prerelease=f"{label}.{n}")


def parse_version(text: str) -> Version | None:
    """Parse ``MAJOR.MINOR.PATCH[-PRERELEASE]``; missing numbers default to 0.

    ``"2"`` parses as 2.0.0 and ``"1.4"`` as 1.4.0. Anything else that does
    not match (letters in the numeric part, empty string) gives None.
    """
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return None
    major, minor, patch, prerelease = m.groups()
    return Version(int(major), int(minor or 0), int(patch or 0), prerelease)


def next_version(
    current: Version,
    kind: BumpKind,
    *,
    prerelease: bool = False,
    prerelease_only: bool = False,
    label: str = DEFAULT_PRERELEASE_LABEL,
) -> Version:
    """Compute the version to publish.

    Unless ``prerelease_only`` is set, the base is bumped by ``kind`` first
    (which drops any prerelease). Then, if ``prerelease`` is set, the
    ``<label>.N`` counter is incremented, or started at 1.
    """
    version = current if prerelease_only else current.bump(kind)
    if prerelease:
        version = version.next_prerelease(label)
    return version


def bump_version(
    version: str,
    kind: BumpKind,
    prerelease: bool = False,
    prerelease_only: bool = False,
    *,
    label: str = DEFAULT_PRERELEASE_LABEL,
) -> str:
    """String form of ``next_version``.

    Raises:
        ValueError: If ``version`` cannot be parsed.
    """
    parsed = parse_version(version)
    if parsed is None:
        raise ValueError(f"invalid version: {version!r}")
    return str(
        next_version(
            parsed,
            kind,
            prerelease=prerelease,
            prerelease_only=prerelease_only,
            label=label,
        )
    )
