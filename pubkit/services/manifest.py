"""Reading and writing the package manifest (``package.json``).

The manifest is treated as an opaque JSON object: only ``version`` and
``devDependencies`` are ever touched, every other field (and the key order)
round-trips unchanged.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from pubkit.core.result import Err, Ok, Result
from pubkit.core.structured import StrDict, as_str_dict
from pubkit.platform.files import atomic_write_text

__all__ = [
    "DEV_DEPENDENCIES",
    "Manifest",
    "ManifestError",
    "ManifestStore",
    "render_manifest",
]

DEV_DEPENDENCIES = "devDependencies"


@dataclass(frozen=True, slots=True)
class ManifestError:
    """Manifest could not be read, parsed or written."""

    message: str
    path: Path | None = None


@dataclass(slots=True)
class Manifest:
    data: StrDict

    @property
    def version(self) -> str:
        value = self.data.get("version")
        return value if isinstance(value, str) else ""

    @version.setter
    def version(self, value: str) -> None:
        self.data["version"] = value

    @property
    def has_dev_dependencies(self) -> bool:
        return DEV_DEPENDENCIES in self.data

    @property
    def dev_dependencies(self) -> object | None:
        return self.data.get(DEV_DEPENDENCIES)

    def remove_dev_dependencies(self) -> None:
        self.data.pop(DEV_DEPENDENCIES, None)

    def insert(self, key: str, value: object, *, position: int) -> None:
        """Set ``key`` so it appears at ``position`` in the serialized object."""
        items = [(k, v) for k, v in self.data.items() if k != key]
        position = max(0, min(position, len(items)))
        items.insert(position, (key, value))
        self.data.clear()
        self.data.update(items)

    def key_position(self, key: str) -> int | None:
        for i, k in enumerate(self.data):
            if k == key:
                return i
        return None


def render_manifest(data: StrDict) -> str:
    """Serialize with 4-space indentation and a trailing newline."""
    return json.dumps(data, indent=4, ensure_ascii=False) + "\n"


@dataclass(frozen=True, slots=True)
class ManifestStore:
    path: Path

    def load(self) -> Result[Manifest, ManifestError]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Err(ManifestError(f"manifest not found: {self.path}", path=self.path))
        except (OSError, UnicodeDecodeError) as e:
            return Err(ManifestError(f"failed to read {self.path.name}: {e}", path=self.path))

        try:
            obj: object = json.loads(text)
        except json.JSONDecodeError as e:
            return Err(ManifestError(f"invalid JSON in {self.path.name}: {e}", path=self.path))

        data = as_str_dict(obj)
        if data is None:
            return Err(ManifestError(f"invalid JSON root in {self.path.name}", path=self.path))

        value = data.get("version")
        if not isinstance(value, str) or not value.strip():
            return Err(ManifestError(f"missing version in {self.path.name}", path=self.path))
        return Ok(Manifest(data=data))

    def save(self, manifest: Manifest) -> Result[None, ManifestError]:
        try:
            atomic_write_text(self.path, render_manifest(manifest.data))
        except OSError as e:
            return Err(ManifestError(f"failed to write {self.path.name}: {e}", path=self.path))
        return Ok(None)
