"""Release workflow services."""

from .errors import CANCELLED, ReleaseError
from .manifest import Manifest, ManifestError, ManifestStore
from .orchestrator import BumpRequest, ReleaseOrchestrator
from .transaction import ReleasePhase, ReleaseTransaction
from .version import BumpKind, Version, bump_version, next_version, parse_version

__all__ = [
    "CANCELLED",
    "BumpKind",
    "BumpRequest",
    "Manifest",
    "ManifestError",
    "ManifestStore",
    "ReleaseError",
    "ReleaseOrchestrator",
    "ReleasePhase",
    "ReleaseTransaction",
    "Version",
    "bump_version",
    "next_version",
    "parse_version",
]
