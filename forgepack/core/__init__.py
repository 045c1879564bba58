"""Core models and deterministic primitives for ForgeKit."""

from forgepack.core.canonical import canonical_json, canonicalize
from forgepack.core.models import Artifact, Snapshot, clone_artifacts, count_lines
from forgepack.core.types import (
    DEFAULT_COMMIT_DESCRIPTION,
    ChangeType,
    DiffEntryType,
)

__all__ = [
    "Artifact",
    "Snapshot",
    "DEFAULT_COMMIT_DESCRIPTION",
    "ChangeType",
    "DiffEntryType",
    "canonicalize",
    "canonical_json",
    "clone_artifacts",
    "count_lines",
]
