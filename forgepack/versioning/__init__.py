"""Snapshot versioning subsystem for ForgeKit."""

from forgepack.versioning.store import (
    SnapshotStore,
    epoch_millis,
    summarize_changes,
    version_id_for,
)
from forgepack.versioning.workspace import LiveStateResolver, Workspace

__all__ = [
    "LiveStateResolver",
    "Workspace",
    "SnapshotStore",
    "epoch_millis",
    "summarize_changes",
    "version_id_for",
]
