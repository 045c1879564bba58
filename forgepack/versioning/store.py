"""Per-entity snapshot history with commit, diff and rollback."""

from __future__ import annotations

import time
from typing import Any, Callable

from forgepack.core.models import Snapshot, clone_artifacts
from forgepack.core.types import DEFAULT_COMMIT_DESCRIPTION
from forgepack.diff.lines import generate_line_diff
from forgepack.diff.models import FileChange
from forgepack.diff.stats import calculate_diff_stats
from forgepack.plugins import (
    CommitEvent,
    PluginManager,
    RollbackEvent,
    VersionDiffEvent,
    get_active_plugin_manager,
)
from forgepack.versioning.workspace import LiveStateResolver

Clock = Callable[[], int]


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def version_id_for(position: int) -> str:
    """Return the id of the snapshot at a 1-based history position."""
    return f"v{position}"


class SnapshotStore:
    """Append-only snapshot histories keyed by entity id.

    Lookups fail softly: a missing entity or version yields ``None``,
    ``False`` or an empty list instead of an exception. Snapshots handed to
    callers are copies, so nothing outside the store can alter history.

    Seeded ``histories`` must number each entity's versions ``v1..vN`` in
    order; anything else raises ``ValueError``.

    The store is not synchronized; callers that share it between writers
    must serialize commit and rollback per entity.
    """

    def __init__(
        self,
        resolver: LiveStateResolver,
        *,
        clock: Clock | None = None,
        plugin_manager: PluginManager | None = None,
        histories: dict[str, list[Snapshot]] | None = None,
    ) -> None:
        self._resolver = resolver
        self._clock = clock or epoch_millis
        self._plugin_manager = plugin_manager
        self._histories: dict[str, list[Snapshot]] = {}
        for entity_id, snapshots in (histories or {}).items():
            ids = [snapshot.id for snapshot in snapshots]
            expected = [version_id_for(position) for position in range(1, len(ids) + 1)]
            if ids != expected:
                raise ValueError(
                    f"history for {entity_id!r} must use ids {expected}, got {ids}"
                )
            self._histories[entity_id] = [snapshot.clone() for snapshot in snapshots]

    @property
    def resolver(self) -> LiveStateResolver:
        return self._resolver

    def commit(
        self,
        entity_id: str,
        description: str | None = None,
    ) -> Snapshot | None:
        """Snapshot the entity's live artifacts as the next version."""
        plugins = self._plugins()
        artifacts = self._resolver.get_artifacts(entity_id)
        if artifacts is None:
            plugins.on_commit(CommitEvent(entity_id=entity_id, status="not_found"))
            return None

        versions = self._histories.setdefault(entity_id, [])
        snapshot = Snapshot(
            id=version_id_for(len(versions) + 1),
            timestamp=int(self._clock()),
            description=DEFAULT_COMMIT_DESCRIPTION if description is None else description,
            artifacts=tuple(clone_artifacts(artifacts)),
        )
        versions.append(snapshot)

        plugins.on_commit(
            CommitEvent(
                entity_id=entity_id,
                status="ok",
                version_id=snapshot.id,
                description=snapshot.description,
                artifact_count=len(snapshot.artifacts),
                timestamp=snapshot.timestamp,
            )
        )
        return snapshot.clone()

    def diff(
        self,
        entity_id: str,
        version_a_id: str,
        version_b_id: str,
    ) -> list[FileChange] | None:
        """Compare two versions file by file.

        Added and modified files follow version B's order, deleted files
        follow version A's order and come last.
        """
        version_a = self._find(entity_id, version_a_id)
        version_b = self._find(entity_id, version_b_id)
        if version_a is None or version_b is None:
            self._plugins().on_version_diff(
                VersionDiffEvent(
                    entity_id=entity_id,
                    version_a_id=version_a_id,
                    version_b_id=version_b_id,
                    status="not_found",
                )
            )
            return None

        changes: list[FileChange] = []
        for file_b in version_b.artifacts:
            file_a = version_a.find(file_b.path)
            if file_a is None:
                changes.append(FileChange(file=file_b.path, type="added"))
            elif file_a.code != file_b.code:
                entries = generate_line_diff(file_a.code, file_b.code)
                changes.append(
                    FileChange(
                        file=file_b.path,
                        type="modified",
                        diff=entries,
                        stats=calculate_diff_stats(entries),
                    )
                )

        for file_a in version_a.artifacts:
            if version_b.find(file_a.path) is None:
                changes.append(FileChange(file=file_a.path, type="deleted"))

        self._plugins().on_version_diff(
            VersionDiffEvent(
                entity_id=entity_id,
                version_a_id=version_a_id,
                version_b_id=version_b_id,
                status="ok",
                summary=summarize_changes(changes),
            )
        )
        return changes

    def rollback(self, entity_id: str, version_id: str) -> bool:
        """Replace the entity's live artifacts with a copy of a stored version.

        History is left as is and nothing is committed.
        """
        target = self._find(entity_id, version_id)
        restored = False
        if target is not None:
            restored = self._resolver.replace_artifacts(
                entity_id,
                clone_artifacts(target.artifacts),
            )

        self._plugins().on_rollback(
            RollbackEvent(
                entity_id=entity_id,
                version_id=version_id,
                status="ok" if restored else "not_found",
                artifact_count=len(target.artifacts) if restored and target is not None else 0,
            )
        )
        return restored

    def get_history(self, entity_id: str) -> list[Snapshot]:
        return [snapshot.clone() for snapshot in self._histories.get(entity_id, [])]

    def get_snapshot(self, entity_id: str, version_id: str) -> Snapshot | None:
        snapshot = self._find(entity_id, version_id)
        return snapshot.clone() if snapshot is not None else None

    def latest(self, entity_id: str) -> Snapshot | None:
        versions = self._histories.get(entity_id)
        if not versions:
            return None
        return versions[-1].clone()

    def entity_ids(self) -> list[str]:
        return list(self._histories.keys())

    def to_dict(self) -> dict[str, Any]:
        return {
            entity_id: [snapshot.to_dict() for snapshot in snapshots]
            for entity_id, snapshots in self._histories.items()
        }

    @classmethod
    def from_dict(
        cls,
        raw: dict[str, Any],
        resolver: LiveStateResolver,
        *,
        clock: Clock | None = None,
        plugin_manager: PluginManager | None = None,
    ) -> "SnapshotStore":
        histories = {
            str(entity_id): [Snapshot.from_dict(item) for item in items]
            for entity_id, items in raw.items()
        }
        return cls(resolver, clock=clock, plugin_manager=plugin_manager, histories=histories)

    def _find(self, entity_id: str, version_id: str) -> Snapshot | None:
        for snapshot in self._histories.get(entity_id, []):
            if snapshot.id == version_id:
                return snapshot
        return None

    def _plugins(self) -> PluginManager:
        if self._plugin_manager is not None:
            return self._plugin_manager
        return get_active_plugin_manager()


def summarize_changes(changes: list[FileChange]) -> dict[str, int]:
    counts = {"added": 0, "modified": 0, "deleted": 0}
    for change in changes:
        counts[change.type] += 1
    return counts
