"""Reference lifecycle plugin that records version events."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from forgepack.plugins.base import CommitEvent, LifecyclePlugin, RollbackEvent, VersionDiffEvent


@dataclass(slots=True)
class LifecycleTracePlugin(LifecyclePlugin):
    """Appends one NDJSON record per commit, diff and rollback."""

    output_path: str = "forge-runs/plugins/lifecycle-trace.ndjson"
    name: str = "lifecycle-trace"

    def on_commit(self, event: CommitEvent) -> None:
        self._append("on_commit", event.to_dict())

    def on_version_diff(self, event: VersionDiffEvent) -> None:
        self._append("on_version_diff", event.to_dict())

    def on_rollback(self, event: RollbackEvent) -> None:
        self._append("on_rollback", event.to_dict())

    def _append(self, hook: str, event: dict) -> None:
        path = Path(self.output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        record = json.dumps(
            {"hook": hook, "plugin": self.name, "event": event},
            ensure_ascii=True,
            sort_keys=True,
            separators=(",", ":"),
        )
        with path.open("a", encoding="utf-8") as handle:
            handle.write(record + "\n")
