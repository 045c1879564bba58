"""Data models for line diffs and version comparisons."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from forgepack.core.types import ChangeType, DiffEntryType


@dataclass(frozen=True, slots=True)
class DiffEntry:
    """A single line-level edit operation."""

    type: DiffEntryType
    line: str
    old_line: int | None = None
    new_line: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "line": self.line,
            "old_line": self.old_line,
            "new_line": self.new_line,
        }


@dataclass(frozen=True, slots=True)
class DiffStats:
    """Aggregate counts over a line diff."""

    added: int = 0
    removed: int = 0
    unchanged: int = 0
    total: int = 0
    change_percentage: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "added": self.added,
            "removed": self.removed,
            "unchanged": self.unchanged,
            "total": self.total,
            "change_percentage": self.change_percentage,
        }


@dataclass(slots=True)
class FileChange:
    """Per-file difference between two snapshot versions."""

    file: str
    type: ChangeType
    diff: list[DiffEntry] = field(default_factory=list)
    stats: DiffStats | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "file": self.file,
            "type": self.type,
        }
        if self.type == "modified":
            payload["diff"] = [entry.to_dict() for entry in self.diff]
            payload["stats"] = self.stats.to_dict() if self.stats is not None else None
        return payload
