"""Core data models for ForgeKit artifacts and snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from forgepack.core.types import DEFAULT_COMMIT_DESCRIPTION


def count_lines(code: str) -> int:
    """Count lines the same way the line differ splits text."""
    return len(code.split("\n"))


@dataclass(slots=True)
class Artifact:
    """A single generated file in the live state or in a snapshot."""

    path: str
    language: str
    code: str
    lines: int = 0

    @classmethod
    def from_code(cls, path: str, code: str, *, language: str = "text") -> "Artifact":
        return cls(path=path, language=language, code=code, lines=count_lines(code))

    def clone(self) -> "Artifact":
        """Return a structurally independent copy."""
        return Artifact(
            path=self.path,
            language=self.language,
            code=self.code,
            lines=self.lines,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "language": self.language,
            "code": self.code,
            "lines": self.lines,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Artifact":
        code = str(raw.get("code", ""))
        lines = raw.get("lines")
        return cls(
            path=raw["path"],
            language=str(raw.get("language", "text")),
            code=code,
            lines=int(lines) if lines is not None else count_lines(code),
        )


@dataclass(frozen=True, slots=True)
class Snapshot:
    """An immutable, timestamped copy of an entity's artifacts."""

    id: str
    timestamp: int
    description: str = DEFAULT_COMMIT_DESCRIPTION
    artifacts: tuple[Artifact, ...] = ()

    def clone(self) -> "Snapshot":
        return Snapshot(
            id=self.id,
            timestamp=self.timestamp,
            description=self.description,
            artifacts=tuple(clone_artifacts(self.artifacts)),
        )

    def find(self, path: str) -> Artifact | None:
        for artifact in self.artifacts:
            if artifact.path == path:
                return artifact
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "description": self.description,
            "artifacts": [artifact.to_dict() for artifact in self.artifacts],
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Snapshot":
        return cls(
            id=raw["id"],
            timestamp=int(raw["timestamp"]),
            description=str(raw.get("description", DEFAULT_COMMIT_DESCRIPTION)),
            artifacts=tuple(Artifact.from_dict(item) for item in raw.get("artifacts", [])),
        )


def clone_artifacts(artifacts: Iterable[Artifact]) -> list[Artifact]:
    """Deep copy an artifact sequence."""
    return [artifact.clone() for artifact in artifacts]
