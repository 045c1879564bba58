"""Live artifact state resolved by entity id."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol, runtime_checkable

from forgepack.core.models import Artifact


@runtime_checkable
class LiveStateResolver(Protocol):
    """Maps an entity id to its currently active artifact list."""

    def get_artifacts(self, entity_id: str) -> list[Artifact] | None:
        ...

    def replace_artifacts(self, entity_id: str, artifacts: list[Artifact]) -> bool:
        ...


@dataclass(slots=True)
class Workspace:
    """In-memory live state: one mutable artifact list per entity.

    ``get_artifacts`` hands out the live list itself so callers can edit it
    in place; the snapshot store copies whatever it reads.
    """

    entities: dict[str, list[Artifact]] = field(default_factory=dict)

    def track(self, entity_id: str, artifacts: Iterable[Artifact]) -> list[Artifact]:
        live = list(artifacts)
        self.entities[entity_id] = live
        return live

    def forget(self, entity_id: str) -> bool:
        return self.entities.pop(entity_id, None) is not None

    def get_artifacts(self, entity_id: str) -> list[Artifact] | None:
        return self.entities.get(entity_id)

    def replace_artifacts(self, entity_id: str, artifacts: list[Artifact]) -> bool:
        if entity_id not in self.entities:
            return False
        self.entities[entity_id] = artifacts
        return True

    def entity_ids(self) -> list[str]:
        return list(self.entities.keys())

    def to_dict(self) -> dict[str, Any]:
        return {
            entity_id: [artifact.to_dict() for artifact in artifacts]
            for entity_id, artifacts in self.entities.items()
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Workspace":
        return cls(
            entities={
                str(entity_id): [Artifact.from_dict(item) for item in items]
                for entity_id, items in raw.items()
            }
        )
