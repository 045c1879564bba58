"""Versioned plugin interfaces and lifecycle event payloads."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

PLUGIN_API_VERSION = "1.0"
PLUGIN_CONFIG_VERSION = 1
PLUGIN_CONFIG_ENV_VAR = "FORGEKIT_PLUGIN_CONFIG"

LifecycleStatus = Literal["ok", "not_found"]


@dataclass(frozen=True, slots=True)
class CommitEvent:
    entity_id: str
    status: LifecycleStatus
    version_id: str | None = None
    description: str | None = None
    artifact_count: int = 0
    timestamp: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class VersionDiffEvent:
    entity_id: str
    version_a_id: str
    version_b_id: str
    status: LifecycleStatus
    summary: dict[str, int] | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class RollbackEvent:
    entity_id: str
    version_id: str
    status: LifecycleStatus
    artifact_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class LifecyclePlugin:
    """Base no-op lifecycle plugin interface (API v1.x)."""

    api_version = PLUGIN_API_VERSION
    name = "lifecycle-plugin"

    def on_commit(self, event: CommitEvent) -> None:
        return None

    def on_version_diff(self, event: VersionDiffEvent) -> None:
        return None

    def on_rollback(self, event: RollbackEvent) -> None:
        return None
