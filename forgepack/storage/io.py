"""Workspace read/write utilities for `.fkw` files."""

from __future__ import annotations

from datetime import datetime, timezone
from hashlib import sha256
import json
from pathlib import Path
from typing import Any

from forgepack.core.canonical import canonical_json, canonicalize
from forgepack.plugins import PluginManager
from forgepack.storage.exceptions import StorageChecksumError, StorageValidationError
from forgepack.storage.schema import DEFAULT_WORKSPACE_VERSION, validate_workspace
from forgepack.versioning import SnapshotStore, Workspace

DEFAULT_WORKSPACE_FILENAME = "forge-workspace.fkw"
WORKSPACE_ENV_VAR = "FORGEKIT_WORKSPACE"


def compute_workspace_checksum(envelope_without_checksum: dict[str, Any]) -> str:
    payload = canonical_json(envelope_without_checksum)
    digest = sha256(payload.encode("utf-8")).hexdigest()
    return f"sha256:{digest}"


def build_workspace_envelope(
    workspace: Workspace,
    store: SnapshotStore,
    *,
    version: str = DEFAULT_WORKSPACE_VERSION,
    metadata: dict[str, Any] | None = None,
) -> dict[str, Any]:
    envelope: dict[str, Any] = {
        "version": version,
        "metadata": {
            "workspace_id": "default",
            "created_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            **(metadata or {}),
        },
        "payload": {
            "live": workspace.to_dict(),
            "history": store.to_dict(),
        },
    }
    envelope["checksum"] = compute_workspace_checksum(envelope)
    validate_workspace(envelope)
    return envelope


def write_workspace(
    workspace: Workspace,
    store: SnapshotStore,
    path: str | Path,
    *,
    metadata: dict[str, Any] | None = None,
) -> dict[str, Any]:
    envelope = build_workspace_envelope(workspace, store, metadata=metadata)
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(
        json.dumps(canonicalize(envelope), indent=2, ensure_ascii=True, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return envelope


def read_workspace_envelope(path: str | Path) -> dict[str, Any]:
    """Read and validate a workspace envelope with checksum verification."""
    target = Path(path)
    try:
        raw_text = target.read_text(encoding="utf-8")
    except UnicodeDecodeError as error:
        raise StorageValidationError(f"Workspace is not valid UTF-8 text: {target}") from error

    try:
        envelope = json.loads(raw_text)
    except json.JSONDecodeError as error:
        raise StorageValidationError(f"Workspace is not valid JSON: {target} ({error})") from error

    if not isinstance(envelope, dict):
        raise StorageValidationError(f"Workspace must be a JSON object: {target}")

    validate_workspace(envelope)

    checksum_actual = envelope.get("checksum")
    checksum_expected = compute_workspace_checksum(
        {
            "version": envelope["version"],
            "metadata": envelope["metadata"],
            "payload": envelope["payload"],
        }
    )
    if checksum_actual != checksum_expected:
        raise StorageChecksumError(
            "Workspace checksum mismatch: "
            f"expected {checksum_expected}, got {checksum_actual}"
        )

    return envelope


def read_workspace(
    path: str | Path,
    *,
    plugin_manager: PluginManager | None = None,
) -> tuple[Workspace, SnapshotStore]:
    envelope = read_workspace_envelope(path)
    workspace = Workspace.from_dict(envelope["payload"]["live"])
    store = SnapshotStore.from_dict(
        envelope["payload"]["history"],
        workspace,
        plugin_manager=plugin_manager,
    )
    return workspace, store


def open_workspace(
    path: str | Path,
    *,
    plugin_manager: PluginManager | None = None,
) -> tuple[Workspace, SnapshotStore]:
    """Read a workspace file, or start an empty one when it does not exist yet."""
    if not Path(path).exists():
        workspace = Workspace()
        return workspace, SnapshotStore(workspace, plugin_manager=plugin_manager)
    return read_workspace(path, plugin_manager=plugin_manager)
