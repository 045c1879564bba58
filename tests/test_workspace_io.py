import json
from pathlib import Path

import pytest

from forgepack.core.models import Artifact
from forgepack.storage import (
    StorageChecksumError,
    StorageValidationError,
    build_workspace_envelope,
    compute_workspace_checksum,
    open_workspace,
    read_workspace,
    read_workspace_envelope,
    write_workspace,
)
from forgepack.versioning import SnapshotStore, Workspace


def _populated() -> tuple[Workspace, SnapshotStore]:
    workspace = Workspace()
    workspace.track(
        "msg-1",
        [
            Artifact.from_code("server.js", "const x = 1;\n", language="javascript"),
            Artifact.from_code("README.md", "# Demo", language="markdown"),
        ],
    )
    store = SnapshotStore(workspace, clock=lambda: 1_700_000_000_000)
    store.commit("msg-1", "initial")
    workspace.get_artifacts("msg-1")[0].code = "const x = 2;\n"
    store.commit("msg-1", "bump")
    return workspace, store


def test_workspace_round_trip(tmp_path: Path) -> None:
    workspace, store = _populated()
    path = tmp_path / "state" / "workspace.fkw"

    envelope = write_workspace(workspace, store, path, metadata={"workspace_id": "demo"})
    assert path.exists()
    assert envelope["metadata"]["workspace_id"] == "demo"

    loaded_workspace, loaded_store = read_workspace(path)
    assert loaded_workspace.to_dict() == workspace.to_dict()
    assert loaded_store.to_dict() == store.to_dict()

    changes = loaded_store.diff("msg-1", "v1", "v2")
    assert changes is not None
    assert [(change.file, change.type) for change in changes] == [("server.js", "modified")]


def test_reloaded_store_keeps_counting_versions(tmp_path: Path) -> None:
    workspace, store = _populated()
    path = tmp_path / "workspace.fkw"
    write_workspace(workspace, store, path)

    _loaded_workspace, loaded_store = read_workspace(path)
    snapshot = loaded_store.commit("msg-1")

    assert snapshot is not None
    assert snapshot.id == "v3"


def test_rollback_on_reloaded_workspace(tmp_path: Path) -> None:
    workspace, store = _populated()
    path = tmp_path / "workspace.fkw"
    write_workspace(workspace, store, path)

    loaded_workspace, loaded_store = read_workspace(path)
    assert loaded_store.rollback("msg-1", "v1") is True
    assert loaded_workspace.get_artifacts("msg-1")[0].code == "const x = 1;\n"


def test_tampered_workspace_fails_checksum(tmp_path: Path) -> None:
    workspace, store = _populated()
    path = tmp_path / "workspace.fkw"
    write_workspace(workspace, store, path)

    raw = json.loads(path.read_text(encoding="utf-8"))
    raw["payload"]["history"]["msg-1"][0]["description"] = "rewritten"
    path.write_text(json.dumps(raw), encoding="utf-8")

    with pytest.raises(StorageChecksumError, match="checksum mismatch"):
        read_workspace_envelope(path)


def test_invalid_json_is_a_validation_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.fkw"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageValidationError, match="not valid JSON"):
        read_workspace(path)


def test_schema_violation_is_reported_with_location(tmp_path: Path) -> None:
    workspace, store = _populated()
    envelope = build_workspace_envelope(workspace, store)
    del envelope["payload"]["live"]["msg-1"][0]["path"]
    path = tmp_path / "invalid.fkw"
    path.write_text(json.dumps(envelope), encoding="utf-8")

    with pytest.raises(StorageValidationError, match="payload.live.msg-1.0"):
        read_workspace(path)


def test_out_of_order_snapshot_ids_are_rejected(tmp_path: Path) -> None:
    workspace, store = _populated()
    envelope = build_workspace_envelope(workspace, store)
    history = envelope["payload"]["history"]["msg-1"]
    history[0]["id"], history[1]["id"] = history[1]["id"], history[0]["id"]
    unsigned = {key: envelope[key] for key in ("version", "metadata", "payload")}
    envelope["checksum"] = compute_workspace_checksum(unsigned)
    path = tmp_path / "reordered.fkw"
    path.write_text(json.dumps(envelope), encoding="utf-8")

    with pytest.raises(StorageValidationError, match="snapshot ids must be"):
        read_workspace(path)


def test_unsupported_major_version_is_rejected(tmp_path: Path) -> None:
    workspace, store = _populated()
    envelope = build_workspace_envelope(workspace, store)
    envelope["version"] = "2.0"
    path = tmp_path / "future.fkw"
    path.write_text(json.dumps(envelope), encoding="utf-8")

    with pytest.raises(StorageValidationError, match="Unsupported workspace major version"):
        read_workspace(path)


def test_open_workspace_starts_empty_when_missing(tmp_path: Path) -> None:
    workspace, store = open_workspace(tmp_path / "missing.fkw")

    assert workspace.entity_ids() == []
    assert store.entity_ids() == []
    assert store.resolver is workspace
