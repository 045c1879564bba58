import json
from pathlib import Path

from typer.testing import CliRunner

from forgepack.cli.app import app
from forgepack.storage import WORKSPACE_ENV_VAR, read_workspace


def _invoke(*args: str):
    return CliRunner().invoke(app, list(args))


def _json(result) -> dict:
    return json.loads(result.stdout.strip())


def test_cli_track_commit_compare_rollback_flow(tmp_path: Path) -> None:
    workspace_path = tmp_path / "ws.fkw"
    source = tmp_path / "app.py"
    source.write_text("a\nb\nc", encoding="utf-8")

    tracked = _invoke("track", "msg-1", str(source), "--workspace", str(workspace_path), "--json")
    assert tracked.exit_code == 0
    assert _json(tracked)["artifacts"] == [source.as_posix()]

    first = _invoke("commit", "msg-1", "-m", "initial", "-w", str(workspace_path), "--json")
    assert first.exit_code == 0
    assert _json(first)["snapshot"]["id"] == "v1"
    assert _json(first)["snapshot"]["artifacts"][0]["language"] == "python"

    source.write_text("a\nx\nc", encoding="utf-8")
    _invoke("track", "msg-1", str(source), "-w", str(workspace_path))
    second = _invoke("commit", "msg-1", "-w", str(workspace_path), "--json")
    assert _json(second)["snapshot"]["id"] == "v2"
    assert _json(second)["snapshot"]["description"] == "Checkpoint"

    history = _invoke("history", "msg-1", "-w", str(workspace_path), "--json")
    assert [version["id"] for version in _json(history)["versions"]] == ["v1", "v2"]

    compared = _invoke("compare", "msg-1", "v1", "v2", "-w", str(workspace_path), "--json")
    assert compared.exit_code == 0
    changes = _json(compared)["changes"]
    assert len(changes) == 1
    assert changes[0]["type"] == "modified"
    assert changes[0]["stats"]["change_percentage"] == 50

    rolled = _invoke("rollback", "msg-1", "v1", "-w", str(workspace_path), "--json")
    assert rolled.exit_code == 0

    workspace, store = read_workspace(workspace_path)
    assert workspace.get_artifacts("msg-1")[0].code == "a\nb\nc"
    assert [snapshot.id for snapshot in store.get_history("msg-1")] == ["v1", "v2"]


def test_cli_text_output_and_env_workspace(tmp_path: Path, monkeypatch) -> None:
    workspace_path = tmp_path / "env.fkw"
    monkeypatch.setenv(WORKSPACE_ENV_VAR, str(workspace_path))
    source = tmp_path / "index.js"
    source.write_text("one", encoding="utf-8")

    assert "tracked 1 file(s) for msg-9" in _invoke("track", "msg-9", str(source)).stdout
    committed = _invoke("commit", "msg-9", "-m", "first cut")
    assert "committed v1 for msg-9: first cut" in committed.stdout

    source.write_text("two", encoding="utf-8")
    _invoke("track", "msg-9", str(source))
    _invoke("commit", "msg-9")

    compared = _invoke("compare", "msg-9", "v1", "v2", "--show-lines")
    assert f"modified {source.as_posix()} 1+ / 1- (100% changed)" in compared.stdout
    assert "1   - one" in compared.stdout

    history = _invoke("history", "msg-9")
    assert history.stdout.splitlines()[0].startswith("v1 ")
    assert workspace_path.exists()


def test_cli_commit_unknown_entity_fails(tmp_path: Path) -> None:
    result = _invoke("commit", "ghost", "-w", str(tmp_path / "ws.fkw"), "--json")

    assert result.exit_code == 1
    payload = _json(result)
    assert payload["status"] == "error"
    assert payload["entity_id"] == "ghost"
    assert not (tmp_path / "ws.fkw").exists()


def test_cli_compare_and_rollback_unknown_version_fail(tmp_path: Path) -> None:
    workspace_path = tmp_path / "ws.fkw"
    source = tmp_path / "a.txt"
    source.write_text("x", encoding="utf-8")
    _invoke("track", "msg-1", str(source), "-w", str(workspace_path))
    _invoke("commit", "msg-1", "-w", str(workspace_path))

    compared = _invoke("compare", "msg-1", "v1", "v5", "-w", str(workspace_path))
    rolled = _invoke("rollback", "msg-1", "v5", "-w", str(workspace_path), "--json")

    assert compared.exit_code == 1
    assert rolled.exit_code == 1
    assert _json(rolled)["version_id"] == "v5"


def test_cli_history_empty_entity(tmp_path: Path) -> None:
    result = _invoke("history", "nobody", "-w", str(tmp_path / "ws.fkw"))

    assert result.exit_code == 0
    assert "no versions for nobody" in result.stdout


def test_cli_reports_corrupt_workspace(tmp_path: Path) -> None:
    workspace_path = tmp_path / "ws.fkw"
    workspace_path.write_text("[]", encoding="utf-8")

    result = _invoke("history", "msg-1", "-w", str(workspace_path), "--json")

    assert result.exit_code == 1
    assert _json(result)["message"].startswith("history failed:")


def test_cli_reports_unreadable_workspace_path(tmp_path: Path) -> None:
    result = _invoke("history", "msg-1", "-w", str(tmp_path), "--json")

    assert result.exit_code == 1
    payload = _json(result)
    assert payload["status"] == "error"
    assert payload["message"].startswith("history failed:")
    assert payload["workspace_path"] == str(tmp_path)


def test_cli_reports_unwritable_workspace_path(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    source = tmp_path / "a.txt"
    source.write_text("a", encoding="utf-8")
    workspace_path = blocker / "ws.fkw"

    result = _invoke("track", "msg-1", str(source), "-w", str(workspace_path), "--json")

    assert result.exit_code == 1
    payload = _json(result)
    assert payload["status"] == "error"
    assert payload["message"].startswith("track failed:")
    assert payload["workspace_path"] == str(workspace_path)
