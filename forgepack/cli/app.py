import json
from importlib.metadata import PackageNotFoundError, version as package_version
from pathlib import Path
from dataclasses import dataclass
from typing import Any, NoReturn

import typer

from forgepack.core.models import Artifact
from forgepack.diff import (
    DEFAULT_LOOKAHEAD,
    calculate_diff_stats,
    generate_line_diff,
    render_change_summary,
    render_diff_html,
    render_line_diff,
    render_stats,
)
from forgepack.storage import (
    DEFAULT_WORKSPACE_FILENAME,
    WORKSPACE_ENV_VAR,
    StorageError,
    open_workspace,
    write_workspace,
)
from forgepack.versioning import SnapshotStore, Workspace

app = typer.Typer(help="ForgeKit CLI")


@dataclass(slots=True)
class _OutputOptions:
    quiet: bool = False
    no_color: bool = False
    stable_json: bool = True


_OUTPUT_OPTIONS = _OutputOptions()
_LANGUAGE_BY_SUFFIX = {
    ".py": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".html": "html",
    ".css": "css",
    ".json": "json",
    ".md": "markdown",
    ".sql": "sql",
    ".sh": "bash",
    ".yml": "yaml",
    ".yaml": "yaml",
}


def _resolve_cli_version() -> str:
    try:
        return package_version("forgekit")
    except PackageNotFoundError:
        from forgepack import __version__ as local_version

        return local_version


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(_resolve_cli_version(), color=False)
    raise typer.Exit()


@app.callback()
def app_options(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show ForgeKit version and exit.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Suppress non-error text output.",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable ANSI color output.",
    ),
    stable_json: bool = typer.Option(
        True,
        "--stable-json/--pretty-json",
        help="Emit stable compact JSON (or pretty JSON).",
    ),
) -> None:
    """Global output controls for all CLI commands."""
    _OUTPUT_OPTIONS.quiet = quiet
    _OUTPUT_OPTIONS.no_color = no_color
    _OUTPUT_OPTIONS.stable_json = stable_json


def _echo(message: str, *, err: bool = False, force: bool = False) -> None:
    if _OUTPUT_OPTIONS.quiet and not err and not force:
        return
    typer.echo(message, err=err, color=not _OUTPUT_OPTIONS.no_color)


def _echo_json(payload: dict[str, Any], *, err: bool = False) -> None:
    if _OUTPUT_OPTIONS.stable_json:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            separators=(",", ":"),
        )
    else:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            indent=2,
        )
    typer.echo(rendered, err=err, color=not _OUTPUT_OPTIONS.no_color)


def _fail(message: str, *, json_output: bool, **fields: Any) -> NoReturn:
    if json_output:
        _echo_json({"status": "error", "exit_code": 1, "message": message, **fields})
    else:
        _echo(message, err=True)
    raise typer.Exit(code=1)


def _workspace_option() -> Any:
    return typer.Option(
        Path(DEFAULT_WORKSPACE_FILENAME),
        "--workspace",
        "-w",
        envvar=WORKSPACE_ENV_VAR,
        help="Workspace file holding live artifacts and version history.",
    )


def _open(
    workspace_path: Path,
    *,
    command: str,
    json_output: bool,
) -> tuple[Workspace, SnapshotStore]:
    try:
        return open_workspace(workspace_path)
    except (StorageError, OSError) as error:
        _fail(
            f"{command} failed: {error}",
            json_output=json_output,
            workspace_path=str(workspace_path),
        )


def _save(
    workspace: Workspace,
    store: SnapshotStore,
    workspace_path: Path,
    *,
    command: str,
    json_output: bool,
) -> None:
    try:
        write_workspace(workspace, store, workspace_path)
    except (StorageError, OSError) as error:
        _fail(
            f"{command} failed: {error}",
            json_output=json_output,
            workspace_path=str(workspace_path),
        )


def _language_for(path: Path) -> str:
    return _LANGUAGE_BY_SUFFIX.get(path.suffix.lower(), "text")


@app.command()
def diff(
    old: Path = typer.Argument(..., help="Path to the old text file."),
    new: Path = typer.Argument(..., help="Path to the new text file."),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable diff output.",
    ),
    html: bool = typer.Option(
        False,
        "--html",
        help="Render diff rows as HTML instead of text.",
    ),
    lookahead: int = typer.Option(
        DEFAULT_LOOKAHEAD,
        "--lookahead",
        min=1,
        help="Resync lookahead window in lines.",
    ),
) -> None:
    """Line-diff two files."""
    try:
        old_text = old.read_text(encoding="utf-8")
        new_text = new.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        _fail(
            f"diff failed: {error}",
            json_output=json_output,
            old_path=str(old),
            new_path=str(new),
        )

    entries = generate_line_diff(old_text, new_text, lookahead=lookahead)
    stats = calculate_diff_stats(entries)

    if json_output:
        _echo_json(
            {
                "status": "ok",
                "exit_code": 0,
                "message": "diff completed",
                "old_path": str(old),
                "new_path": str(new),
                "stats": stats.to_dict(),
                "diff": [entry.to_dict() for entry in entries],
            }
        )
        return

    _echo(f"{old} -> {new} {render_stats(stats)}")
    _echo(render_diff_html(entries) if html else render_line_diff(entries))


@app.command()
def track(
    entity_id: str = typer.Argument(..., help="Entity id (for example a message id)."),
    files: list[Path] = typer.Argument(..., help="Files that make up the live state."),
    workspace_path: Path = _workspace_option(),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable output.",
    ),
) -> None:
    """Replace an entity's live artifacts with the given files."""
    workspace, store = _open(workspace_path, command="track", json_output=json_output)
    artifacts: list[Artifact] = []
    try:
        for file in files:
            artifacts.append(
                Artifact.from_code(
                    file.as_posix(),
                    file.read_text(encoding="utf-8"),
                    language=_language_for(file),
                )
            )
    except (OSError, UnicodeDecodeError) as error:
        _fail(f"track failed: {error}", json_output=json_output, entity_id=entity_id)

    workspace.track(entity_id, artifacts)
    _save(workspace, store, workspace_path, command="track", json_output=json_output)

    if json_output:
        _echo_json(
            {
                "status": "ok",
                "exit_code": 0,
                "entity_id": entity_id,
                "workspace_path": str(workspace_path),
                "artifacts": [artifact.path for artifact in artifacts],
            }
        )
        return
    _echo(f"tracked {len(artifacts)} file(s) for {entity_id}")


@app.command()
def commit(
    entity_id: str = typer.Argument(..., help="Entity id to snapshot."),
    message: str | None = typer.Option(
        None,
        "--message",
        "-m",
        help="Snapshot description (defaults to 'Checkpoint').",
    ),
    workspace_path: Path = _workspace_option(),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable output.",
    ),
) -> None:
    """Commit the entity's live artifacts as a new version."""
    workspace, store = _open(workspace_path, command="commit", json_output=json_output)
    snapshot = store.commit(entity_id, message)
    if snapshot is None:
        _fail(
            f"commit failed: no live artifacts for {entity_id}",
            json_output=json_output,
            entity_id=entity_id,
        )

    _save(workspace, store, workspace_path, command="commit", json_output=json_output)
    if json_output:
        _echo_json({"status": "ok", "exit_code": 0, "snapshot": snapshot.to_dict()})
        return
    _echo(f"committed {snapshot.id} for {entity_id}: {snapshot.description}")


@app.command()
def history(
    entity_id: str = typer.Argument(..., help="Entity id."),
    workspace_path: Path = _workspace_option(),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable output.",
    ),
) -> None:
    """List committed versions for an entity."""
    _workspace, store = _open(workspace_path, command="history", json_output=json_output)
    snapshots = store.get_history(entity_id)

    if json_output:
        _echo_json(
            {
                "status": "ok",
                "exit_code": 0,
                "entity_id": entity_id,
                "versions": [
                    {
                        "id": snapshot.id,
                        "timestamp": snapshot.timestamp,
                        "description": snapshot.description,
                        "files": [artifact.path for artifact in snapshot.artifacts],
                    }
                    for snapshot in snapshots
                ],
            }
        )
        return

    if not snapshots:
        _echo(f"no versions for {entity_id}")
        return
    for snapshot in snapshots:
        _echo(
            f"{snapshot.id} {snapshot.timestamp} files={len(snapshot.artifacts)} "
            f"{snapshot.description}"
        )


@app.command()
def compare(
    entity_id: str = typer.Argument(..., help="Entity id."),
    version_a: str = typer.Argument(..., help="Base version id (for example v1)."),
    version_b: str = typer.Argument(..., help="Target version id (for example v2)."),
    workspace_path: Path = _workspace_option(),
    show_lines: bool = typer.Option(
        False,
        "--show-lines",
        help="Print line diffs for modified files.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable output.",
    ),
) -> None:
    """Diff two committed versions of an entity."""
    _workspace, store = _open(workspace_path, command="compare", json_output=json_output)
    changes = store.diff(entity_id, version_a, version_b)
    if changes is None:
        _fail(
            f"compare failed: unknown entity or version ({entity_id} {version_a} {version_b})",
            json_output=json_output,
            entity_id=entity_id,
        )

    if json_output:
        _echo_json(
            {
                "status": "ok",
                "exit_code": 0,
                "entity_id": entity_id,
                "version_a": version_a,
                "version_b": version_b,
                "changes": [change.to_dict() for change in changes],
            }
        )
        return

    _echo(render_change_summary(changes))
    if show_lines:
        for change in changes:
            if change.type == "modified":
                _echo(f"--- {change.file}")
                _echo(render_line_diff(change.diff))


@app.command()
def rollback(
    entity_id: str = typer.Argument(..., help="Entity id."),
    version_id: str = typer.Argument(..., help="Version id to restore."),
    workspace_path: Path = _workspace_option(),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable output.",
    ),
) -> None:
    """Restore an entity's live artifacts from a committed version."""
    workspace, store = _open(workspace_path, command="rollback", json_output=json_output)
    if not store.rollback(entity_id, version_id):
        _fail(
            f"rollback failed: unknown entity or version ({entity_id} {version_id})",
            json_output=json_output,
            entity_id=entity_id,
            version_id=version_id,
        )

    _save(workspace, store, workspace_path, command="rollback", json_output=json_output)
    if json_output:
        _echo_json(
            {
                "status": "ok",
                "exit_code": 0,
                "entity_id": entity_id,
                "version_id": version_id,
                "artifacts": [
                    artifact.path for artifact in workspace.get_artifacts(entity_id) or []
                ],
            }
        )
        return
    _echo(f"rolled back {entity_id} to {version_id}")


def main() -> None:
    app()
