"""Stable public API surface for ForgeKit.

This module is the supported import path for library users.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from forgepack import __version__
from forgepack.core.models import Artifact, Snapshot
from forgepack.diff import (
    DEFAULT_LOOKAHEAD,
    DiffEntry,
    DiffStats,
    FileChange,
    calculate_diff_stats,
    generate_line_diff,
    render_diff_html,
    render_line_diff,
)
from forgepack.plugins import PluginManager
from forgepack.storage import open_workspace, write_workspace
from forgepack.versioning import LiveStateResolver, SnapshotStore, Workspace


def diff_text(
    old_text: str,
    new_text: str,
    *,
    lookahead: int = DEFAULT_LOOKAHEAD,
) -> list[DiffEntry]:
    """Compute a greedy line diff between two texts.

    Args:
        old_text: Original text, split on ``\\n``.
        new_text: Updated text, split on ``\\n``.
        lookahead: Resync window size in lines.

    Returns:
        Ordered ``unchanged``/``added``/``removed`` entries.

    Raises:
        TypeError: If either text is not a ``str``.
        ValueError: If ``lookahead`` is smaller than 1.
    """
    return generate_line_diff(old_text, new_text, lookahead=lookahead)


def diff_stats(entries: list[DiffEntry]) -> DiffStats:
    """Summarize a line diff.

    Args:
        entries: Output of :func:`diff_text`.

    Returns:
        Added/removed/unchanged counts and the changed-line percentage.
    """
    return calculate_diff_stats(entries)


def open_store(
    path: str | Path,
    *,
    plugin_manager: PluginManager | None = None,
) -> tuple[Workspace, SnapshotStore]:
    """Load a workspace file, or start an empty workspace if it is missing.

    Args:
        path: Workspace file path.
        plugin_manager: Lifecycle plugins for the returned store. Defaults to
            the active plugin manager.

    Returns:
        Live-state workspace and the snapshot store bound to it.
    """
    return open_workspace(path, plugin_manager=plugin_manager)


def save_store(
    workspace: Workspace,
    store: SnapshotStore,
    path: str | Path,
) -> dict[str, Any]:
    """Persist live state and version histories.

    Args:
        workspace: Live-state workspace.
        store: Snapshot store holding the histories.
        path: Output workspace file path.

    Returns:
        The written workspace envelope.
    """
    return write_workspace(workspace, store, path)


__all__ = [
    "__version__",
    "Artifact",
    "Snapshot",
    "DiffEntry",
    "DiffStats",
    "FileChange",
    "LiveStateResolver",
    "Workspace",
    "SnapshotStore",
    "diff_text",
    "diff_stats",
    "render_line_diff",
    "render_diff_html",
    "open_store",
    "save_store",
]
