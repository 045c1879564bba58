"""CLI- and UI-friendly rendering for line diffs and version changes."""

from __future__ import annotations

from html import escape
from typing import Iterable, Sequence

from forgepack.diff.models import DiffEntry, DiffStats, FileChange

_MARKERS = {"added": "+", "removed": "-", "unchanged": " "}


def render_line_diff(entries: Sequence[DiffEntry]) -> str:
    if not entries:
        return ""

    width = max(
        len(str(number))
        for entry in entries
        for number in (entry.old_line, entry.new_line, 0)
        if number is not None
    )
    lines: list[str] = []
    for entry in entries:
        old_num = str(entry.old_line) if entry.old_line is not None else ""
        new_num = str(entry.new_line) if entry.new_line is not None else ""
        gutter = f"{old_num:>{width}} {new_num:>{width}} {_MARKERS[entry.type]}"
        # Only the gutter is trimmed; trailing whitespace in the line is content.
        lines.append(f"{gutter} {entry.line}" if entry.line else gutter.rstrip())
    return "\n".join(lines)


def render_diff_html(entries: Iterable[DiffEntry]) -> str:
    rows: list[str] = []
    for entry in entries:
        old_num = entry.old_line if entry.old_line is not None else ""
        new_num = entry.new_line if entry.new_line is not None else ""
        marker = f"{_MARKERS[entry.type]} " if entry.type != "unchanged" else "  "
        rows.append(
            f'<div class="diff-line {entry.type}">'
            f'<span class="diff-line-number">{old_num}</span>'
            f'<span class="diff-line-number">{new_num}</span>'
            f'<span class="diff-marker">{marker}</span>'
            f"<span>{escape(entry.line)}</span>"
            "</div>"
        )
    return "".join(rows)


def render_stats(stats: DiffStats) -> str:
    return f"{stats.added}+ / {stats.removed}- ({stats.change_percentage}% changed)"


def render_change_summary(changes: Sequence[FileChange]) -> str:
    if not changes:
        return "no changes"

    lines: list[str] = []
    for change in changes:
        if change.type == "modified" and change.stats is not None:
            lines.append(f"modified {change.file} {render_stats(change.stats)}")
        else:
            lines.append(f"{change.type} {change.file}")
    return "\n".join(lines)
