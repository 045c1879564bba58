"""Diff subsystem for ForgeKit."""

from forgepack.diff.formatting import (
    render_change_summary,
    render_diff_html,
    render_line_diff,
    render_stats,
)
from forgepack.diff.lines import DEFAULT_LOOKAHEAD, generate_line_diff, split_lines
from forgepack.diff.models import DiffEntry, DiffStats, FileChange
from forgepack.diff.stats import calculate_diff_stats

__all__ = [
    "DEFAULT_LOOKAHEAD",
    "DiffEntry",
    "DiffStats",
    "FileChange",
    "generate_line_diff",
    "split_lines",
    "calculate_diff_stats",
    "render_line_diff",
    "render_diff_html",
    "render_stats",
    "render_change_summary",
]
