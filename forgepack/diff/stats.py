"""Aggregate statistics over line diffs."""

from __future__ import annotations

from typing import Iterable

from forgepack.diff.models import DiffEntry, DiffStats


def calculate_diff_stats(entries: Iterable[DiffEntry]) -> DiffStats:
    """Count entries by type and compute the changed-line percentage.

    The percentage rounds half up and is 0 for an empty diff.
    """
    counts = {"added": 0, "removed": 0, "unchanged": 0}
    total = 0
    for entry in entries:
        counts[entry.type] += 1
        total += 1

    changed = counts["added"] + counts["removed"]
    return DiffStats(
        added=counts["added"],
        removed=counts["removed"],
        unchanged=counts["unchanged"],
        total=total,
        change_percentage=_percentage(changed, total),
    )


def _percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    # round(100 * part / total) with halves rounded up, in integers
    return (200 * part + total) // (2 * total)
