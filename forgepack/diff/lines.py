"""Greedy line differ with bounded lookahead resynchronization."""

from __future__ import annotations

from forgepack.diff.models import DiffEntry

DEFAULT_LOOKAHEAD = 10


def split_lines(text: str) -> list[str]:
    return text.split("\n")


def generate_line_diff(
    old_text: str,
    new_text: str,
    *,
    lookahead: int = DEFAULT_LOOKAHEAD,
) -> list[DiffEntry]:
    """Align two texts line by line.

    Matching lines are emitted as ``unchanged``. On a mismatch the next
    ``lookahead - 1`` lines of each side are scanned (old side outer, new side
    inner) for the first equal pair. Lines before that resync point are
    emitted as ``removed`` then ``added``. Without a resync point every
    remaining line on both sides is emitted.

    This is not a minimal edit script; repeated lines beyond the window
    produce longer runs than a shortest-edit algorithm would.
    """
    if not isinstance(old_text, str) or not isinstance(new_text, str):
        raise TypeError("generate_line_diff expects str inputs")
    if lookahead < 1:
        raise ValueError(f"lookahead must be >= 1, got {lookahead}")

    old_lines = split_lines(old_text)
    new_lines = split_lines(new_text)
    old_len = len(old_lines)
    new_len = len(new_lines)

    entries: list[DiffEntry] = []
    i = 0
    j = 0
    while i < old_len or j < new_len:
        if i < old_len and j < new_len and old_lines[i] == new_lines[j]:
            entries.append(
                DiffEntry(type="unchanged", line=old_lines[i], old_line=i + 1, new_line=j + 1)
            )
            i += 1
            j += 1
            continue

        resync = _find_resync_point(old_lines, new_lines, i, j, lookahead=lookahead)
        next_i, next_j = resync if resync is not None else (old_len, new_len)

        for k in range(i, next_i):
            entries.append(DiffEntry(type="removed", line=old_lines[k], old_line=k + 1))
        for l in range(j, next_j):
            entries.append(DiffEntry(type="added", line=new_lines[l], new_line=l + 1))

        i = next_i
        j = next_j

    return entries


def _find_resync_point(
    old_lines: list[str],
    new_lines: list[str],
    i: int,
    j: int,
    *,
    lookahead: int,
) -> tuple[int, int] | None:
    old_end = min(i + lookahead, len(old_lines))
    new_end = min(j + lookahead, len(new_lines))
    for k in range(i + 1, old_end):
        for l in range(j + 1, new_end):
            if old_lines[k] == new_lines[l]:
                return k, l
    return None
