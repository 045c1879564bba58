from forgepack.diff import DiffEntry, DiffStats, calculate_diff_stats, generate_line_diff


def test_stats_for_single_line_replacement() -> None:
    stats = calculate_diff_stats(generate_line_diff("a\nb\nc", "a\nx\nc"))

    assert stats == DiffStats(added=1, removed=1, unchanged=2, total=4, change_percentage=50)


def test_identical_text_reports_no_change() -> None:
    text = "def f():\n    return 1\n"
    stats = calculate_diff_stats(generate_line_diff(text, text))

    assert stats.added == 0
    assert stats.removed == 0
    assert stats.unchanged == 3
    assert stats.change_percentage == 0


def test_empty_diff_has_zero_percentage() -> None:
    assert calculate_diff_stats([]) == DiffStats()


def test_change_percentage_rounds_half_up() -> None:
    entries = [DiffEntry(type="added", line="new", new_line=1)] + [
        DiffEntry(type="unchanged", line=str(n), old_line=n, new_line=n + 1) for n in range(1, 8)
    ]

    assert calculate_diff_stats(entries).change_percentage == 13


def test_change_percentage_rounds_to_nearest() -> None:
    one_of_three = [
        DiffEntry(type="removed", line="x", old_line=1),
        DiffEntry(type="unchanged", line="y", old_line=2, new_line=1),
        DiffEntry(type="unchanged", line="z", old_line=3, new_line=2),
    ]
    two_of_three = [
        DiffEntry(type="removed", line="x", old_line=1),
        DiffEntry(type="added", line="w", new_line=1),
        DiffEntry(type="unchanged", line="z", old_line=2, new_line=2),
    ]

    assert calculate_diff_stats(one_of_three).change_percentage == 33
    assert calculate_diff_stats(two_of_three).change_percentage == 67


def test_stats_to_dict_keys() -> None:
    payload = calculate_diff_stats(generate_line_diff("a", "b")).to_dict()

    assert payload == {
        "added": 1,
        "removed": 1,
        "unchanged": 0,
        "total": 2,
        "change_percentage": 100,
    }
