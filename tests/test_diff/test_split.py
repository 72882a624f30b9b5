"""Tests for splitting mixed module/item hunks."""

from __future__ import annotations

from syncdoc.diff.hunk import Hunk
from syncdoc.diff.split import find_split_point, split_hunk_if_mixed, split_hunks

MIGRATED = ["#![doc = module_doc!()]", "", "#[omnidoc]", "pub fn test() {}"]


def _assert_partition(original: Hunk, halves: list[Hunk]) -> None:
    first, second = halves
    assert first.before_start == original.before_start
    assert first.before_end == second.before_start
    assert second.before_end == original.before_end
    assert first.after_start == original.after_start
    assert first.after_end == second.after_start
    assert second.after_end == original.after_end


class TestFindSplitPoint:
    """Content-based boundary detection."""

    def test_module_blank_item(self) -> None:
        assert find_split_point(Hunk(0, 3, 0, 3), MIGRATED) == 2

    def test_module_then_item_without_blank(self) -> None:
        after = ["//! Module doc", "/// Item doc", "pub fn f() {}"]
        assert find_split_point(Hunk(0, 2, 0, 2), after) == 1

    def test_skips_consecutive_module_lines(self) -> None:
        after = ["//! One", "//! Two", "", "/// Item", "fn f() {}"]
        assert find_split_point(Hunk(0, 2, 0, 4), after) == 3

    def test_no_module_line(self) -> None:
        assert find_split_point(Hunk(0, 1, 2, 1), MIGRATED) is None

    def test_module_not_followed_by_item(self) -> None:
        after = ["#![doc = module_doc!()]", "", "use std::io;"]
        assert find_split_point(Hunk(0, 2, 0, 3), after) is None

    def test_item_outside_range(self) -> None:
        assert find_split_point(Hunk(0, 2, 0, 2), MIGRATED) is None


class TestSplitHunkIfMixed:
    """Splitting behaviour and invariants."""

    def test_split_two_before_lines(self) -> None:
        hunk = Hunk(0, 3, 0, 3)
        halves = split_hunk_if_mixed(hunk, MIGRATED)
        assert halves == [Hunk(0, 2, 0, 2), Hunk(2, 1, 2, 1)]
        _assert_partition(hunk, halves)

    def test_split_single_before_line(self) -> None:
        hunk = Hunk(0, 1, 0, 3)
        halves = split_hunk_if_mixed(hunk, MIGRATED)
        assert halves == [Hunk(0, 1, 0, 2), Hunk(1, 0, 2, 1)]
        _assert_partition(hunk, halves)

    def test_split_more_before_lines(self) -> None:
        hunk = Hunk(4, 5, 0, 3)
        halves = split_hunk_if_mixed(hunk, MIGRATED)
        assert halves == [Hunk(4, 2, 0, 2), Hunk(6, 3, 2, 1)]
        _assert_partition(hunk, halves)

    def test_pure_insertion_unchanged(self) -> None:
        hunk = Hunk(0, 0, 0, 3)
        assert split_hunk_if_mixed(hunk, MIGRATED) == [hunk]

    def test_pure_deletion_unchanged(self) -> None:
        hunk = Hunk(0, 3, 0, 0)
        assert split_hunk_if_mixed(hunk, MIGRATED) == [hunk]

    def test_unmixed_unchanged(self) -> None:
        hunk = Hunk(2, 1, 2, 1)
        assert split_hunk_if_mixed(hunk, MIGRATED) == [hunk]

    def test_split_hunks_preserves_order(self) -> None:
        after = MIGRATED + ["", "#[omnidoc]", "pub fn other() {}"]
        hunks = [Hunk(0, 3, 0, 3), Hunk(5, 1, 5, 1)]
        assert split_hunks(hunks, after) == [
            Hunk(0, 2, 0, 2),
            Hunk(2, 1, 2, 1),
            Hunk(5, 1, 5, 1),
        ]
