"""Tests for the frame table.

The frame table is the fixed set of physical frames: each slot holds
one page or nothing.  Faults fill the lowest empty slot before any
eviction is considered.
"""

import pytest

from py_paging.memory.frames import FrameTable


class TestFrameTable:
    """Verify frame lookup and occupancy."""

    def test_starts_empty(self) -> None:
        """A new table should have every frame empty."""
        frames = FrameTable(3)
        assert frames.snapshot() == (None, None, None)
        assert frames.occupied == 0

    def test_capacity(self) -> None:
        """Capacity and len should equal the requested frame count."""
        frames = FrameTable(4)
        expected = 4
        assert frames.capacity == expected
        assert len(frames) == expected

    def test_capacity_below_one_raises(self) -> None:
        """A table needs at least one frame."""
        with pytest.raises(ValueError, match="at least 1"):
            FrameTable(0)

    def test_find_hit_and_miss(self) -> None:
        """find should return the frame index of a resident page, else None."""
        frames = FrameTable(3)
        frames.occupy(1, "B")
        assert frames.find("B") == 1
        assert frames.find("A") is None

    def test_first_empty_is_lowest_index(self) -> None:
        """first_empty should return the lowest free frame."""
        frames = FrameTable(3)
        frames.occupy(0, "A")
        frames.occupy(2, "C")
        assert frames.first_empty() == 1

    def test_first_empty_none_when_full(self) -> None:
        """A full table has no empty frame."""
        frames = FrameTable(2)
        frames.occupy(0, "A")
        frames.occupy(1, "B")
        assert frames.first_empty() is None

    def test_occupy_overwrites(self) -> None:
        """occupy should replace whatever the frame held."""
        frames = FrameTable(1)
        frames.occupy(0, "A")
        frames.occupy(0, "D")
        assert frames.page_at(0) == "D"
        assert frames.find("A") is None

    def test_out_of_range_raises(self) -> None:
        """Frame indices outside the table should raise IndexError."""
        frames = FrameTable(2)
        with pytest.raises(IndexError, match="out of range"):
            frames.occupy(2, "A")
        with pytest.raises(IndexError):
            frames.page_at(-1)

    def test_resident_pages_and_occupied(self) -> None:
        """resident_pages and occupied should ignore empty frames."""
        frames = FrameTable(3)
        frames.occupy(0, "A")
        frames.occupy(1, "B")
        assert frames.resident_pages == frozenset({"A", "B"})
        expected_occupied = 2
        assert frames.occupied == expected_occupied

    def test_iteration_in_index_order(self) -> None:
        """Iterating should yield frame contents by index."""
        frames = FrameTable(3)
        frames.occupy(2, "C")
        assert list(frames) == [None, None, "C"]

    def test_clear(self) -> None:
        """clear should empty every frame but keep the capacity."""
        frames = FrameTable(2)
        frames.occupy(0, "A")
        frames.clear()
        assert frames.snapshot() == (None, None)

    def test_snapshot_is_a_copy(self) -> None:
        """Later writes should not change an earlier snapshot."""
        frames = FrameTable(1)
        before = frames.snapshot()
        frames.occupy(0, "A")
        assert before == (None,)
