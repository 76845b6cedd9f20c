"""Frame table: the fixed set of physical frames a simulation owns.

Physical memory is modelled as ``capacity`` numbered slots.  Each slot
is either empty (``None``) or holds exactly one resident page.  The
table answers two questions on every reference:

    1. Is the page already resident?  (``find``, the hit test)
    2. Is there a free slot?  (``first_empty``: faults fill the lowest
       empty frame before any eviction is considered)

Writes go through ``occupy``, an unconditional overwrite used both for
filling an empty frame and for replacing a victim.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from typing import TypeAlias

Page: TypeAlias = Hashable


class FrameTable:
    """A fixed-capacity array of frames, each holding a page or None."""

    def __init__(self, capacity: int) -> None:
        """Create a table with ``capacity`` empty frames.

        Args:
            capacity: Number of frames (must be at least 1).

        Raises:
            ValueError: If capacity is less than 1.

        """
        if capacity < 1:
            msg = f"Frame capacity must be at least 1, got {capacity}"
            raise ValueError(msg)
        self._slots: list[Page | None] = [None] * capacity

    @property
    def capacity(self) -> int:
        """Return the number of frames."""
        return len(self._slots)

    @property
    def occupied(self) -> int:
        """Return the number of frames holding a page."""
        return sum(1 for page in self._slots if page is not None)

    @property
    def resident_pages(self) -> frozenset[Page]:
        """Return the set of pages currently held in frames."""
        return frozenset(page for page in self._slots if page is not None)

    def __len__(self) -> int:
        """Return the number of frames."""
        return len(self._slots)

    def __iter__(self) -> Iterator[Page | None]:
        """Iterate over frame contents in index order."""
        return iter(self._slots)

    def find(self, page: Page) -> int | None:
        """Return the frame index holding ``page``, or None on a miss."""
        for index, resident in enumerate(self._slots):
            if resident is not None and resident == page:
                return index
        return None

    def first_empty(self) -> int | None:
        """Return the lowest-index empty frame, or None if all are full."""
        for index, resident in enumerate(self._slots):
            if resident is None:
                return index
        return None

    def page_at(self, frame_index: int) -> Page | None:
        """Return the page held in a frame (None if empty).

        Raises:
            IndexError: If the frame index is out of range.

        """
        self._check_index(frame_index)
        return self._slots[frame_index]

    def occupy(self, frame_index: int, page: Page) -> None:
        """Place ``page`` in a frame, overwriting whatever was there.

        Raises:
            IndexError: If the frame index is out of range.

        """
        self._check_index(frame_index)
        self._slots[frame_index] = page

    def clear(self) -> None:
        """Empty every frame."""
        self._slots = [None] * len(self._slots)

    def snapshot(self) -> tuple[Page | None, ...]:
        """Return an immutable copy of the frame contents."""
        return tuple(self._slots)

    def _check_index(self, frame_index: int) -> None:
        """Raise IndexError if the frame index is out of range."""
        if not 0 <= frame_index < len(self._slots):
            msg = f"Frame {frame_index} out of range (capacity {len(self._slots)})"
            raise IndexError(msg)
