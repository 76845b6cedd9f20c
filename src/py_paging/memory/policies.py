"""Page replacement policies: who gets evicted when every frame is full.

On a page fault with no empty frame the simulator must pick a
**victim**: a resident page whose frame will receive the new page.
The choice is delegated to a replacement policy (Strategy pattern).
Three policies ship:

    - **FIFO**: evict the page that was loaded earliest.  Ignores
      recency entirely; re-referencing a page does not save it.  Can
      suffer from Belady's anomaly (more frames → more faults).
    - **LRU**: evict the page referenced longest ago.  Tracked with
      an OrderedDict so a hit is an O(1) move-to-end.
    - **Optimal** (Belady): evict the page whose next reference lies
      farthest in the future, or that is never referenced again.  Needs
      the future, so it is only possible in a simulator; it is the lower
      bound the other policies are measured against.

Every policy sees the same four events from the engine:

    on_hit          the referenced page was already resident
    on_load         a page was placed in a frame (empty fill or replace)
    select_victim   a fault found no empty frame; return the frame to reuse
    reset           forget everything (new run)

A policy whose auxiliary bookkeeping disagrees with the frame table
raises ``PolicyInvariantViolationError``.  There is no fallback frame:
the engine stops and reports it.
"""

from __future__ import annotations

from collections import OrderedDict, deque
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from py_paging.memory.frames import FrameTable, Page


class PolicyInvariantViolationError(RuntimeError):
    """Raise when a policy's bookkeeping is inconsistent with the frames."""


class PolicyKind(StrEnum):
    """The closed set of replacement policies a simulation can use."""

    FIFO = "FIFO"
    LRU = "LRU"
    OPTIMAL = "Optimal"

    @classmethod
    def parse(cls, name: str) -> PolicyKind:
        """Look up a policy by name, ignoring case.

        Raises:
            ValueError: If the name matches no policy.

        """
        wanted = name.strip().lower()
        for kind in cls:
            if wanted in (kind.value.lower(), kind.name.lower()):
                return kind
        choices = ", ".join(kind.value for kind in cls)
        msg = f"Unknown policy '{name}' (choose from {choices})"
        raise ValueError(msg)


# ---------------------------------------------------------------------------
# Replacement Policy Protocol (Strategy pattern)
# ---------------------------------------------------------------------------


class ReplacementPolicy(Protocol):
    """Interface every replacement algorithm must satisfy."""

    @property
    def kind(self) -> PolicyKind:
        """Return which policy this is."""
        ...  # pragma: no cover

    def reset(self) -> None:
        """Forget all auxiliary state."""
        ...  # pragma: no cover

    def on_hit(self, page: Page, frame_index: int) -> None:
        """Record a reference to a page that is already resident."""
        ...  # pragma: no cover

    def on_load(self, page: Page, frame_index: int) -> None:
        """Record that a page was placed into a frame."""
        ...  # pragma: no cover

    def select_victim(self, frames: FrameTable, upcoming: Sequence[Page]) -> int:
        """Choose the frame to reuse when no frame is empty.

        Args:
            frames: The (full) frame table.
            upcoming: References strictly after the current one.

        Returns:
            The index of the frame whose page is evicted.

        Raises:
            PolicyInvariantViolationError: If the policy's state is
                inconsistent with the frame table.

        """
        ...  # pragma: no cover

    def snapshot(self) -> tuple[object, ...]:
        """Return a read-only view of the auxiliary structure."""
        ...  # pragma: no cover


# ---------------------------------------------------------------------------
# FIFO Policy
# ---------------------------------------------------------------------------


class FIFOPolicy:
    """First In, First Out: evict the oldest loaded page.

    The queue holds ``(page, frame_index)`` pairs in load order, one per
    occupied frame.  The head is always the oldest resident page.
    """

    def __init__(self) -> None:
        """Create an empty FIFO policy."""
        self._queue: deque[tuple[Page, int]] = deque()

    @property
    def kind(self) -> PolicyKind:
        """Return PolicyKind.FIFO."""
        return PolicyKind.FIFO

    def reset(self) -> None:
        """Empty the load-order queue."""
        self._queue.clear()

    def on_hit(self, page: Page, frame_index: int) -> None:
        """FIFO ignores hits: order is purely by load time."""

    def on_load(self, page: Page, frame_index: int) -> None:
        """Append the newly loaded page to the tail of the queue."""
        self._queue.append((page, frame_index))

    def select_victim(self, frames: FrameTable, upcoming: Sequence[Page]) -> int:  # noqa: ARG002
        """Pop the head of the queue and return its frame.

        Raises:
            PolicyInvariantViolationError: If the queue is empty, or its
                head names a frame that no longer holds that page.

        """
        if not self._queue:
            msg = "FIFO queue is empty when an eviction is required"
            raise PolicyInvariantViolationError(msg)
        page, frame_index = self._queue[0]
        if not 0 <= frame_index < frames.capacity or frames.page_at(frame_index) != page:
            msg = f"FIFO queue head ({page}, frame {frame_index}) does not match the frame table"
            raise PolicyInvariantViolationError(msg)
        self._queue.popleft()
        return frame_index

    def snapshot(self) -> tuple[tuple[Page, int], ...]:
        """Return the queue as ``(page, frame_index)`` pairs, oldest first."""
        return tuple(self._queue)


# ---------------------------------------------------------------------------
# LRU Policy
# ---------------------------------------------------------------------------


class LRUPolicy:
    """Least Recently Used: evict the page referenced longest ago.

    Uses an OrderedDict for O(1) move-to-end on access.  The first key
    is always the least recently used page; the last is the most recent.
    """

    def __init__(self) -> None:
        """Create an empty LRU policy."""
        self._order: OrderedDict[Page, None] = OrderedDict()

    @property
    def kind(self) -> PolicyKind:
        """Return PolicyKind.LRU."""
        return PolicyKind.LRU

    def reset(self) -> None:
        """Empty the recency list."""
        self._order.clear()

    def on_hit(self, page: Page, frame_index: int) -> None:
        """Move the page to the most recently used position.

        Raises:
            PolicyInvariantViolationError: If the page is resident in a
                frame but missing from the recency list.

        """
        if page not in self._order:
            msg = f"LRU list is missing resident page {page} (frame {frame_index})"
            raise PolicyInvariantViolationError(msg)
        self._order.move_to_end(page)

    def on_load(self, page: Page, frame_index: int) -> None:  # noqa: ARG002
        """Record the newly loaded page as most recently used."""
        self._order[page] = None
        self._order.move_to_end(page)

    def select_victim(self, frames: FrameTable, upcoming: Sequence[Page]) -> int:  # noqa: ARG002
        """Remove the least recently used page and return its frame.

        Raises:
            PolicyInvariantViolationError: If the recency list is empty or
                its least recent page is not in any frame.

        """
        if not self._order:
            msg = "LRU list is empty when an eviction is required"
            raise PolicyInvariantViolationError(msg)
        page = next(iter(self._order))
        frame_index = frames.find(page)
        if frame_index is None:
            msg = f"LRU victim {page} is not resident in any frame"
            raise PolicyInvariantViolationError(msg)
        del self._order[page]
        return frame_index

    def snapshot(self) -> tuple[Page, ...]:
        """Return resident pages from least to most recently used."""
        return tuple(self._order)


# ---------------------------------------------------------------------------
# Optimal (Belady) Policy
# ---------------------------------------------------------------------------


def next_use(page: Page, upcoming: Sequence[Page]) -> int | None:
    """Return the distance to the next reference of ``page``.

    Distance 0 means the very next reference.  None means the page is
    never referenced again (an infinite distance).
    """
    for distance, reference in enumerate(upcoming):
        if reference == page:
            return distance
    return None


class OptimalPolicy:
    """Belady's optimal algorithm: evict the page needed farthest ahead.

    Stateless: every decision is recomputed from the frame table and the
    rest of the reference sequence.

    Tiebreaker: frames are scanned in ascending index order and the first
    maximum wins.  A page that is never referenced again wins immediately,
    without being compared to later pages that are also never referenced.
    """

    @property
    def kind(self) -> PolicyKind:
        """Return PolicyKind.OPTIMAL."""
        return PolicyKind.OPTIMAL

    def reset(self) -> None:
        """Nothing to forget."""

    def on_hit(self, page: Page, frame_index: int) -> None:
        """Optimal keeps no history."""

    def on_load(self, page: Page, frame_index: int) -> None:
        """Optimal keeps no history."""

    def select_victim(self, frames: FrameTable, upcoming: Sequence[Page]) -> int:
        """Return the frame whose page is referenced farthest ahead.

        Raises:
            PolicyInvariantViolationError: If a frame is empty (victim
                selection is only valid when every frame is occupied).

        """
        victim: int | None = None
        farthest = -1
        for frame_index, page in enumerate(frames):
            if page is None:
                msg = f"Optimal victim selection found empty frame {frame_index}"
                raise PolicyInvariantViolationError(msg)
            distance = next_use(page, upcoming)
            if distance is None:
                return frame_index
            if distance > farthest:
                farthest = distance
                victim = frame_index
        if victim is None:
            msg = "Optimal victim selection found no frames"
            raise PolicyInvariantViolationError(msg)
        return victim

    def snapshot(self) -> tuple[()]:
        """Optimal has no auxiliary structure."""
        return ()


def create_policy(kind: PolicyKind | str) -> FIFOPolicy | LRUPolicy | OptimalPolicy:
    """Build a fresh policy instance.

    Args:
        kind: A PolicyKind or a policy name (case-insensitive).

    Raises:
        ValueError: If the name matches no policy.

    """
    resolved = kind if isinstance(kind, PolicyKind) else PolicyKind.parse(kind)
    match resolved:
        case PolicyKind.FIFO:
            return FIFOPolicy()
        case PolicyKind.LRU:
            return LRUPolicy()
        case PolicyKind.OPTIMAL:
            return OptimalPolicy()
