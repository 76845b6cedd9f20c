"""Hit and fault statistics derived from an engine's counters.

Nothing here is stored: every ratio is recomputed from the engine's
``hit_count`` and ``fault_count`` when asked, so the numbers can never
drift out of sync with the simulation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from py_paging.engine import StepEngine
    from py_paging.memory.policies import PolicyKind

_PERCENT = 100


@dataclass(frozen=True)
class Summary:
    """End-of-run (or so-far) totals for one simulation.

    ``total_references`` counts the references processed so far.  It
    equals the sequence length only once ``completed`` is True.
    """

    policy: PolicyKind | None
    total_references: int
    hits: int
    faults: int
    hit_ratio: float
    fault_ratio: float
    completed: bool = False

    @property
    def hit_percentage(self) -> float:
        """Return the hit ratio as a percentage."""
        return self.hit_ratio * _PERCENT

    @property
    def fault_percentage(self) -> float:
        """Return the fault ratio as a percentage."""
        return self.fault_ratio * _PERCENT

    def format(self) -> str:
        """Render the summary block shown when a simulation completes."""
        policy = self.policy if self.policy is not None else "-"
        label = "Total References" if self.completed else "References Processed"
        return "\n".join(
            [
                "Simulation Summary",
                f"Algorithm: {policy}",
                f"{label}: {self.total_references}",
                f"Page Hits: {self.hits}",
                f"Page Faults: {self.faults}",
                f"Hit Ratio: {self.hit_percentage:.2f}%",
            ]
        )


class StatsCollector:
    """Read-only statistics view over a StepEngine."""

    def __init__(self, engine: StepEngine) -> None:
        """Attach to an engine whose counters will be read on demand."""
        self._engine = engine

    @property
    def hits(self) -> int:
        """Return the hit count."""
        return self._engine.hit_count

    @property
    def faults(self) -> int:
        """Return the fault count."""
        return self._engine.fault_count

    @property
    def total(self) -> int:
        """Return the number of references processed."""
        return self.hits + self.faults

    @property
    def hit_ratio(self) -> float:
        """Return hits / (hits + faults), or 0.0 before the first step."""
        total = self.total
        if total == 0:
            return 0.0
        return self.hits / total

    @property
    def fault_ratio(self) -> float:
        """Return 1 - hit_ratio."""
        return 1.0 - self.hit_ratio

    def summary(self) -> Summary:
        """Snapshot the current totals."""
        return Summary(
            policy=self._engine.policy,
            total_references=self.total,
            hits=self.hits,
            faults=self.faults,
            hit_ratio=self.hit_ratio,
            fault_ratio=self.fault_ratio,
            completed=self._engine.completed,
        )
