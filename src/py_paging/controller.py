"""Simulation controller: the caller-facing surface of the engine.

The controller holds no algorithmic state of its own.  It forwards
start / pause / resume / reset to a ``StepEngine`` and turns each step
into a ``StepEvent`` that renderers (shell, web UI, tests) consume.

Two ways to drive a run:

    1. **Synchronous**: call ``step()`` (or ``run_to_completion()``).
    2. **External cadence**: a caller-owned timer calls ``tick()`` at
       a fixed rate.  Like a programmable interval timer, every
       ``interval`` ticks produce one step.  Ticks while the run is
       paused or finished are ignored, so pausing is just "stop
       counting"; a step already in progress is never interrupted.

Listeners registered with ``subscribe()`` receive every StepEvent:
the message-passing boundary between the engine and whatever draws it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from py_paging.engine import (
    AlreadyComplete,
    SimulationState,
    StepEngine,
    validate_configuration,
)
from py_paging.logging import Logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from py_paging.engine import StepResult
    from py_paging.memory.frames import Page
    from py_paging.memory.policies import PolicyKind
    from py_paging.stats import Summary

DEFAULT_STEP_INTERVAL = 1

_SOURCE = "controller"


@dataclass(frozen=True)
class StepEvent:
    """Everything a renderer needs to draw one step.

    Attributes:
        position: Index of the reference this step processed.
        page: The referenced page (None for an AlreadyComplete no-op).
        result: The engine's StepResult.
        frames_before: Frame contents before the step.
        frames: Frame contents after the step.
        hits: Hit count after the step.
        faults: Fault count after the step.
        state: Engine state after the step.

    """

    position: int
    page: Page | None
    result: StepResult
    frames_before: tuple[Page | None, ...]
    frames: tuple[Page | None, ...]
    hits: int
    faults: int
    state: SimulationState

    @property
    def is_fault(self) -> bool:
        """Return True if this step was a page fault."""
        return self.result.is_fault

    def explanation(self) -> str:
        """Describe the step in words, e.g. ``Page A already in Frame 1``."""
        return self.result.describe()


StepListener: TypeAlias = Callable[[StepEvent], None]


class SimulationController:
    """Orchestrates one StepEngine for an interactive caller."""

    def __init__(
        self,
        *,
        engine: StepEngine | None = None,
        interval: int = DEFAULT_STEP_INTERVAL,
        logger: Logger | None = None,
    ) -> None:
        """Create a controller around a (new or given) engine.

        Args:
            engine: The engine to drive.  A new one is created if omitted.
            interval: Number of ticks per automatic step.
            logger: Shared log.  Defaults to the engine's log.

        Raises:
            ValueError: If the interval is not positive.

        """
        if engine is None:
            engine = StepEngine(logger=logger)
        self._engine = engine
        self._logger = logger if logger is not None else engine.logger
        self._interval = DEFAULT_STEP_INTERVAL
        self.interval = interval
        self._ticks = 0
        self._listeners: list[StepListener] = []

    @property
    def engine(self) -> StepEngine:
        """Return the driven engine."""
        return self._engine

    @property
    def logger(self) -> Logger:
        """Return the shared log."""
        return self._logger

    @property
    def state(self) -> SimulationState:
        """Return the engine state."""
        return self._engine.state

    @property
    def interval(self) -> int:
        """Return the number of ticks between automatic steps."""
        return self._interval

    @interval.setter
    def interval(self, value: int) -> None:
        """Set the number of ticks between automatic steps.

        Raises:
            ValueError: If the interval is not positive.

        """
        if value <= 0:
            msg = f"Interval must be positive, got {value}"
            raise ValueError(msg)
        self._interval = value

    def summary(self) -> Summary:
        """Return the engine's summary."""
        return self._engine.summary()

    # -- Listeners -------------------------------------------------------

    def subscribe(self, listener: StepListener) -> None:
        """Deliver every future StepEvent to ``listener``."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: StepListener) -> None:
        """Stop delivering events to ``listener`` (no-op if absent)."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    # -- Lifecycle -------------------------------------------------------

    def start(
        self,
        sequence: Sequence[Page],
        capacity: int,
        policy: PolicyKind | str,
    ) -> None:
        """Start a run, discarding any finished or unfinished previous run.

        The arguments are checked before the previous run is discarded,
        so a rejected configuration leaves that run as it was.

        Raises:
            InvalidConfigurationError: If the arguments are unusable.

        """
        validate_configuration(sequence, capacity, policy)
        if self._engine.state is not SimulationState.IDLE:
            self._logger.info(f"restarting from {self._engine.state}", source=_SOURCE)
            self._engine.reset()
        self._ticks = 0
        self._engine.start(sequence, capacity, policy)

    def pause(self) -> None:
        """Pause the run; ticks stop counting."""
        self._engine.pause()

    def resume(self) -> None:
        """Resume a paused run."""
        self._engine.resume()

    def reset(self) -> None:
        """Discard the run and return to IDLE."""
        self._ticks = 0
        self._engine.reset()

    # -- Stepping --------------------------------------------------------

    def step(self) -> StepEvent:
        """Perform one step now and notify listeners.

        Raises:
            PolicyInvariantViolationError: If the engine is (or becomes)
                stuck in ERROR.
            SimulationStateError: If the engine is IDLE or PAUSED.

        """
        frames_before = self._engine.frames
        result = self._engine.step()
        if isinstance(result, AlreadyComplete):
            return StepEvent(
                position=self._engine.step_index,
                page=None,
                result=result,
                frames_before=frames_before,
                frames=frames_before,
                hits=self._engine.hit_count,
                faults=self._engine.fault_count,
                state=self._engine.state,
            )

        event = StepEvent(
            position=result.position,
            page=result.page,
            result=result,
            frames_before=frames_before,
            frames=self._engine.frames,
            hits=self._engine.hit_count,
            faults=self._engine.fault_count,
            state=self._engine.state,
        )
        for listener in list(self._listeners):
            listener(event)
        return event

    def tick(self) -> StepEvent | None:
        """Advance the external cadence by one tick.

        Returns:
            The StepEvent if this tick triggered a step, else None.

        """
        if self._engine.state is not SimulationState.RUNNING:
            return None
        self._ticks += 1
        if self._ticks < self._interval:
            return None
        self._ticks = 0
        return self.step()

    def run_to_completion(self) -> list[StepEvent]:
        """Step until the run completes.

        Returns:
            The events for every step performed (empty if already complete).

        """
        events: list[StepEvent] = []
        while True:
            event = self.step()
            if isinstance(event.result, AlreadyComplete):
                break
            events.append(event)
            if self._engine.state is not SimulationState.RUNNING:
                break
        return events
