"""The step engine: replays a reference string one reference at a time.

Given a reference sequence, a frame count, and a replacement policy,
the engine processes exactly one reference per ``step()`` call:

    1. Look the page up in the frame table.
    2. **Hit**: the page is resident.  Count it and tell the policy.
    3. **Fault**: the page is not resident.  Count it, then either
       fill the lowest empty frame or ask the policy for a victim and
       overwrite the victim's frame.

The engine owns an explicit state machine::

    IDLE  →  RUNNING  ⇄  PAUSED
               ↓
           COMPLETED

    any state  →  IDLE   via reset()
    any state  →  ERROR  on a policy invariant violation

A step is computed in full before anything is committed, so a caller
never observes a half-applied step.  If a policy reports an invariant
violation the engine freezes in ERROR with the last good frames and
counters, and every later ``step()`` raises the same error until
``reset()``.

The engine never owns a timer.  Whoever wants animation pacing calls
``step()`` on their own schedule (see ``SimulationController.tick``).
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar, TypeAlias

from py_paging.logging import Logger
from py_paging.memory.frames import FrameTable
from py_paging.memory.policies import (
    PolicyInvariantViolationError,
    PolicyKind,
    ReplacementPolicy,
    create_policy,
)
from py_paging.stats import StatsCollector

if TYPE_CHECKING:
    from collections.abc import Sequence

    from py_paging.memory.frames import Page
    from py_paging.stats import Summary

_SOURCE = "engine"


class SimulationState(StrEnum):
    """Represent the lifecycle phases of a simulation run."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    ERROR = "error"


class InvalidConfigurationError(ValueError):
    """Raise when start() is given an unusable sequence, capacity, or policy."""


class SimulationStateError(RuntimeError):
    """Raise when an operation is not valid in the engine's current state."""


# ---------------------------------------------------------------------------
# Step results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Hit:
    """The referenced page was already resident in ``frame_index``."""

    position: int
    page: Page
    frame_index: int

    is_fault: ClassVar[bool] = False

    def describe(self) -> str:
        """Explain the step (frames are numbered from 1 for display)."""
        return f"Page {self.page} already in Frame {self.frame_index + 1}"


@dataclass(frozen=True)
class FilledEmpty:
    """A fault loaded the page into the empty frame ``frame_index``."""

    position: int
    page: Page
    frame_index: int

    is_fault: ClassVar[bool] = True

    def describe(self) -> str:
        """Explain the step (frames are numbered from 1 for display)."""
        return f"Page {self.page} loaded into empty Frame {self.frame_index + 1}"


@dataclass(frozen=True)
class Replaced:
    """A fault evicted ``evicted_page`` from ``frame_index`` to load the page."""

    position: int
    page: Page
    frame_index: int
    evicted_page: Page

    is_fault: ClassVar[bool] = True

    def describe(self) -> str:
        """Explain the step (frames are numbered from 1 for display)."""
        return f"Page {self.evicted_page} replaced with {self.page} in Frame {self.frame_index + 1}"


@dataclass(frozen=True)
class AlreadyComplete:
    """step() was called after the whole sequence was processed."""

    is_fault: ClassVar[bool] = False

    def describe(self) -> str:
        """Explain the no-op."""
        return "Simulation already complete"


ALREADY_COMPLETE = AlreadyComplete()

StepResult: TypeAlias = Hit | FilledEmpty | Replaced | AlreadyComplete


def validate_configuration(
    sequence: Sequence[Page],
    capacity: int,
    policy: PolicyKind | str,
) -> tuple[tuple[Page, ...], ReplacementPolicy]:
    """Check start arguments without touching any simulation.

    Returns:
        The sequence copied to a tuple and a fresh policy instance.

    Raises:
        InvalidConfigurationError: If the sequence is empty or holds an
            unusable page, the capacity is not an integer >= 1, or the
            policy is unknown.

    """
    references = tuple(sequence)
    if not references:
        msg = "Reference sequence must contain at least one page"
        raise InvalidConfigurationError(msg)
    for reference in references:
        if reference is None or not isinstance(reference, Hashable):
            msg = f"Invalid page reference: {reference!r}"
            raise InvalidConfigurationError(msg)
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
        msg = f"Number of frames must be at least 1, got {capacity!r}"
        raise InvalidConfigurationError(msg)
    try:
        replacement = create_policy(policy)
    except ValueError as e:
        raise InvalidConfigurationError(str(e)) from e
    return references, replacement


# ---------------------------------------------------------------------------
# Step engine
# ---------------------------------------------------------------------------


class StepEngine:
    """Deterministic page replacement step machine.

    Each engine is an independent simulation: frames, policy state,
    counters and the step index are fields of the instance.
    """

    def __init__(self, *, logger: Logger | None = None) -> None:
        """Create an engine in the IDLE state.

        Args:
            logger: Shared log to write events to.  A private one is
                created when omitted.

        """
        self._logger = logger if logger is not None else Logger()
        self._state: SimulationState = SimulationState.IDLE
        self._sequence: tuple[Page, ...] = ()
        self._frames: FrameTable | None = None
        self._policy: ReplacementPolicy | None = None
        self._step_index = -1
        self._hit_count = 0
        self._fault_count = 0
        self._error: PolicyInvariantViolationError | None = None
        self._stats = StatsCollector(self)

    # -- Read-only views -------------------------------------------------

    @property
    def logger(self) -> Logger:
        """Return the log this engine writes to."""
        return self._logger

    @property
    def state(self) -> SimulationState:
        """Return the current lifecycle state."""
        return self._state

    @property
    def sequence(self) -> tuple[Page, ...]:
        """Return the reference sequence of the current run."""
        return self._sequence

    @property
    def capacity(self) -> int:
        """Return the frame count of the current run (0 when idle)."""
        return self._frames.capacity if self._frames is not None else 0

    @property
    def policy(self) -> PolicyKind | None:
        """Return the active policy, or None when idle."""
        return self._policy.kind if self._policy is not None else None

    @property
    def policy_state(self) -> tuple[Any, ...]:
        """Return the active policy's auxiliary structure (empty when idle)."""
        return self._policy.snapshot() if self._policy is not None else ()

    @property
    def step_index(self) -> int:
        """Return the index of the last processed reference (-1 before any)."""
        return self._step_index

    @property
    def current_page(self) -> Page | None:
        """Return the last processed reference, or None before the first step."""
        if self._step_index < 0:
            return None
        return self._sequence[self._step_index]

    @property
    def remaining(self) -> tuple[Page, ...]:
        """Return the references not yet processed."""
        return self._sequence[self._step_index + 1 :]

    @property
    def hit_count(self) -> int:
        """Return the number of hits so far."""
        return self._hit_count

    @property
    def fault_count(self) -> int:
        """Return the number of faults so far."""
        return self._fault_count

    @property
    def completed(self) -> bool:
        """Return True once every reference has been processed."""
        return self._state is SimulationState.COMPLETED

    @property
    def steps_processed(self) -> int:
        """Return the number of references processed so far."""
        return self._hit_count + self._fault_count

    @property
    def frames(self) -> tuple[Page | None, ...]:
        """Return a snapshot of the frame contents (empty when idle)."""
        return self._frames.snapshot() if self._frames is not None else ()

    @property
    def error(self) -> PolicyInvariantViolationError | None:
        """Return the invariant violation that stopped the run, if any."""
        return self._error

    @property
    def stats(self) -> StatsCollector:
        """Return the statistics view over this engine's counters."""
        return self._stats

    def summary(self) -> Summary:
        """Return hit/fault totals and ratios for the run so far."""
        return self._stats.summary()

    # -- Lifecycle -------------------------------------------------------

    def start(
        self,
        sequence: Sequence[Page],
        capacity: int,
        policy: PolicyKind | str,
    ) -> None:
        """Begin a new run.

        Args:
            sequence: The page references to replay (at least one).
            capacity: Number of frames (at least 1).
            policy: Replacement policy, as a PolicyKind or its name.

        Raises:
            SimulationStateError: If the engine is not IDLE.
            InvalidConfigurationError: If the arguments are unusable.
                Nothing changes when this is raised.

        """
        if self._state is not SimulationState.IDLE:
            msg = f"Cannot start: simulation is {self._state} (reset first)"
            raise SimulationStateError(msg)

        references, replacement = validate_configuration(sequence, capacity, policy)

        self._sequence = references
        self._frames = FrameTable(capacity)
        self._policy = replacement
        self._policy.reset()
        self._step_index = -1
        self._hit_count = 0
        self._fault_count = 0
        self._error = None
        self._state = SimulationState.RUNNING
        self._logger.info(
            f"started {replacement.kind} with {capacity} frames, {len(references)} references",
            source=_SOURCE,
        )

    def pause(self) -> None:
        """Stop accepting steps until resume().

        Raises:
            SimulationStateError: If the engine is not RUNNING.

        """
        self._require(SimulationState.RUNNING, "pause")
        self._state = SimulationState.PAUSED
        self._logger.info(f"paused after step {self._step_index + 1}", source=_SOURCE)

    def resume(self) -> None:
        """Accept steps again after pause().

        Raises:
            SimulationStateError: If the engine is not PAUSED.

        """
        self._require(SimulationState.PAUSED, "resume")
        self._state = SimulationState.RUNNING
        self._logger.info("resumed", source=_SOURCE)

    def reset(self) -> None:
        """Return to IDLE from any state, discarding the run."""
        if self._frames is not None:
            self._frames.clear()
        if self._policy is not None:
            self._policy.reset()
        self._sequence = ()
        self._frames = None
        self._policy = None
        self._step_index = -1
        self._hit_count = 0
        self._fault_count = 0
        self._error = None
        self._state = SimulationState.IDLE
        self._logger.info("reset", source=_SOURCE)

    # -- Stepping --------------------------------------------------------

    def step(self) -> StepResult:
        """Process the next reference.

        Returns:
            Hit, FilledEmpty or Replaced for a processed reference, or
            ALREADY_COMPLETE once the sequence is exhausted.

        Raises:
            PolicyInvariantViolationError: If the policy is inconsistent
                (or already was; the same error is raised again until
                reset()).
            SimulationStateError: If the engine is IDLE or PAUSED.

        """
        match self._state:
            case SimulationState.RUNNING:
                pass
            case SimulationState.COMPLETED:
                return ALREADY_COMPLETE
            case SimulationState.ERROR:
                assert self._error is not None  # noqa: S101
                raise self._error.with_traceback(None)
            case SimulationState.IDLE | SimulationState.PAUSED:
                msg = f"Cannot step: simulation is {self._state}"
                raise SimulationStateError(msg)

        position = self._step_index + 1
        if position >= len(self._sequence):
            self._complete()
            return ALREADY_COMPLETE

        try:
            result = self._process(position)
        except PolicyInvariantViolationError as e:
            self._error = e
            self._state = SimulationState.ERROR
            self._logger.error(f"step {position + 1}: {e}", source=_SOURCE)
            raise

        self._step_index = position
        self._logger.debug(f"step {position + 1}: {result.describe()}", source=_SOURCE)
        if position == len(self._sequence) - 1:
            self._complete()
        return result

    def _process(self, position: int) -> Hit | FilledEmpty | Replaced:
        """Compute and apply one reference; raise before mutating on failure."""
        assert self._frames is not None  # noqa: S101
        assert self._policy is not None  # noqa: S101
        frames = self._frames
        policy = self._policy
        page = self._sequence[position]

        frame_index = frames.find(page)
        if frame_index is not None:
            policy.on_hit(page, frame_index)
            self._hit_count += 1
            return Hit(position=position, page=page, frame_index=frame_index)

        empty = frames.first_empty()
        if empty is not None:
            frames.occupy(empty, page)
            policy.on_load(page, empty)
            self._fault_count += 1
            return FilledEmpty(position=position, page=page, frame_index=empty)

        victim = policy.select_victim(frames, self._sequence[position + 1 :])
        evicted = frames.page_at(victim)
        if evicted is None:
            msg = f"{policy.kind} chose empty frame {victim} as a victim"
            raise PolicyInvariantViolationError(msg)
        frames.occupy(victim, page)
        policy.on_load(page, victim)
        self._fault_count += 1
        return Replaced(position=position, page=page, frame_index=victim, evicted_page=evicted)

    def _complete(self) -> None:
        """Mark the run finished and log the summary."""
        self._state = SimulationState.COMPLETED
        summary = self._stats.summary()
        self._logger.info(
            f"completed: {summary.hits} hits, {summary.faults} faults, "
            f"hit ratio {summary.hit_percentage:.2f}%",
            source=_SOURCE,
        )

    def _require(self, expected: SimulationState, action: str) -> None:
        """Raise SimulationStateError unless the engine is in ``expected``."""
        if self._state is not expected:
            msg = f"Cannot {action}: simulation is {self._state}"
            raise SimulationStateError(msg)
