"""py-paging: a step-by-step page replacement simulator.

Replays a reference string against a fixed number of frames under FIFO,
LRU or Optimal (Belady) replacement, one reference per step, reporting
each hit and fault.

Quick start::

    from py_paging import SimulationController

    sim = SimulationController()
    sim.start(["A", "B", "C", "A", "B", "D"], 3, "LRU")
    for event in sim.run_to_completion():
        print(event.explanation())
    print(sim.summary().format())
"""

from py_paging.controller import DEFAULT_STEP_INTERVAL, SimulationController, StepEvent
from py_paging.engine import (
    ALREADY_COMPLETE,
    AlreadyComplete,
    FilledEmpty,
    Hit,
    InvalidConfigurationError,
    Replaced,
    SimulationState,
    SimulationStateError,
    StepEngine,
    StepResult,
    validate_configuration,
)
from py_paging.memory import (
    FIFOPolicy,
    FrameTable,
    LRUPolicy,
    OptimalPolicy,
    PolicyInvariantViolationError,
    PolicyKind,
    ReplacementPolicy,
    create_policy,
)
from py_paging.stats import StatsCollector, Summary

__all__ = [
    "ALREADY_COMPLETE",
    "DEFAULT_STEP_INTERVAL",
    "AlreadyComplete",
    "FIFOPolicy",
    "FilledEmpty",
    "FrameTable",
    "Hit",
    "InvalidConfigurationError",
    "LRUPolicy",
    "OptimalPolicy",
    "PolicyInvariantViolationError",
    "PolicyKind",
    "Replaced",
    "ReplacementPolicy",
    "SimulationController",
    "SimulationState",
    "SimulationStateError",
    "StatsCollector",
    "StepEngine",
    "StepEvent",
    "StepResult",
    "Summary",
    "create_policy",
    "validate_configuration",
]
