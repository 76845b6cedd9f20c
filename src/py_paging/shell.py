"""The shell: command interpreter for the page replacement simulator.

The shell reads a command string, splits it into a command name and
arguments, dispatches to a handler, and returns a string result.  It is
a caller of the simulation, never part of it: every handler goes
through the ``SimulationController``.

Design choices:
    - **Returns strings, not prints.**  This keeps the shell fully
      testable; the REPL decides how to display output.
    - **Command dispatch via a dict.**  Adding a command means writing
      a method and adding one dict entry.
    - **Errors become text.**  Bad input or an invalid state comes back
      as ``Error: ...`` instead of escaping to the REPL.
"""

from collections.abc import Callable
from typing import TypeAlias

from py_paging.controller import SimulationController, StepEvent
from py_paging.engine import InvalidConfigurationError, SimulationState, SimulationStateError
from py_paging.logging import Logger, LogLevel
from py_paging.memory.policies import PolicyInvariantViolationError, PolicyKind
from py_paging.references import (
    ReferenceInputError,
    input_warnings,
    parse_frame_count,
    parse_policy,
    parse_reference_string,
)

_Handler: TypeAlias = Callable[[list[str]], str]

_SOURCE = "shell"
_FORCE_FLAG = "--force"
_MIN_START_ARGS = 3

_USAGE_START = "Usage: start <frames> <FIFO|LRU|Optimal> <page> [page ...] [--force]"

# Everything a handler may turn into "Error: ..." text.
_SIMULATION_ERRORS = (
    InvalidConfigurationError,
    PolicyInvariantViolationError,
    ReferenceInputError,
    SimulationStateError,
)


def format_frames(frames: tuple[object, ...]) -> str:
    """Render frame contents as ``[A] [B] [ ]``."""
    return " ".join(f"[{' ' if page is None else page}]" for page in frames)


def format_event(event: StepEvent) -> str:
    """Render one step as a single line."""
    outcome = "FAULT" if event.is_fault else "HIT"
    return (
        f"Step {event.position + 1}: {event.page}  {outcome:<5}  "
        f"{format_frames(event.frames)}  {event.explanation()}"
    )


class Shell:
    """Command interpreter bound to one simulation controller."""

    EXIT_SENTINEL = "__EXIT__"

    def __init__(
        self,
        *,
        controller: SimulationController | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create a shell.

        Args:
            controller: The controller to drive.  A new one is created
                (sharing ``logger``) if omitted.
            logger: Shared log; defaults to the controller's.

        """
        if controller is None:
            controller = SimulationController(logger=logger)
        self._controller = controller
        self._logger = logger if logger is not None else controller.logger

        self._commands: dict[str, _Handler] = {
            "help": self._cmd_help,
            "start": self._cmd_start,
            "step": self._cmd_step,
            "run": self._cmd_run,
            "pause": self._cmd_pause,
            "resume": self._cmd_resume,
            "reset": self._cmd_reset,
            "status": self._cmd_status,
            "frames": self._cmd_frames,
            "queue": self._cmd_queue,
            "summary": self._cmd_summary,
            "log": self._cmd_log,
            "exit": self._cmd_exit,
        }

    @property
    def controller(self) -> SimulationController:
        """Return the controller this shell drives."""
        return self._controller

    @property
    def command_names(self) -> list[str]:
        """Return the sorted list of command names."""
        return sorted(self._commands)

    def execute(self, command: str) -> str:
        """Parse and execute one command line.

        Returns:
            The command's output, ``Unknown command: ...``, or
            EXIT_SENTINEL for ``exit``.

        """
        parts = command.strip().split()
        if not parts:
            return ""
        name, args = parts[0], parts[1:]
        handler = self._commands.get(name)
        if handler is None:
            return f"Unknown command: {name}"
        try:
            return handler(args)
        except _SIMULATION_ERRORS as e:
            return f"Error: {e}"

    # -- Command handlers ------------------------------------------------

    def _cmd_help(self, _args: list[str]) -> str:
        """List available commands."""
        return "Available commands: " + ", ".join(self.command_names) + "\n" + _USAGE_START

    def _cmd_start(self, args: list[str]) -> str:
        """Start a simulation: ``start <frames> <policy> <refs...> [--force]``."""
        force = _FORCE_FLAG in args
        args = [a for a in args if a != _FORCE_FLAG]
        if len(args) < _MIN_START_ARGS:
            return _USAGE_START

        frames = parse_frame_count(args[0])
        policy = parse_policy(args[1])
        references = parse_reference_string(" ".join(args[2:]))

        warnings = input_warnings(references, frames)
        if warnings and not force:
            lines = [f"Warning: {w}" for w in warnings]
            lines.append(f"Re-run with {_FORCE_FLAG} to continue anyway.")
            return "\n".join(lines)
        for warning in warnings:
            self._logger.warning(warning, source=_SOURCE)

        self._controller.start(references, frames, policy)
        return (
            f"Simulation Running: {policy} with {frames} frames, "
            f"{len(references)} references: {' '.join(references)}"
        )

    def _cmd_step(self, args: list[str]) -> str:
        """Advance one step, or ``step <n>`` steps."""
        count = 1
        if args:
            try:
                count = int(args[0])
            except ValueError:
                return f"Error: step count must be a number, got '{args[0]}'"
        lines: list[str] = []
        for _ in range(max(count, 1)):
            event = self._controller.step()
            if event.page is None:
                lines.append(event.explanation())
                break
            lines.append(format_event(event))
            if event.state is SimulationState.COMPLETED:
                lines.append(self._controller.summary().format())
                break
        return "\n".join(lines)

    def _cmd_run(self, _args: list[str]) -> str:
        """Run the remaining steps to completion."""
        events = self._controller.run_to_completion()
        if not events:
            return "Simulation already complete"
        lines = [format_event(e) for e in events]
        lines.append(self._controller.summary().format())
        return "\n".join(lines)

    def _cmd_pause(self, _args: list[str]) -> str:
        """Pause the simulation."""
        self._controller.pause()
        return "Simulation Paused"

    def _cmd_resume(self, _args: list[str]) -> str:
        """Resume a paused simulation."""
        self._controller.resume()
        return "Simulation Running"

    def _cmd_reset(self, _args: list[str]) -> str:
        """Discard the simulation."""
        self._controller.reset()
        return "Ready"

    def _cmd_status(self, _args: list[str]) -> str:
        """Show state, counters and the current reference."""
        engine = self._controller.engine
        current = engine.current_page if engine.current_page is not None else "-"
        policy = engine.policy if engine.policy is not None else "-"
        lines = [
            f"State: {engine.state}",
            f"Policy: {policy}",
            f"Frames: {engine.capacity}",
            f"Step: {engine.step_index + 1}/{len(engine.sequence)}",
            f"Current reference: {current}",
            f"Page Hits: {engine.hit_count}",
            f"Page Faults: {engine.fault_count}",
        ]
        if engine.error is not None:
            lines.append(f"Error: {engine.error}")
        return "\n".join(lines)

    def _cmd_frames(self, _args: list[str]) -> str:
        """Show the current frame contents."""
        frames = self._controller.engine.frames
        if not frames:
            return "No simulation running"
        return format_frames(frames)

    def _cmd_queue(self, _args: list[str]) -> str:
        """Show the active policy's auxiliary structure."""
        engine = self._controller.engine
        match engine.policy:
            case None:
                return "No simulation running"
            case PolicyKind.FIFO:
                pairs = " ".join(f"{page}@{index + 1}" for page, index in engine.policy_state)
                return f"FIFO queue (oldest first): {pairs or '-'}"
            case PolicyKind.LRU:
                pages = " ".join(str(page) for page in engine.policy_state)
                return f"LRU order (least recent first): {pages or '-'}"
            case PolicyKind.OPTIMAL:
                upcoming = " ".join(str(page) for page in engine.remaining)
                return f"Optimal looks ahead at: {upcoming or '-'}"

    def _cmd_summary(self, _args: list[str]) -> str:
        """Show totals and ratios so far."""
        return self._controller.summary().format()

    def _cmd_log(self, args: list[str]) -> str:
        """Show log entries, optionally ``log <level>`` and above."""
        min_level = None
        if args:
            try:
                min_level = LogLevel[args[0].upper()]
            except KeyError:
                levels = ", ".join(level.name.lower() for level in LogLevel)
                return f"Error: unknown level '{args[0]}' (choose from {levels})"
        entries = self._logger.filter(min_level=min_level)
        return "\n".join(str(e) for e in entries) if entries else "(log is empty)"

    def _cmd_exit(self, _args: list[str]) -> str:
        """Reset the simulation and signal the REPL to stop."""
        if self._controller.state is not SimulationState.IDLE:
            self._controller.reset()
        return self.EXIT_SENTINEL
