"""Interactive REPL (Read-Eval-Print Loop) for the simulator.

The REPL creates a shell and enters the classic loop:

    1. **Read**: display a prompt and read user input.
    2. **Eval**: pass the command to ``shell.execute()``.
    3. **Print**: display the result.
    4. **Loop**: repeat until the shell returns the exit sentinel.

The shell is fully testable (returns strings, no I/O); the REPL is the
thin I/O wrapper that connects it to ``stdin``/``stdout``.  The helper
functions (``build_prompt``, ``format_banner``) are pure and testable.
"""

import readline

from py_paging.completer import Completer
from py_paging.controller import SimulationController
from py_paging.engine import SimulationState
from py_paging.shell import Shell

_BANNER_WIDTH = 42


def format_banner() -> str:
    """Return the greeting printed when the REPL starts."""
    border = "=" * _BANNER_WIDTH
    return (
        f"\n  {border}\n"
        "          py-paging v0.1.0\n"
        "    Page replacement: FIFO, LRU, Optimal\n"
        f"  {border}\n\n"
        "Try: start 3 FIFO A B C A B D\n"
        "Type 'help' for commands, 'exit' to quit.\n"
    )


def build_prompt(controller: SimulationController) -> str:
    """Build the prompt, showing the simulation state when not idle.

    Returns:
        ``paging $ `` when idle, else e.g. ``paging [running 3/6] $ ``.

    """
    engine = controller.engine
    if engine.state is SimulationState.IDLE:
        return "paging $ "
    progress = f"{engine.step_index + 1}/{len(engine.sequence)}"
    return f"paging [{engine.state} {progress}] $ "


def run() -> None:
    """Run the interactive REPL.

    This is the ``py-paging`` console entry point.  Ctrl+D and Ctrl+C
    both exit cleanly.
    """
    shell = Shell()

    completer = Completer(shell)
    readline.set_completer(completer.complete)
    readline.set_completer_delims(" \t")
    readline.parse_and_bind("tab: complete")

    print(format_banner())  # noqa: T201

    try:
        while True:
            try:
                command = input(build_prompt(shell.controller))
            except EOFError:
                # Ctrl+D
                print()  # noqa: T201
                break

            result = shell.execute(command)
            if result == Shell.EXIT_SENTINEL:
                break
            if result:
                print(result)  # noqa: T201

    except KeyboardInterrupt:
        print("\nInterrupted.")  # noqa: T201

    finally:
        if shell.controller.state is not SimulationState.IDLE:
            shell.controller.reset()
        print("Bye.")  # noqa: T201
