"""Context-aware tab completer for the simulator shell.

The completer separates **what to complete** (pure logic, fully
testable) from **how to wire it** (readline integration in the REPL).

The ``complete(text, state)`` method is the readline callback.  It
delegates to ``completions(text, line)`` which analyses the input
context and returns a list of candidate strings.
"""

from __future__ import annotations

import readline
from typing import TYPE_CHECKING

from py_paging.logging import LogLevel
from py_paging.memory.policies import PolicyKind

if TYPE_CHECKING:
    from py_paging.shell import Shell

# ``start <frames> <policy> ...``: the policy is the third word.
_START_POLICY_WORD = 3
# ``log <level>``: the level is the second word.
_LOG_LEVEL_WORD = 2


class Completer:
    """Context-aware tab completer for the simulator shell."""

    def __init__(self, shell: Shell) -> None:
        """Create a completer attached to a shell instance."""
        self._shell = shell

    def complete(self, text: str, state: int) -> str | None:
        """Readline callback: return the *state*-th candidate for *text*.

        Args:
            text: The partial word being completed.
            state: Index into the candidate list (0, 1, 2, …).

        Returns:
            The candidate at *state*, or ``None`` when exhausted.

        """
        line = readline.get_line_buffer()
        candidates = self.completions(text, line)
        if state < len(candidates):
            return candidates[state]
        return None

    def completions(self, text: str, line: str) -> list[str]:
        """Return completion candidates based on context.

        Args:
            text: The partial word under the cursor.
            line: The full input line so far.

        Returns:
            Sorted list of matching candidates.

        """
        words = line.lstrip().split()

        # No words yet, or still typing the first word → command completion
        if not words or (len(words) == 1 and not line.endswith(" ")):
            return [cmd for cmd in self._shell.command_names if cmd.startswith(text)]

        # Index of the word under the cursor (1-based)
        position = len(words) + 1 if line.endswith(" ") else len(words)
        cmd = words[0]

        if cmd == "start" and position == _START_POLICY_WORD:
            return self._complete_policies(text)
        if cmd == "log" and position == _LOG_LEVEL_WORD:
            return sorted(
                level.name.lower() for level in LogLevel if level.name.lower().startswith(text)
            )
        return []

    @staticmethod
    def _complete_policies(text: str) -> list[str]:
        """Complete policy names, ignoring case of the typed prefix."""
        prefix = text.lower()
        return sorted(kind.value for kind in PolicyKind if kind.value.lower().startswith(prefix))
