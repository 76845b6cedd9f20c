"""Reference-string input: turning typed text into engine arguments.

The engine only insists on a non-empty sequence and at least one
frame.  Interactive callers (the shell and the web API) accept free
text, so they validate it here first:

- A reference string is whitespace-separated tokens, each a single
  letter or digit (``7 0 1 2 0 3`` or ``A B C A B D``).
- A frame count is an integer of at least 1.
- A policy is one of FIFO, LRU, Optimal (any case).

Very long reference strings and very many frames are legal but make
for an unreadable visualisation.  ``input_warnings`` reports them so
the caller can ask for confirmation before starting.
"""

import re
from collections.abc import Sequence

from py_paging.memory.policies import PolicyKind

DEFAULT_FRAME_COUNT = 3
DEFAULT_POLICY = PolicyKind.FIFO

MAX_REFERENCES_WITHOUT_WARNING = 100
MAX_FRAMES_WITHOUT_WARNING = 20

_PAGE_PATTERN = re.compile(r"^[A-Za-z0-9]$")


class ReferenceInputError(ValueError):
    """Raise when typed simulation input cannot be used."""


def parse_reference_string(text: str) -> tuple[str, ...]:
    """Split a reference string into page tokens.

    Args:
        text: Whitespace-separated single letters or digits.

    Returns:
        The page references in order.

    Raises:
        ReferenceInputError: If the text is blank or has invalid tokens.

    """
    tokens = text.split()
    if not tokens:
        msg = "Please enter a reference string"
        raise ReferenceInputError(msg)
    return validate_references(tokens)


def validate_references(tokens: Sequence[str]) -> tuple[str, ...]:
    """Check already-split tokens (e.g. a JSON list) the same way.

    Raises:
        ReferenceInputError: If there are no tokens or some are invalid.

    """
    if not tokens:
        msg = "Please enter a reference string"
        raise ReferenceInputError(msg)
    invalid = [str(t) for t in tokens if not isinstance(t, str) or not _PAGE_PATTERN.match(t)]
    if invalid:
        msg = (
            "Reference string must contain only single letters or numbers "
            f"separated by spaces. Invalid items: {', '.join(invalid)}"
        )
        raise ReferenceInputError(msg)
    return tuple(tokens)


def parse_frame_count(text: str | int) -> int:
    """Parse a frame count.

    Raises:
        ReferenceInputError: If the value is not an integer >= 1.

    """
    if isinstance(text, bool):
        msg = "Number of frames must be at least 1"
        raise ReferenceInputError(msg)
    try:
        frames = int(text)
    except (TypeError, ValueError):
        msg = f"Number of frames must be a whole number, got '{text}'"
        raise ReferenceInputError(msg) from None
    if frames < 1:
        msg = "Number of frames must be at least 1"
        raise ReferenceInputError(msg)
    return frames


def parse_policy(text: str) -> PolicyKind:
    """Parse a policy name (case-insensitive).

    Raises:
        ReferenceInputError: If the name matches no policy.

    """
    try:
        return PolicyKind.parse(text)
    except ValueError as e:
        raise ReferenceInputError(str(e)) from None


def input_warnings(references: Sequence[object], frames: int) -> list[str]:
    """Return reasons to confirm before starting (empty if none)."""
    warnings: list[str] = []
    if len(references) > MAX_REFERENCES_WITHOUT_WARNING:
        warnings.append(
            f"Large reference string ({len(references)} references) "
            "may cause performance issues"
        )
    if frames > MAX_FRAMES_WITHOUT_WARNING:
        warnings.append(f"Large number of frames ({frames}) may affect visualization")
    return warnings
