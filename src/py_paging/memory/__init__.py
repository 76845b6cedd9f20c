"""Memory model: frames and the replacement policies that manage them.

Re-exports public symbols so callers can write::

    from py_paging.memory import FrameTable, LRUPolicy
"""

from py_paging.memory.frames import FrameTable, Page
from py_paging.memory.policies import (
    FIFOPolicy,
    LRUPolicy,
    OptimalPolicy,
    PolicyInvariantViolationError,
    PolicyKind,
    ReplacementPolicy,
    create_policy,
    next_use,
)

__all__ = [
    "FIFOPolicy",
    "FrameTable",
    "LRUPolicy",
    "OptimalPolicy",
    "Page",
    "PolicyInvariantViolationError",
    "PolicyKind",
    "ReplacementPolicy",
    "create_policy",
    "next_use",
]
