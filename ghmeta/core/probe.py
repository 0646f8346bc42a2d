"""First-match-wins ordered probing.

Several lookups in ghmeta follow the same shape: try a fixed list of
candidates in priority order and stop at the first one that passes. Probes
run one at a time so that nothing past the first hit is requested.
"""
from __future__ import annotations
from typing import Awaitable, Callable, Iterable, Optional, TypeVar

T = TypeVar("T")


async def first_match(
    candidates: Iterable[T],
    predicate: Callable[[T], Awaitable[bool]],
) -> Optional[T]:
    """Return the first candidate for which `predicate` is true.

    Args:
        candidates: Candidates in priority order.
        predicate: Async check applied to each candidate.

    Returns:
        The winning candidate, or None if every check failed.

    Exceptions raised by `predicate` propagate and stop the scan.
    """
    for candidate in candidates:
        if await predicate(candidate):
            return candidate
    return None
