"""Generic escape / fixed-point iteration engine."""

from __future__ import annotations

import numbers
from typing import Callable, NamedTuple, TypeVar

from .errors import ConfigurationError

U = TypeVar("U")

MAX_ITERATIONS = 1000


class StabilityResult(NamedTuple):
    """Outcome of iterating a single point."""

    iterations: int
    stable: bool


def is_stable(
    function: Callable[[U], U],
    initial: U,
    stability_check: Callable[[U], bool],
    max_iterations: int,
) -> StabilityResult:
    """Apply ``function`` to ``initial`` until ``stability_check`` fails.

    The point is unstable as soon as the check rejects the current value.
    It is declared stable once ``max_iterations`` applications have been
    made, or earlier when one application leaves the value exactly
    unchanged (a period-1 fixed point). Longer cycles are not detected and
    simply run to the cap, so a stable result with ``iterations`` below
    ``max_iterations`` always means the orbit converged.
    """

    if isinstance(max_iterations, bool) or not isinstance(max_iterations, numbers.Integral) or max_iterations < 0:
        raise ConfigurationError(f"max_iterations must be a non-negative integer, got {max_iterations!r}")

    n = initial
    i = 0
    last = None
    while True:
        if not stability_check(n):
            return StabilityResult(i, False)
        if i == max_iterations:
            return StabilityResult(i, True)
        n = function(n)
        if last is not None and last == n:
            return StabilityResult(i, True)
        last = n
        i += 1
