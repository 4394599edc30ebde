"""
Probability scalars and probability-measure validation.

Probabilities are plain floats. They are never normalised automatically, so
every measure handed to a primitive sample space must already be a valid
probability measure over its finite domain.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, TypeVar

from finrv.errors import InvalidMeasureError

T = TypeVar("T")

Probability = float

PROBABILITY_TOLERANCE: float = 1e-7


def probabilities_equal(a: float, b: float, *, tol: float = PROBABILITY_TOLERANCE) -> bool:
    """
    Return True if two probabilities differ by less than `tol`.
    """
    return abs(float(a) - float(b)) < float(tol)


def _measure_violation(
    measure: Callable[[T], float],
    domain: Iterable[T],
    tol: float,
) -> Optional[str]:
    total = 0.0
    for x in domain:
        p = float(measure(x))
        if p < -tol or p > 1.0 + tol:
            return f"measure({x!r}) = {p} is outside [0, 1]"
        total += p
    if not probabilities_equal(total, 1.0, tol=tol):
        return f"measure sums to {total}, not 1"
    return None


def is_probability_measure(
    measure: Callable[[T], float],
    domain: Iterable[T],
    *,
    tol: float = PROBABILITY_TOLERANCE,
) -> bool:
    """
    Return True if `measure` lies in [0, 1] (within `tol`) and sums to 1 over `domain`.

    The check stops at the first out-of-range value.
    """
    return _measure_violation(measure, domain, float(tol)) is None


def require_probability_measure(
    measure: Callable[[T], float],
    domain: Iterable[T],
    *,
    tol: float = PROBABILITY_TOLERANCE,
) -> None:
    """
    Raise InvalidMeasureError unless `measure` is a probability measure over `domain`.
    """
    violation = _measure_violation(measure, domain, float(tol))
    if violation is not None:
        raise InvalidMeasureError(f"Not a probability measure: {violation}")
