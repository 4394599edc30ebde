"""
Error types raised by the sample-space algebra.

All errors are `ValueError` subclasses, so callers that only care about
"invalid input" can keep catching `ValueError`.
"""

from __future__ import annotations


class InvalidMeasureError(ValueError):
    """
    A proposed per-outcome probability function is not a probability measure.
    """


class OutcomeNotInSpaceError(ValueError):
    """
    An outcome was used with a sample space (or random variable) it does not belong to.
    """


class DegenerateConditioningError(ValueError):
    """
    Conditioning was requested on an event of zero probability.
    """
