"""
Physical random variables: dice, coins and other directly-sampled objects.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Callable, List, Optional

from finrv.errors import InvalidMeasureError
from finrv.random_variable import E, RandomVariable
from finrv.sources import mangle_id
from finrv.spaces import FiniteSampleSpace, PrimitiveSampleSpace
from finrv.theory import Probability


class PhysicalRandomVariable(RandomVariable[E]):
    """
    A random variable backed by a single primitive sample space.

    This is the only random variable built from scratch. `evaluator` maps each
    index of the primitive space to a value; the space's measure gives each
    index its probability. A physical random variable on a primitive space used
    by nothing else is independent of every other random variable.
    """

    def __init__(
        self,
        space: PrimitiveSampleSpace,
        evaluator: Callable[[int], E],
        name: Optional[str] = None,
    ) -> None:
        if not isinstance(space, PrimitiveSampleSpace):
            raise TypeError("space must be a PrimitiveSampleSpace")
        self.space = space
        self.evaluator = evaluator
        self._name = name

    @classmethod
    def from_measure(
        cls,
        size: int,
        measure: Callable[[int], Probability],
        evaluator: Callable[[int], E],
        name: Optional[str] = None,
    ) -> "PhysicalRandomVariable[E]":
        """
        Build on a new primitive space {1..size} with the given per-index measure.
        """
        return cls(PrimitiveSampleSpace(size, measure), evaluator, name=name)

    @classmethod
    def from_probability_mass_function(
        cls, pmf: Mapping, name: Optional[str] = None
    ) -> "PhysicalRandomVariable[E]":
        """
        Build a weighted die with the given value -> probability mapping.

        Values are laid out on a new primitive space in the mapping's iteration
        order, so the result is independent of every other random variable.

        Raises:
            InvalidMeasureError: If the probabilities are not a probability measure.
        """
        values = list(pmf.keys())
        if not values:
            raise InvalidMeasureError("Probability mass function cannot be empty")
        probabilities = [float(pmf[v]) for v in values]

        def measure(index: int) -> Probability:
            return probabilities[index - 1]

        def evaluator(index: int) -> E:
            return values[index - 1]

        return cls(PrimitiveSampleSpace(len(values), measure), evaluator, name=name)

    @property
    def sample_space(self) -> FiniteSampleSpace:
        return self.space

    @property
    def name(self) -> str:
        if self._name is not None:
            return self._name
        return f"PhysicalRandomVariable(space={self.space.id!r}, values={self.values()!r})"

    def values(self) -> List[E]:
        """
        Distinct values in index order.
        """
        out: List[E] = []
        for index in self.space.all_outcome_indices():
            v = self.evaluator(index)
            if v not in out:
                out.append(v)
        return out

    def evaluate(self, outcome: Mapping) -> E:
        self.space.require_outcome_belongs(outcome)
        return self.evaluator(int(outcome[self.space]))

    def set_name(self, new_name: str) -> "PhysicalRandomVariable[E]":
        return PhysicalRandomVariable(self.space, self.evaluator, name=str(new_name))

    def _clone(self, mangler: str) -> "PhysicalRandomVariable[E]":
        space = self.space.with_new_identity(mangle_id(self.space.id, mangler))
        name = None if self._name is None else f"{self._name} (copy)"
        return PhysicalRandomVariable(space, self.evaluator, name=name)
