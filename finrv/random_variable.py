"""
Random variables over finite sample spaces.

A random variable is a function from the outcomes of its sample space to
some value. Physical random variables (see `finrv.physical`) are the only
ones built from scratch; every other random variable is derived by mapping
one random variable or combining two of them. Derived random variables keep
references to their upstreams, so the whole structure is a DAG whose sample
space is the product of every primitive space it touches.

Combining two random variables projects each outcome of the joint space back
onto each upstream's own space before evaluating it. When both upstreams
share a primitive space, both projections carry the same index for it, which
is how correlation survives composition.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
import operator
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterable,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

import numpy as np

from finrv.errors import DegenerateConditioningError
from finrv.sources import fresh_id
from finrv.spaces import Event, FiniteSampleSpace, as_outcome, combine_spaces
from finrv.theory import Probability

E = TypeVar("E")
E2 = TypeVar("E2")
R = TypeVar("R")


class RandomVariable(ABC, Generic[E]):
    """
    A function from the outcomes of `sample_space` to values of type E.

    The display `name` is independent of behaviour: renaming never changes
    evaluation, the sample space, or how the variable combines with others.
    Equality and hashing are by object identity, so random variables can be
    used as dictionary keys (see `roll_all`).
    """

    @property
    @abstractmethod
    def sample_space(self) -> FiniteSampleSpace:
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def evaluate(self, outcome: Mapping) -> E:
        """
        Evaluate at an outcome of `sample_space`.

        Raises:
            OutcomeNotInSpaceError: If the outcome does not belong to `sample_space`.
        """

    @abstractmethod
    def set_name(self, new_name: str) -> "RandomVariable[E]":
        ...

    @abstractmethod
    def _clone(self, mangler: str) -> "RandomVariable[E]":
        ...

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"

    def clone(self, mangler: Optional[str] = None) -> "RandomVariable[E]":
        """
        Copy this random variable onto fresh primitive spaces.

        Every primitive space reachable from this random variable is replaced by
        one whose identity is derived from (old id, mangler). Primitives shared
        inside the DAG stay shared in the copy, while the copy shares nothing
        with the original. Cloning two dependent random variables with the same
        mangler keeps their dependency between the two copies.
        """
        mangler = fresh_id() if mangler is None else str(mangler)
        return self._clone(mangler)

    def copy(self, mangler: Optional[str] = None) -> "RandomVariable[E]":
        return self.clone(mangler)

    def roll_alone(self, rng: Optional[np.random.Generator] = None) -> E:
        """
        Sample this random variable on its own.

        Separate calls on dependent random variables are not consistent with
        each other; use `roll_together` or `roll_all` for that.
        """
        return self.evaluate(self.sample_space.random_outcome(rng))

    def probability_mass_function(self) -> Dict[E, Probability]:
        """
        Return the exact distribution as a value -> probability mapping.

        The cost is proportional to the size of the sample space, which is the
        product of the sizes of its primitive spaces.
        """
        space = self.sample_space
        out: Dict[E, Probability] = {}
        for outcome in space.all_outcomes():
            value = self.evaluate(outcome)
            out[value] = out.get(value, 0.0) + space.measure_single_outcome(outcome)
        return out

    def to_event(self, predicate: Callable[[E], bool]) -> Event:
        return frozenset(o for o in self.sample_space.all_outcomes() if predicate(self.evaluate(o)))

    def conditional_probability_mass_function(
        self,
        given: Union["RandomVariable[Any]", Iterable[Mapping]],
        condition: Optional[Callable[[Any], bool]] = None,
    ) -> Dict[E, Probability]:
        """
        Return the distribution of this random variable restricted to an event.

        `given` is either an event of this random variable's own sample space,
        or another random variable together with a `condition` on its values.
        In the second form both random variables are first re-expressed on
        their joint space, so they need not share a sample space beforehand.
        When `condition` is omitted the other random variable's values are
        used as booleans.

        Raises:
            OutcomeNotInSpaceError: If an event outcome is not in `sample_space`.
            DegenerateConditioningError: If the event has probability zero.
        """
        if isinstance(given, RandomVariable):
            return self._conditional_on(given, bool if condition is None else condition)
        if condition is not None:
            raise TypeError("condition is only accepted when conditioning on a random variable")

        space = self.sample_space
        event = frozenset(as_outcome(o) for o in given)
        for outcome in event:
            space.require_outcome_belongs(outcome)

        total = space.measure(event)
        if total <= 0.0:
            raise DegenerateConditioningError(
                f"Cannot condition {self.name!r} on an event of probability {total}"
            )

        out: Dict[E, Probability] = {}
        for outcome in event:
            value = self.evaluate(outcome)
            out[value] = out.get(value, 0.0) + space.measure_single_outcome(outcome) / total
        return out

    def _conditional_on(
        self, other: "RandomVariable[E2]", condition: Callable[[E2], bool]
    ) -> Dict[E, Probability]:
        this_joint = CombinedRandomVariable(self, other, lambda v1, v2: v1)
        other_joint = CombinedRandomVariable(self, other, lambda v1, v2: v2)
        return this_joint.conditional_probability_mass_function(other_joint.to_event(condition))

    def forget_dependencies(self) -> "RandomVariable[E]":
        """
        Return an independent random variable with the same distribution.

        The result is a physical random variable on one new primitive space, so
        it shares no structure with anything else, this random variable's own
        upstreams included. Calling this on intermediate results keeps sample
        spaces small when many random variables are combined.
        """
        from finrv.physical import PhysicalRandomVariable

        return PhysicalRandomVariable.from_probability_mass_function(
            self.probability_mass_function(), name=self.name
        )

    def map(self, mapping: Callable[[E], R], name: Optional[str] = None) -> "MappedRandomVariable[E, R]":
        return MappedRandomVariable(self, mapping, name=name)

    def combine(
        self,
        other: "RandomVariable[E2]",
        mapping: Callable[[E, E2], R],
        name: Optional[str] = None,
    ) -> "CombinedRandomVariable[E, E2, R]":
        return CombinedRandomVariable(self, other, mapping, name=name)

    # Arithmetic and comparisons: constants are mapped, random variables combined.

    def _binary(self, other: Any, op: Callable[[Any, Any], Any]) -> "RandomVariable[Any]":
        if isinstance(other, RandomVariable):
            return CombinedRandomVariable(self, other, op)
        return MappedRandomVariable(self, lambda v: op(v, other))

    def _binary_reflected(self, other: Any, op: Callable[[Any, Any], Any]) -> "RandomVariable[Any]":
        return MappedRandomVariable(self, lambda v: op(other, v))

    def __add__(self, other: Any) -> "RandomVariable[Any]":
        return self._binary(other, operator.add)

    def __radd__(self, other: Any) -> "RandomVariable[Any]":
        return self._binary_reflected(other, operator.add)

    def __sub__(self, other: Any) -> "RandomVariable[Any]":
        return self._binary(other, operator.sub)

    def __rsub__(self, other: Any) -> "RandomVariable[Any]":
        return self._binary_reflected(other, operator.sub)

    def __mul__(self, other: Any) -> "RandomVariable[Any]":
        return self._binary(other, operator.mul)

    def __rmul__(self, other: Any) -> "RandomVariable[Any]":
        return self._binary_reflected(other, operator.mul)

    def __truediv__(self, other: Any) -> "RandomVariable[Any]":
        return self._binary(other, operator.truediv)

    def __rtruediv__(self, other: Any) -> "RandomVariable[Any]":
        return self._binary_reflected(other, operator.truediv)

    def __floordiv__(self, other: Any) -> "RandomVariable[Any]":
        return self._binary(other, operator.floordiv)

    def __rfloordiv__(self, other: Any) -> "RandomVariable[Any]":
        return self._binary_reflected(other, operator.floordiv)

    def __mod__(self, other: Any) -> "RandomVariable[Any]":
        return self._binary(other, operator.mod)

    def __rmod__(self, other: Any) -> "RandomVariable[Any]":
        return self._binary_reflected(other, operator.mod)

    def __pow__(self, other: Any) -> "RandomVariable[Any]":
        return self._binary(other, operator.pow)

    def __rpow__(self, other: Any) -> "RandomVariable[Any]":
        return self._binary_reflected(other, operator.pow)

    def __neg__(self) -> "RandomVariable[Any]":
        return MappedRandomVariable(self, operator.neg)

    def __pos__(self) -> "RandomVariable[Any]":
        return MappedRandomVariable(self, operator.pos)

    def __abs__(self) -> "RandomVariable[Any]":
        return MappedRandomVariable(self, abs)

    # `__eq__` and friends keep identity semantics, so comparisons are named methods.

    def gt(self, other: Any) -> "RandomVariable[bool]":
        return self._binary(other, operator.gt)

    def ge(self, other: Any) -> "RandomVariable[bool]":
        return self._binary(other, operator.ge)

    def lt(self, other: Any) -> "RandomVariable[bool]":
        return self._binary(other, operator.lt)

    def le(self, other: Any) -> "RandomVariable[bool]":
        return self._binary(other, operator.le)

    def eq(self, other: Any) -> "RandomVariable[bool]":
        return self._binary(other, operator.eq)

    def ne(self, other: Any) -> "RandomVariable[bool]":
        return self._binary(other, operator.ne)

    def logical_not(self) -> "RandomVariable[bool]":
        return MappedRandomVariable(self, operator.not_)

    def logical_and(self, other: Any) -> "RandomVariable[bool]":
        return self._binary(other, lambda a, b: bool(a and b))

    def logical_or(self, other: Any) -> "RandomVariable[bool]":
        return self._binary(other, lambda a, b: bool(a or b))


class MappedRandomVariable(RandomVariable[R], Generic[E, R]):
    """
    `mapping` applied to the values of one upstream random variable.
    """

    def __init__(
        self,
        upstream: RandomVariable[E],
        mapping: Callable[[E], R],
        name: Optional[str] = None,
    ) -> None:
        self.upstream = upstream
        self.mapping = mapping
        self._name = name

    @property
    def sample_space(self) -> FiniteSampleSpace:
        return self.upstream.sample_space

    @property
    def name(self) -> str:
        return self._name if self._name is not None else f"Map({self.upstream})"

    def evaluate(self, outcome: Mapping) -> R:
        return self.mapping(self.upstream.evaluate(outcome))

    def set_name(self, new_name: str) -> "MappedRandomVariable[E, R]":
        return MappedRandomVariable(self.upstream, self.mapping, name=str(new_name))

    def _clone(self, mangler: str) -> "MappedRandomVariable[E, R]":
        return MappedRandomVariable(
            self.upstream._clone(mangler), self.mapping, name=f"Copy({self.name})"
        )


class CombinedRandomVariable(RandomVariable[R], Generic[E, E2, R]):
    """
    `mapping` applied to the values of two upstream random variables.

    The sample space is the combination of both upstream spaces. Each outcome
    is projected onto each upstream's constituents before evaluation.
    """

    def __init__(
        self,
        upstream1: RandomVariable[E],
        upstream2: RandomVariable[E2],
        mapping: Callable[[E, E2], R],
        name: Optional[str] = None,
    ) -> None:
        self.upstream1 = upstream1
        self.upstream2 = upstream2
        self.mapping = mapping
        self._name = name
        self._space = combine_spaces(upstream1.sample_space, upstream2.sample_space)

    @property
    def sample_space(self) -> FiniteSampleSpace:
        return self._space

    @property
    def name(self) -> str:
        if self._name is not None:
            return self._name
        return f"Combination({self.upstream1}, {self.upstream2})"

    def evaluate(self, outcome: Mapping) -> R:
        self._space.require_outcome_belongs(outcome)
        outcome = as_outcome(outcome)
        v1 = self.upstream1.evaluate(outcome.project(self.upstream1.sample_space.constituents))
        v2 = self.upstream2.evaluate(outcome.project(self.upstream2.sample_space.constituents))
        return self.mapping(v1, v2)

    def set_name(self, new_name: str) -> "CombinedRandomVariable[E, E2, R]":
        return CombinedRandomVariable(self.upstream1, self.upstream2, self.mapping, name=str(new_name))

    def _clone(self, mangler: str) -> "CombinedRandomVariable[E, E2, R]":
        return CombinedRandomVariable(
            self.upstream1._clone(mangler),
            self.upstream2._clone(mangler),
            self.mapping,
            name=f"Copy({self.name})",
        )


def combine(
    *variables: RandomVariable[Any],
    mapping: Callable[..., R],
    name: Optional[str] = None,
) -> RandomVariable[R]:
    """
    Combine two or more random variables with an n-ary `mapping`.

    More than two operands are combined pairwise into tuples which the final
    step unpacks, so every primitive shared between any of the operands is
    still shared in the result.
    """
    if len(variables) < 2:
        raise ValueError("combine requires at least two random variables")
    if len(variables) == 2:
        return CombinedRandomVariable(variables[0], variables[1], mapping, name=name)

    acc: RandomVariable[Tuple[Any, ...]] = CombinedRandomVariable(
        variables[0], variables[1], lambda v1, v2: (v1, v2)
    )
    for rv in variables[2:-1]:
        acc = CombinedRandomVariable(acc, rv, lambda values, v: values + (v,))
    return CombinedRandomVariable(
        acc, variables[-1], lambda values, v: mapping(*values, v), name=name
    )


def roll_together(
    *variables: RandomVariable[Any], rng: Optional[np.random.Generator] = None
) -> Tuple[Any, ...]:
    """
    Sample several random variables from one outcome of their joint space.

    Returns the values in argument order. Unlike separate `roll_alone` calls,
    the values are consistent: if Z = X + Y, the sampled z always equals x + y.
    """
    if not variables:
        return ()
    if len(variables) == 1:
        return (variables[0].roll_alone(rng),)
    return combine(*variables, mapping=lambda *values: tuple(values)).roll_alone(rng)


def _extend_with(rv: RandomVariable[Any]) -> Callable[[Dict[Any, Any], Any], Dict[Any, Any]]:
    def extend(values: Dict[Any, Any], value: Any) -> Dict[Any, Any]:
        out = dict(values)
        out[rv] = value
        return out

    return extend


def roll_all(
    variables: Sequence[RandomVariable[Any]], rng: Optional[np.random.Generator] = None
) -> Dict[RandomVariable[Any], Any]:
    """
    Sample a list of random variables together, keyed by random variable.

    An empty list yields an empty dict.
    """
    variables = list(variables)
    if not variables:
        return {}
    first = variables[0]
    acc: RandomVariable[Dict[Any, Any]] = MappedRandomVariable(first, lambda v: {first: v})
    for rv in variables[1:]:
        acc = CombinedRandomVariable(acc, rv, _extend_with(rv))
    return acc.roll_alone(rng)
