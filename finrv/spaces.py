"""
Finite sample spaces: primitive factors, their products, and how they combine.

Every finite sample space is treated as a product of primitive spaces. A
primitive space is a set of the form {1, ..., n} with its own probability
measure and a unique identity. A random variable that is independent of all
others gets a primitive space of its own; when several random variables are
examined together they are examined on the product of the primitives they
touch. Sharing a primitive space is the only source of dependence.

Outcomes of any of these spaces are mappings from primitive space to the
index chosen in that primitive. An outcome belongs to a space iff its keys
are exactly the space's constituent primitives.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from functools import reduce
import itertools
from operator import mul
from typing import Callable, Collection, Dict, FrozenSet, Iterable, Iterator, Optional, Tuple
import warnings

import numpy as np

from finrv.config import get_config
from finrv.errors import OutcomeNotInSpaceError
from finrv.sources import fresh_id, resolve_rng
from finrv.theory import Probability, require_probability_measure


class Outcome(Mapping):
    """
    Immutable, hashable mapping from primitive sample space to 1-based index.
    """

    __slots__ = ("_items", "_hash")

    def __init__(self, items: Mapping | Iterable[Tuple["PrimitiveSampleSpace", int]] = ()) -> None:
        self._items: Dict[PrimitiveSampleSpace, int] = {k: int(v) for k, v in dict(items).items()}
        self._hash: Optional[int] = None

    def __getitem__(self, key: "PrimitiveSampleSpace") -> int:
        return self._items[key]

    def __iter__(self) -> Iterator["PrimitiveSampleSpace"]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self._items.items()))
        return self._hash

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return self._items == dict(other.items())

    def __repr__(self) -> str:
        body = ", ".join(f"{k.id!r}: {v}" for k, v in self._items.items())
        return f"Outcome({{{body}}})"

    @property
    def primitives(self) -> FrozenSet["PrimitiveSampleSpace"]:
        return frozenset(self._items)

    def project(self, primitives: Collection["PrimitiveSampleSpace"]) -> "Outcome":
        """
        Restrict this outcome to the given primitive spaces.
        """
        return Outcome({k: v for k, v in self._items.items() if k in primitives})

    def merged(self, other: Mapping) -> "Outcome":
        out = dict(self._items)
        out.update(other)
        return Outcome(out)


Event = FrozenSet[Outcome]


def as_outcome(outcome: Mapping) -> Outcome:
    return outcome if isinstance(outcome, Outcome) else Outcome(outcome)


class FiniteSampleSpace(ABC):
    """
    A finite set of outcomes equipped with a probability measure.

    Every subset of a finite space is an event, and the measure of an event is
    the sum of the measures of its outcomes.
    """

    @property
    @abstractmethod
    def constituents(self) -> FrozenSet["PrimitiveSampleSpace"]:
        """
        The primitive spaces this space is the product of.
        """

    @property
    @abstractmethod
    def size(self) -> int:
        """
        Number of outcomes in the space.
        """

    @abstractmethod
    def measure_single_outcome(self, outcome: Mapping) -> Probability:
        ...

    @abstractmethod
    def random_outcome(self, rng: Optional[np.random.Generator] = None) -> Outcome:
        ...

    @abstractmethod
    def all_outcomes(self) -> Tuple[Outcome, ...]:
        ...

    def outcome_belongs_to_space(self, outcome: Mapping) -> bool:
        return frozenset(outcome.keys()) == self.constituents

    def require_outcome_belongs(self, outcome: Mapping) -> None:
        if not self.outcome_belongs_to_space(outcome):
            raise OutcomeNotInSpaceError(
                f"Outcome {as_outcome(outcome)!r} is not an element of {self!r}"
            )

    def measure(self, event: Iterable[Mapping]) -> Probability:
        return float(sum(self.measure_single_outcome(o) for o in event))


class PrimitiveSampleSpace(FiniteSampleSpace):
    """
    The set {1, ..., size} with a probability measure and a unique identity.

    Two primitive spaces are the same space iff their ids are equal, even when
    their sizes and measures agree. The same physical die rolled twice
    independently uses two primitive spaces; the same die referenced twice
    uses one.
    """

    def __init__(
        self,
        size: int,
        measure: Callable[[int], Probability],
        id: Optional[str] = None,
    ) -> None:
        size = int(size)
        if size <= 0:
            raise ValueError("size must be positive")
        require_probability_measure(measure, range(1, size + 1), tol=get_config().tolerance)
        self._size = size
        self._measure = measure
        self._id = fresh_id() if id is None else str(id)
        self._outcomes: Optional[Tuple[Outcome, ...]] = None

    @property
    def id(self) -> str:
        return self._id

    @property
    def size(self) -> int:
        return self._size

    @property
    def single_outcome_measure(self) -> Callable[[int], Probability]:
        return self._measure

    @property
    def constituents(self) -> FrozenSet["PrimitiveSampleSpace"]:
        return frozenset((self,))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrimitiveSampleSpace):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(("primitive", self._id))

    def __repr__(self) -> str:
        return f"PrimitiveSampleSpace(size={self._size}, id={self._id!r})"

    def all_outcome_indices(self) -> range:
        return range(1, self._size + 1)

    def all_outcomes(self) -> Tuple[Outcome, ...]:
        if self._outcomes is None:
            self._outcomes = tuple(Outcome({self: i}) for i in self.all_outcome_indices())
        return self._outcomes

    def outcome_belongs_to_space(self, outcome: Mapping) -> bool:
        return len(outcome) == 1 and self in outcome

    def measure_single_outcome(self, outcome: Mapping) -> Probability:
        self.require_outcome_belongs(outcome)
        return float(self._measure(int(outcome[self])))

    def random_outcome(self, rng: Optional[np.random.Generator] = None) -> Outcome:
        r = float(resolve_rng(rng).random())
        cumulative = 0.0
        for x in self.all_outcome_indices():
            cumulative += float(self._measure(x))
            if r < cumulative:
                return Outcome({self: x})
        # Rounding can leave the cumulative sum just below r; index 1 is the fallback.
        return Outcome({self: 1})

    def with_new_identity(self, new_id: str) -> "PrimitiveSampleSpace":
        return PrimitiveSampleSpace(self._size, self._measure, id=new_id)


class ProductSampleSpace(FiniteSampleSpace):
    """
    Cartesian product of distinct primitive spaces.

    The product measure of an outcome is the product of each constituent's
    measure on its own index; this is what makes the constituents independent.
    Constituents are held sorted by id so that enumeration and sampling order
    are deterministic for deterministic ids.
    """

    def __init__(self, primitives: Iterable[PrimitiveSampleSpace]) -> None:
        prims = frozenset(primitives)
        for p in prims:
            if not isinstance(p, PrimitiveSampleSpace):
                raise TypeError("ProductSampleSpace constituents must be PrimitiveSampleSpace")
        self._constituents: FrozenSet[PrimitiveSampleSpace] = prims
        self._primitives: Tuple[PrimitiveSampleSpace, ...] = tuple(sorted(prims, key=lambda p: p.id))
        self._size: int = int(reduce(mul, (p.size for p in self._primitives), 1))
        self._outcomes: Optional[Tuple[Outcome, ...]] = None

    @property
    def constituents(self) -> FrozenSet[PrimitiveSampleSpace]:
        return self._constituents

    @property
    def primitives(self) -> Tuple[PrimitiveSampleSpace, ...]:
        return self._primitives

    @property
    def size(self) -> int:
        return self._size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProductSampleSpace):
            return NotImplemented
        return self._constituents == other._constituents

    def __hash__(self) -> int:
        return hash(("product", self._constituents))

    def __repr__(self) -> str:
        ids = ", ".join(repr(p.id) for p in self._primitives)
        return f"ProductSampleSpace([{ids}])"

    def measure_single_outcome(self, outcome: Mapping) -> Probability:
        self.require_outcome_belongs(outcome)
        p = 1.0
        for prim in self._primitives:
            p *= prim.measure_single_outcome(Outcome({prim: outcome[prim]}))
        return float(p)

    def random_outcome(self, rng: Optional[np.random.Generator] = None) -> Outcome:
        rng = resolve_rng(rng)
        return Outcome({prim: prim.random_outcome(rng)[prim] for prim in self._primitives})

    def all_outcomes(self) -> Tuple[Outcome, ...]:
        """
        Enumerate the full Cartesian product (cached after the first call).

        The outcome count is the product of the constituent sizes, so it grows
        exponentially with the number of independent constituents.
        """
        if self._outcomes is not None:
            return self._outcomes

        threshold = int(get_config().enumeration_warning_threshold)
        if self._size > threshold:
            warnings.warn(
                f"Enumerating a product sample space with {self._size} outcomes "
                f"({len(self._primitives)} primitive spaces, threshold {threshold}). "
                "Consider forget_dependencies() on intermediate random variables, "
                "or sampling with roll_alone()/roll_together() instead.",
                UserWarning,
                stacklevel=2,
            )

        ranges = [p.all_outcome_indices() for p in self._primitives]
        self._outcomes = tuple(
            Outcome(zip(self._primitives, combo)) for combo in itertools.product(*ranges)
        )
        return self._outcomes


def combine_spaces(a: FiniteSampleSpace, b: FiniteSampleSpace) -> FiniteSampleSpace:
    """
    Return the smallest space containing both `a` and `b`.

    Identical spaces are returned unchanged so that a primitive is never
    producted with itself.
    """
    if a == b:
        return a
    return ProductSampleSpace(a.constituents | b.constituents)
