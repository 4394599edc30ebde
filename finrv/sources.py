"""
Identity and randomness sources.

These are the only pieces of process-wide mutable state in the package: the
generator that hands out identities to new primitive sample spaces, and the
numpy Generator used when a sampling call is not given one explicitly. Both
can be swapped out (see `finrv.config.configure`) to make runs reproducible.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import itertools
from typing import Optional
import uuid

import numpy as np

# Fixed namespace so that mangled identities are stable across processes.
_MANGLE_NAMESPACE = uuid.UUID("6f1c2a5e-4b7d-5e8f-9a0b-1c2d3e4f5a6b")


class IdGenerator(ABC):
    """
    Source of fresh identity tokens for primitive sample spaces.
    """

    @abstractmethod
    def next_id(self) -> str:
        ...


class Uuid4IdGenerator(IdGenerator):
    def next_id(self) -> str:
        return str(uuid.uuid4())


class CounterIdGenerator(IdGenerator):
    """
    Monotonic identities of the form "<prefix>-1", "<prefix>-2", ...
    """

    def __init__(self, prefix: str = "space", start: int = 1) -> None:
        prefix = str(prefix).strip()
        if not prefix:
            raise ValueError("prefix cannot be empty")
        self.prefix = prefix
        self._counter = itertools.count(int(start))

    def next_id(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"


_id_generator: IdGenerator = Uuid4IdGenerator()
_rng: np.random.Generator = np.random.Generator(np.random.PCG64())


def get_id_generator() -> IdGenerator:
    return _id_generator


def set_id_generator(generator: IdGenerator) -> IdGenerator:
    """
    Install `generator` as the process-wide id source and return the previous one.
    """
    global _id_generator
    if not isinstance(generator, IdGenerator):
        raise TypeError("generator must be an IdGenerator")
    previous = _id_generator
    _id_generator = generator
    return previous


def fresh_id() -> str:
    return _id_generator.next_id()


def mangle_id(space_id: str, mangler: str) -> str:
    """
    Deterministically derive a new identity from (space_id, mangler).

    The same pair always yields the same identity, so a primitive space reached
    along several paths of a DAG is remapped consistently within one clone.
    """
    return str(uuid.uuid5(_MANGLE_NAMESPACE, f"{space_id}/{mangler}"))


def get_rng() -> np.random.Generator:
    return _rng


def set_rng(rng: np.random.Generator) -> np.random.Generator:
    """
    Install `rng` as the default random source and return the previous one.
    """
    global _rng
    if not isinstance(rng, np.random.Generator):
        raise TypeError("rng must be a numpy.random.Generator")
    previous = _rng
    _rng = rng
    return previous


def seed(value: Optional[int]) -> np.random.Generator:
    """
    Reseed the default random source with a fresh PCG64 generator.
    """
    bitgen = np.random.PCG64(None if value is None else int(value))
    set_rng(np.random.Generator(bitgen))
    return _rng


def resolve_rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return _rng if rng is None else rng
