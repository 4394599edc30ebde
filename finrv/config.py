"""
Configuration for finite sample spaces.

A frozen dataclass is provided as the typed surface for the few settings the
sample-space algebra has: the measure tolerance, the enumeration warning
threshold, and the identity/randomness sources used for reproducible runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

import numpy as np

from finrv import sources
from finrv.theory import PROBABILITY_TOLERANCE


@dataclass(frozen=True)
class FiniteSpaceConfig:
    """
    Settings applied by `configure`.

    `seed=None` draws fresh OS entropy for the default random source.
    """

    tolerance: float = PROBABILITY_TOLERANCE
    enumeration_warning_threshold: int = 1_000_000

    seed: Optional[int] = None
    bitgen: Literal["PCG64"] = "PCG64"

    id_scheme: Literal["uuid4", "counter"] = "uuid4"
    id_prefix: str = "space"

    def validate(self) -> None:
        """
        Configuration validation is performed.
        """
        if not (0.0 < float(self.tolerance) < 1.0):
            raise ValueError("tolerance must be in (0, 1)")
        if int(self.enumeration_warning_threshold) <= 0:
            raise ValueError("enumeration_warning_threshold must be positive")
        if self.seed is not None and int(self.seed) < 0:
            raise ValueError("seed must be non-negative when provided")
        if str(self.bitgen) != "PCG64":
            raise ValueError("bitgen is not recognised")
        if str(self.id_scheme) not in {"uuid4", "counter"}:
            raise ValueError("id_scheme is not recognised")
        if not str(self.id_prefix).strip():
            raise ValueError("id_prefix cannot be empty")

    def make_rng(self) -> np.random.Generator:
        return np.random.Generator(np.random.PCG64(self.seed))

    def make_id_generator(self) -> sources.IdGenerator:
        if self.id_scheme == "counter":
            return sources.CounterIdGenerator(prefix=self.id_prefix)
        return sources.Uuid4IdGenerator()


_active = FiniteSpaceConfig()


def get_config() -> FiniteSpaceConfig:
    return _active


def configure(config: FiniteSpaceConfig) -> FiniteSpaceConfig:
    """
    Validate and activate `config`, returning the previously active config.

    The default random source and id generator are replaced as part of this
    call, so configuring with a fixed seed and the "counter" id scheme makes
    subsequent sampling and space identities reproducible.
    """
    global _active
    config.validate()
    sources.set_rng(config.make_rng())
    sources.set_id_generator(config.make_id_generator())
    previous = _active
    _active = config
    return previous
