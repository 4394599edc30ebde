"""
Finite discrete random variables with a composable sample-space algebra.

Random variables built with this package (dice, weighted coins, and anything
derived from them) keep track of which primitive sample spaces they depend
on. Mapping and combining random variables therefore preserves correlation:
X, Y and X + Y can be sampled together consistently, and conditional
distributions can be computed between any two of them.
"""

from finrv.config import FiniteSpaceConfig, configure, get_config
from finrv.errors import (
    DegenerateConditioningError,
    InvalidMeasureError,
    OutcomeNotInSpaceError,
)
from finrv.theory import (
    PROBABILITY_TOLERANCE,
    Probability,
    is_probability_measure,
    probabilities_equal,
    require_probability_measure,
)
from finrv.sources import (
    CounterIdGenerator,
    IdGenerator,
    Uuid4IdGenerator,
    fresh_id,
    mangle_id,
    set_id_generator,
    set_rng,
)
from finrv.spaces import (
    Event,
    FiniteSampleSpace,
    Outcome,
    PrimitiveSampleSpace,
    ProductSampleSpace,
    combine_spaces,
)
from finrv.random_variable import (
    CombinedRandomVariable,
    MappedRandomVariable,
    RandomVariable,
    combine,
    roll_all,
    roll_together,
)
from finrv.physical import PhysicalRandomVariable
from finrv.dice import constant, fair_dice, fair_dice_sum, labelled_dice
from finrv.diagnostics import (
    DiagnosticsReport,
    GoodnessOfFit,
    IndependenceTest,
    empirical_probability_mass_function,
    goodness_of_fit,
    independence_test,
)

__all__ = [
    "FiniteSpaceConfig",
    "configure",
    "get_config",
    "DegenerateConditioningError",
    "InvalidMeasureError",
    "OutcomeNotInSpaceError",
    "PROBABILITY_TOLERANCE",
    "Probability",
    "is_probability_measure",
    "probabilities_equal",
    "require_probability_measure",
    "CounterIdGenerator",
    "IdGenerator",
    "Uuid4IdGenerator",
    "fresh_id",
    "mangle_id",
    "set_id_generator",
    "set_rng",
    "Event",
    "FiniteSampleSpace",
    "Outcome",
    "PrimitiveSampleSpace",
    "ProductSampleSpace",
    "combine_spaces",
    "CombinedRandomVariable",
    "MappedRandomVariable",
    "RandomVariable",
    "combine",
    "roll_all",
    "roll_together",
    "PhysicalRandomVariable",
    "constant",
    "fair_dice",
    "fair_dice_sum",
    "labelled_dice",
    "DiagnosticsReport",
    "GoodnessOfFit",
    "IndependenceTest",
    "empirical_probability_mass_function",
    "goodness_of_fit",
    "independence_test",
]
