"""
Diagnostics for random variables.

The following items are provided:
  - a structural/distribution summary of a random variable
  - empirical distributions from repeated sampling
  - chi-square checks of sampling against the exact distribution, and of
    independence between two random variables sampled together
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np
from scipy import stats

from finrv.random_variable import RandomVariable, roll_together
from finrv.theory import PROBABILITY_TOLERANCE


@dataclass(frozen=True)
class DiagnosticsReport:
    name: str
    n_primitives: int
    outcome_count: int
    support_size: int
    sum_to_one_error: float
    min_probability: float
    max_probability: float
    is_normalised: bool

    @staticmethod
    def from_random_variable(
        rv: RandomVariable[Any], *, tol: float = PROBABILITY_TOLERANCE
    ) -> "DiagnosticsReport":
        space = rv.sample_space
        p = np.asarray(list(rv.probability_mass_function().values()), dtype=float)
        sum_err = float(abs(float(np.sum(p)) - 1.0))
        return DiagnosticsReport(
            name=rv.name,
            n_primitives=len(space.constituents),
            outcome_count=int(space.size),
            support_size=int(p.size),
            sum_to_one_error=sum_err,
            min_probability=float(np.min(p)) if p.size else float("nan"),
            max_probability=float(np.max(p)) if p.size else float("nan"),
            is_normalised=bool(sum_err < float(tol)),
        )


@dataclass(frozen=True)
class GoodnessOfFit:
    n_rolls: int
    statistic: float
    p_value: float
    dof: int


@dataclass(frozen=True)
class IndependenceTest:
    n_rolls: int
    statistic: float
    p_value: float
    dof: int


def _require_positive_rolls(n_rolls: int) -> int:
    n_rolls = int(n_rolls)
    if n_rolls <= 0:
        raise ValueError("n_rolls must be positive")
    return n_rolls


def empirical_probability_mass_function(
    rv: RandomVariable[Any],
    n_rolls: int,
    *,
    rng: Optional[np.random.Generator] = None,
) -> Dict[Any, float]:
    """
    Relative frequencies of `n_rolls` independent `roll_alone` draws.
    """
    n_rolls = _require_positive_rolls(n_rolls)
    counts: Dict[Any, int] = {}
    for _ in range(n_rolls):
        v = rv.roll_alone(rng)
        counts[v] = counts.get(v, 0) + 1
    return {v: c / n_rolls for v, c in counts.items()}


def goodness_of_fit(
    rv: RandomVariable[Any],
    n_rolls: int,
    *,
    rng: Optional[np.random.Generator] = None,
) -> GoodnessOfFit:
    """
    Chi-square test of sampled counts against the exact distribution.

    Values with probability zero are left out of the test; sampling one of
    them is reported as a certain misfit (p_value 0).
    """
    n_rolls = _require_positive_rolls(n_rolls)
    pmf = rv.probability_mass_function()
    values = [v for v, p in pmf.items() if p > 0.0]
    position = {v: i for i, v in enumerate(values)}

    observed = np.zeros(len(values), dtype=float)
    for _ in range(n_rolls):
        v = rv.roll_alone(rng)
        if v not in position:
            return GoodnessOfFit(n_rolls=n_rolls, statistic=float("inf"), p_value=0.0, dof=len(values) - 1)
        observed[position[v]] += 1.0

    probs = np.asarray([pmf[v] for v in values], dtype=float)
    expected = probs / float(np.sum(probs)) * float(n_rolls)
    if len(values) == 1:
        return GoodnessOfFit(n_rolls=n_rolls, statistic=0.0, p_value=1.0, dof=0)
    res = stats.chisquare(observed, expected)
    return GoodnessOfFit(
        n_rolls=n_rolls,
        statistic=float(res.statistic),
        p_value=float(res.pvalue),
        dof=len(values) - 1,
    )


def independence_test(
    x: RandomVariable[Any],
    y: RandomVariable[Any],
    n_rolls: int,
    *,
    rng: Optional[np.random.Generator] = None,
) -> IndependenceTest:
    """
    Chi-square contingency test on `n_rolls` joint draws of `x` and `y`.

    A small p-value indicates the two random variables are dependent. Draws use
    `roll_together`, so any shared primitive spaces are respected.
    """
    n_rolls = _require_positive_rolls(n_rolls)
    pairs: List[tuple] = [roll_together(x, y, rng=rng) for _ in range(n_rolls)]

    x_values: Dict[Any, int] = {}
    y_values: Dict[Any, int] = {}
    for vx, vy in pairs:
        x_values.setdefault(vx, len(x_values))
        y_values.setdefault(vy, len(y_values))

    table = np.zeros((len(x_values), len(y_values)), dtype=float)
    for vx, vy in pairs:
        table[x_values[vx], y_values[vy]] += 1.0

    if table.shape[0] < 2 or table.shape[1] < 2:
        # A variable that never varied carries no evidence of dependence.
        return IndependenceTest(n_rolls=n_rolls, statistic=0.0, p_value=1.0, dof=0)

    res = stats.chi2_contingency(table, correction=False)
    return IndependenceTest(
        n_rolls=n_rolls,
        statistic=float(res[0]),
        p_value=float(res[1]),
        dof=int(res[2]),
    )
