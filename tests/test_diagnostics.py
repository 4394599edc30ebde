from __future__ import annotations

import pytest

from finrv.diagnostics import (
    DiagnosticsReport,
    empirical_probability_mass_function,
    goodness_of_fit,
    independence_test,
)
from finrv.dice import constant, fair_dice
from finrv.theory import probabilities_equal


def test_report_for_two_dice_sum() -> None:
    z = (fair_dice(6) + fair_dice(6)).set_name("Z")
    rep = DiagnosticsReport.from_random_variable(z)
    assert rep.name == "Z"
    assert rep.n_primitives == 2
    assert rep.outcome_count == 36
    assert rep.support_size == 11
    assert rep.is_normalised
    assert rep.sum_to_one_error < 1e-9
    assert probabilities_equal(rep.min_probability, 1 / 36)
    assert probabilities_equal(rep.max_probability, 6 / 36)


def test_empirical_distribution_is_supported_by_exact_one() -> None:
    x = fair_dice(6)
    emp = empirical_probability_mass_function(x, 600)
    assert set(emp) <= set(x.probability_mass_function())
    assert probabilities_equal(sum(emp.values()), 1.0)
    with pytest.raises(ValueError):
        empirical_probability_mass_function(x, 0)


def test_goodness_of_fit_accepts_correct_sampling() -> None:
    z = fair_dice(6) + fair_dice(6)
    res = goodness_of_fit(z, 5000)
    assert res.n_rolls == 5000
    assert res.dof == 10
    assert res.p_value > 1e-4


def test_goodness_of_fit_for_constant() -> None:
    res = goodness_of_fit(constant(3), 10)
    assert res.p_value == 1.0
    assert res.dof == 0


def test_independence_test_detects_dependence() -> None:
    x = fair_dice(6)
    y = fair_dice(6)
    z = x + y
    assert independence_test(x, z, 2000).p_value < 1e-6
    assert independence_test(x, y, 2000).p_value > 1e-3
    assert independence_test(x, constant(1), 50).p_value == 1.0
