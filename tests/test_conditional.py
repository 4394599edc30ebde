from __future__ import annotations

from typing import Dict

import pytest

from finrv.dice import fair_dice
from finrv.errors import DegenerateConditioningError, OutcomeNotInSpaceError
from finrv.random_variable import combine
from finrv.theory import probabilities_equal


def _assert_pmf(actual: Dict, expected: Dict) -> None:
    assert set(actual) == set(expected)
    for k, p in expected.items():
        assert probabilities_equal(actual[k], p), (k, actual[k], p)


def _exact_conditional(condition) -> Dict:
    # Brute-force enumeration over the two dice faces.
    weights: Dict[int, int] = {}
    for a in range(1, 7):
        for b in range(1, 7):
            if condition(a, b):
                weights[a] = weights.get(a, 0) + 1
    total = sum(weights.values())
    return {a: w / total for a, w in weights.items()}


def test_conditional_on_other_random_variable_matches_enumeration() -> None:
    x = fair_dice(6, "X")
    y = fair_dice(6, "Y")
    z = (x + y).set_name("Z")
    expected = _exact_conditional(lambda a, b: a + b > 10)
    assert set(expected) == {5, 6}
    _assert_pmf(x.conditional_probability_mass_function(z, lambda v: v > 10), {5: 1 / 3, 6: 2 / 3})
    _assert_pmf(x.conditional_probability_mass_function(z, lambda v: v > 10), expected)


def test_conditional_on_event_of_own_space() -> None:
    x = fair_dice(6)
    y = fair_dice(6)
    z = x + y
    event = z.to_event(lambda v: v > 10)
    assert len(event) == 3
    _assert_pmf(z.conditional_probability_mass_function(event), {11: 2 / 3, 12: 1 / 3})


def test_boolean_random_variable_is_used_as_condition_by_default() -> None:
    x = fair_dice(6)
    _assert_pmf(x.conditional_probability_mass_function(x.gt(4)), {5: 0.5, 6: 0.5})


def test_condition_involving_shared_dice() -> None:
    x = fair_dice(6)
    y = fair_dice(6)
    z = x + y
    z_is_y_plus_3 = combine(z, y, mapping=lambda vz, vy: vz == vy + 3)
    _assert_pmf(x.conditional_probability_mass_function(z_is_y_plus_3, lambda v: v), {3: 1.0})


def test_conditioning_on_independent_variable_changes_nothing() -> None:
    x = fair_dice(6)
    y = fair_dice(6)
    _assert_pmf(
        x.conditional_probability_mass_function(y, lambda v: v % 2 == 0),
        {v: 1 / 6 for v in range(1, 7)},
    )


def test_event_from_another_space_is_rejected() -> None:
    x = fair_dice(6)
    y = fair_dice(6)
    z = x + y
    with pytest.raises(OutcomeNotInSpaceError):
        x.conditional_probability_mass_function(z.to_event(lambda v: v > 10))


def test_zero_probability_condition_fails_explicitly() -> None:
    x = fair_dice(6)
    y = fair_dice(6)
    z = x + y
    with pytest.raises(DegenerateConditioningError):
        x.conditional_probability_mass_function(z, lambda v: v > 12)
    with pytest.raises(DegenerateConditioningError):
        x.conditional_probability_mass_function(frozenset())


def test_condition_argument_requires_a_random_variable() -> None:
    x = fair_dice(6)
    with pytest.raises(TypeError):
        x.conditional_probability_mass_function(x.to_event(lambda v: v > 3), lambda v: v)
