from __future__ import annotations

import numpy as np
import pytest

from finrv.config import FiniteSpaceConfig, configure, get_config
from finrv.dice import fair_dice
from finrv.sources import CounterIdGenerator, fresh_id, get_rng, set_id_generator, set_rng
from finrv.spaces import PrimitiveSampleSpace


class TestFiniteSpaceConfig:
    def test_defaults_validate(self) -> None:
        FiniteSpaceConfig().validate()

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"tolerance": 0.0},
            {"tolerance": 1.5},
            {"enumeration_warning_threshold": 0},
            {"seed": -1},
            {"bitgen": "MT19937"},
            {"id_scheme": "sequential"},
            {"id_prefix": "  "},
        ],
    )
    def test_invalid_values(self, kwargs) -> None:
        with pytest.raises(ValueError):
            FiniteSpaceConfig(**kwargs).validate()
        with pytest.raises(ValueError):
            configure(FiniteSpaceConfig(**kwargs))


def test_configure_returns_previous_and_installs_sources() -> None:
    cfg = FiniteSpaceConfig(seed=1, id_scheme="counter", id_prefix="die")
    previous = configure(cfg)
    assert get_config() is cfg
    assert previous.id_scheme == "counter"
    assert PrimitiveSampleSpace(1, lambda i: 1.0).id == "die-1"
    assert fresh_id() == "die-2"


def test_seed_makes_sampling_reproducible() -> None:
    configure(FiniteSpaceConfig(seed=7, id_scheme="counter"))
    first = [fair_dice(6).roll_alone() for _ in range(25)]
    configure(FiniteSpaceConfig(seed=7, id_scheme="counter"))
    second = [fair_dice(6).roll_alone() for _ in range(25)]
    assert first == second


def test_explicit_rng_overrides_default_source() -> None:
    d = fair_dice(20)
    a = [d.roll_alone(np.random.default_rng(3)) for _ in range(5)]
    b = [d.roll_alone(np.random.default_rng(3)) for _ in range(5)]
    assert a == b


def test_sources_reject_wrong_types() -> None:
    with pytest.raises(TypeError):
        set_rng(object())  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        set_id_generator(object())  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        CounterIdGenerator(prefix="")
    assert isinstance(get_rng(), np.random.Generator)
