from __future__ import annotations

import pytest

from finrv.config import FiniteSpaceConfig, configure


@pytest.fixture(autouse=True)
def reproducible_sources():
    # Counter ids and a fixed seed make every test deterministic.
    previous = configure(FiniteSpaceConfig(seed=12345, id_scheme="counter"))
    yield
    configure(previous)
