"""Shared fixtures: a controllable clock and a composer/engine pair bound to it."""

import pytest

from lit_economy.core.composer import LITComposer
from lit_economy.core.fusion import XenialFusionEngine

START_MS = 1_700_000_000_000.0


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start: float = START_MS):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def composer(clock):
    return LITComposer(clock=clock)


@pytest.fixture
def engine(composer):
    return XenialFusionEngine(composer)
