"""Shared fixtures: a controllable clock and a step-collecting observer."""

import pytest


class FakeClock:
    """Stands in for time.monotonic; only moves when told to."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms / 1000.0


class Collector:
    """Observer that keeps every (step, stats) pair it is given."""

    def __init__(self):
        self.steps = []
        self.stats = []

    def __call__(self, step, stats):
        self.steps.append(step)
        self.stats.append(stats)

    @property
    def kinds(self):
        return [s.kind.value for s in self.steps]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def collector():
    return Collector()
