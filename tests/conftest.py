import random
from datetime import date

import pytest

from app.models.simulation import SimulationParameters


class FixedRandom:
    """Deterministic stand-in for random.Random: lowest value of every range."""

    def __init__(self, unit: float = 0.5):
        self.unit = unit

    def random(self):
        return self.unit

    def randint(self, a, b):
        return a

    def uniform(self, a, b):
        return a

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def fixed_rng():
    return FixedRandom()


@pytest.fixture
def seeded_rng():
    return random.Random(1234)


@pytest.fixture
def backlog_payload():
    return {
        "slices": [
            {"title": "A", "status": "Planned", "owner": "sam"},
            {"title": "B", "status": "Planned"},
            {"title": "C", "status": "Done"},
            {"title": "D", "status": "Waiting on vendor"},
        ],
        "groups": [
            {"name": "payments", "slices": ["A", "B"], "risk": 0.5, "targetRelease": "R1"},
            {"name": "legacy", "slices": [{"title": "D"}], "risk": 0.9, "exclude": True},
        ],
    }


@pytest.fixture
def make_params():
    def _make(**overrides):
        values = dict(
            sliceCountMin=10,
            sliceCountMax=10,
            splitFactorMin=1.0,
            splitFactorMax=1.0,
            throughputValues=[10],
            throughputMin=0.0,
            throughputMax=None,
            uncertaintyFactor=0.0,
            risk=0.0,
            ignoreRisk=True,
            startDate=date(2025, 1, 1),
            deadlineDate=date(2025, 1, 31),
            iterations=200,
        )
        values.update(overrides)
        return SimulationParameters(**values)
    return _make
