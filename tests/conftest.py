"""Pytest fixtures for qumod tests."""

import numpy as np
import pytest


class FixedRandom:
    """Random source that always returns the same draw."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def force_one():
    """Draws 0.0, so outcome 1 is chosen whenever P(1) > 0."""
    return FixedRandom(0.0)


@pytest.fixture
def force_zero():
    """Draws just below 1, so outcome 0 is chosen whenever P(1) < 1."""
    return FixedRandom(1.0 - 1e-12)


@pytest.fixture
def rng():
    """Seeded generator for reproducible sampling."""
    return np.random.default_rng(1234)
