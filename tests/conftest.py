"""
Shared fixtures for meshprune tests.
"""

import random

import pytest


class ScriptedRandom(random.Random):
    """Returns the given uniform draws in order."""

    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)

    def random(self):
        return self._values.pop(0)


@pytest.fixture
def scripted_rng():
    """Factory: scripted_rng([0.5, 0.9]) yields those draws from random()."""
    return ScriptedRandom
