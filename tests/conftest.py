"""
Pytest fixtures for the 2048 tests.
"""

import pytest


class FixedDraws:
    """Random source replaying a fixed sequence of uniform draws."""

    def __init__(self, draws):
        self._draws = list(draws)

    def random(self):
        if not self._draws:
            raise AssertionError("random source exhausted")
        return self._draws.pop(0)

    @property
    def remaining(self):
        return len(self._draws)


@pytest.fixture
def fixed_draws():
    """Factory for deterministic random sources."""
    return FixedDraws


@pytest.fixture
def near_terminal_grid():
    """Full grid except for one mergeable pair; sliding left leaves one empty cell and no moves."""
    return [
        [2, 2, 16, 8],
        [8, 32, 64, 128],
        [16, 64, 128, 256],
        [32, 128, 256, 512],
    ]


@pytest.fixture
def terminal_grid():
    return [
        [2, 4, 2, 4],
        [4, 2, 4, 2],
        [2, 4, 2, 4],
        [4, 2, 4, 2],
    ]
