"""Shared fixtures for the test suite."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest
from evolutionary_poker.domain import EvolutionConfig


@pytest.fixture
def config():
    """Small run: 5 ranks, bets 0..6 step 2, ante 2, N=6, G=4."""
    return EvolutionConfig(
        num_ranks=5, bet_min=0, bet_max=6, bet_step=2, ante=2.0,
        population_size=6, generations=4, parent_proportion=0.5,
        mutation_rate=0.1, seed=7,
    )


@pytest.fixture
def four_rank_config():
    """4 ranks, bets {0, 2, 4, 6, 8, 10}, ante 2."""
    return EvolutionConfig(
        num_ranks=4, bet_min=0, bet_max=10, bet_step=2, ante=2.0,
        population_size=4, generations=2,
    )


@pytest.fixture
def scenario_b():
    """Caller table (ranks 1..4 × bets 0..10): calls low bets with rank 2, all with 3-4."""
    return np.array([
        [True, False, False, False, False, False],
        [True, True, False, False, False, False],
        [True, True, True, True, True, True],
        [True, True, True, True, True, True],
    ])
