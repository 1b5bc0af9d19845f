"""
confrontation.py — Exact Pairwise Payoffs
==========================================

Expected payoff to player A for one strategy pair, taken over all
``C²`` equally likely (rank_B, rank_A) deals, including ties.

For every deal A bets ``bet = A(rank_A)``; B answers
``action = B(rank_B, bet)``:

* Fold  → A wins the ante.
* Call  → A wins/loses ``ante + bet`` at showdown (0 on a tie).

Everything is computed with whole-table numpy indexing, so the result
is exact and deterministic, never a sampled estimate.
"""

from __future__ import annotations

import logging
from functools import lru_cache

import numpy as np

from .domain import EvolutionConfig, bet_indices, check_strategy_a, check_strategy_b

logger = logging.getLogger(__name__)


# ── Win table ─────────────────────────────────────────────────────────

@lru_cache(maxsize=None)
def win_table(num_ranks: int) -> np.ndarray:
    """
    ``W[rank_B, rank_A]`` = +1 if A's card is higher, −1 if lower, 0 on a tie.

    Cached per rank count and returned read-only.
    """
    ranks = np.arange(num_ranks)
    table = np.sign(ranks[np.newaxis, :] - ranks[:, np.newaxis]).astype(np.int8)
    table.flags.writeable = False
    return table


# ── Single confrontation ──────────────────────────────────────────────

def confront(
    strategy_a: np.ndarray,
    strategy_b: np.ndarray,
    ante: float,
    config: EvolutionConfig,
) -> float:
    """
    Exact expected payoff to A when *strategy_a* meets *strategy_b*.

    Payoff to B is always the negation. Raises ``ValueError`` if either
    strategy does not fit the configured domain.
    """
    bets_a = check_strategy_a(strategy_a, config)
    table_b = check_strategy_b(strategy_b, config)

    W = win_table(config.num_ranks)
    cols = bet_indices(bets_a, config)                     # (C,)  per rank_A

    # calls[rank_B, rank_A] = B's action when holding rank_B facing A's bet
    calls = table_b[:, cols]
    stakes = (ante + bets_a)[np.newaxis, :] * W            # (C, C)
    payoff = np.where(calls, stakes, ante)
    return float(payoff.mean())


# ── Population evaluation ─────────────────────────────────────────────

def payoff_matrix(
    pop_a: np.ndarray,
    pop_b: np.ndarray,
    config: EvolutionConfig,
) -> np.ndarray:
    """
    ``(N_B, N_A)`` matrix; cell ``(i, j)`` is the payoff to A-strategy
    ``j`` against B-strategy ``i``. Every pair is confronted exactly once.
    """
    n_a, n_b = len(pop_a), len(pop_b)
    matrix = np.empty((n_b, n_a), dtype=np.float64)
    for i in range(n_b):
        for j in range(n_a):
            matrix[i, j] = confront(pop_a[j], pop_b[i], config.ante, config)
    logger.debug("Evaluated %d x %d payoff matrix", n_b, n_a)
    return matrix


def fitness_a(matrix: np.ndarray) -> np.ndarray:
    """Mean payoff of each A-strategy over all B opponents (column means)."""
    return np.asarray(matrix).mean(axis=0)


def fitness_b(matrix: np.ndarray) -> np.ndarray:
    """Mean payoff of each B-strategy over all A opponents (negated row means)."""
    return (-np.asarray(matrix)).mean(axis=1)
