"""
analysis.py — Snapshot Aggregates for Reporting
===============================================

Read-only summaries of stored generations, used by the dashboard and
the CLI report. Nothing here confronts or breeds strategies.
"""

from __future__ import annotations

from typing import Dict, Sequence

import numpy as np

from .evolution import GenerationSnapshot


def average_bet_per_rank(snapshot: GenerationSnapshot) -> np.ndarray:
    """Mean bet of population A for each rank, shape ``(C,)``."""
    return snapshot.pop_a.mean(axis=0)


def call_proportion(snapshot: GenerationSnapshot) -> np.ndarray:
    """Share of B strategies calling in each (rank, bet) cell, ``(C, n_bets)``."""
    return snapshot.pop_b.mean(axis=0)


def best_strategy_a(snapshot: GenerationSnapshot) -> np.ndarray:
    """Bets of the fittest A strategy (first index wins ties)."""
    return snapshot.pop_a[int(np.argmax(snapshot.fitness_a))]


def best_strategy_b(snapshot: GenerationSnapshot) -> np.ndarray:
    """Call/Fold table of the fittest B strategy (first index wins ties)."""
    return snapshot.pop_b[int(np.argmax(snapshot.fitness_b))]


def mean_bet(snapshot: GenerationSnapshot) -> float:
    return float(snapshot.pop_a.mean())


def mean_gain(snapshot: GenerationSnapshot) -> float:
    """Average payoff to A over every pairing of the generation."""
    return float(snapshot.payoffs.mean())


def call_rate(snapshot: GenerationSnapshot) -> float:
    return float(snapshot.pop_b.mean())


def trajectory(history: Sequence[GenerationSnapshot]) -> Dict[str, np.ndarray]:
    """Per-generation series: generation index, mean gain of A, call rate of B."""
    return {
        "generation": np.array([s.generation for s in history], dtype=int),
        "mean_gain": np.array([mean_gain(s) for s in history]),
        "mean_bet": np.array([mean_bet(s) for s in history]),
        "call_rate": np.array([call_rate(s) for s in history]),
    }
