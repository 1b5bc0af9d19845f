"""
domain.py — Ranks, Bets and Strategy Populations
=================================================

Two-player, single-card, single-bet poker.

Key design decisions
--------------------
* **Ranks** are the integers ``1..C``; **bets** are evenly spaced
  values ``0, step, 2·step, …, max``.
* **Player A** strategies map rank → bet and are stored as rows of a
  ``(N, C)`` float array of bet *values*.
* **Player B** strategies map (rank, bet) → Call/Fold and are stored as
  a ``(N, C, n_bets)`` bool array (``True`` = Call).
* Calling at the top rank or against a zero bet is risk-free, so every
  B strategy is **repaired** to Call in those cells whenever one is
  created.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Final, List

import numpy as np

# ── Constants ─────────────────────────────────────────────────────────

CALL: Final[bool] = True
FOLD: Final[bool] = False

PLAYER_A: Final[int] = 0
PLAYER_B: Final[int] = 1


# ── Configuration ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class EvolutionConfig:
    """
    Game domain and evolution parameters.

    Parameters
    ----------
    num_ranks : int
        Number of card ranks ``C`` (ranks are ``1..C``).
    bet_min, bet_max, bet_step : float
        Bet set ``bet_min, bet_min + step, …, bet_max``; must contain 0.
    ante : float
        Amount each player puts in the pot before the deal.
    population_size : int
        Strategies per player population.
    generations : int
        Number of evaluated generations.
    parent_proportion : float
        Share of each population kept as parents, in (0, 1].
    mutation_rate : float
        Per-element mutation probability, in [0, 1].
    seed : int
        Top-level random seed.
    """

    num_ranks: int = 10
    bet_min: float = 0.0
    bet_max: float = 20.0
    bet_step: float = 2.0
    ante: float = 5.0
    population_size: int = 50
    generations: int = 100
    parent_proportion: float = 0.5
    mutation_rate: float = 0.05
    seed: int = 42

    def validate(self) -> "EvolutionConfig":
        """Raise ``ValueError`` on the first invalid parameter."""
        if self.num_ranks < 2:
            raise ValueError(f"num_ranks must be >= 2, got {self.num_ranks}.")
        if self.bet_step <= 0:
            raise ValueError(f"bet_step must be > 0, got {self.bet_step}.")
        if self.bet_max < self.bet_min:
            raise ValueError(
                f"bet_max ({self.bet_max}) is below bet_min ({self.bet_min})."
            )
        if not (_is_multiple(self.bet_min, self.bet_step)
                and _is_multiple(self.bet_max - self.bet_min, self.bet_step)):
            raise ValueError(
                f"Bet set {self.bet_min}..{self.bet_max} is not aligned "
                f"to step {self.bet_step}."
            )
        if self.bet_min != 0:
            raise ValueError(
                f"Bet set must include 0 (bet_min={self.bet_min})."
            )
        if self.ante < 0:
            raise ValueError(f"ante must be >= 0, got {self.ante}.")
        if self.population_size < 2:
            raise ValueError(
                f"population_size must be >= 2, got {self.population_size}."
            )
        if not 0.0 < self.parent_proportion <= 1.0:
            raise ValueError(
                "parent_proportion must lie in (0, 1], "
                f"got {self.parent_proportion}."
            )
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError(
                f"mutation_rate must lie in [0, 1], got {self.mutation_rate}."
            )
        if self.generations < 1:
            raise ValueError(
                f"generations must be >= 1, got {self.generations}."
            )
        return self

    # ── Derived domain ────────────────────────────────────────────

    @property
    def ranks(self) -> np.ndarray:
        return np.arange(1, self.num_ranks + 1)

    @property
    def bets(self) -> np.ndarray:
        n = int(round((self.bet_max - self.bet_min) / self.bet_step)) + 1
        return self.bet_min + self.bet_step * np.arange(n, dtype=np.float64)

    @property
    def num_bets(self) -> int:
        return len(self.bets)

    @property
    def max_bet(self) -> float:
        return float(self.bets[-1])

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EvolutionConfig":
        known = {k: data[k] for k in cls.__dataclass_fields__ if k in data}
        return cls(**known)


def _is_multiple(value: float, step: float, tol: float = 1e-9) -> bool:
    q = value / step
    return abs(q - round(q)) < tol


# ── Indexing helpers ──────────────────────────────────────────────────

def strategy_labels(n: int) -> List[str]:
    """Bookkeeping labels ``s1..sN`` for reports and plots."""
    return [f"s{i + 1}" for i in range(n)]


def bet_indices(bet_values: np.ndarray, config: EvolutionConfig) -> np.ndarray:
    """
    Map bet *values* to column indices of the bet set.

    Raises ``ValueError`` if any value is not a member of the bet set.
    """
    values = np.asarray(bet_values, dtype=np.float64)
    pos = (values - config.bet_min) / config.bet_step
    idx = np.rint(pos).astype(np.intp)
    if (np.any(np.abs(pos - idx) > 1e-9)
            or np.any(idx < 0) or np.any(idx >= config.num_bets)):
        raise ValueError(
            f"Bet values outside the configured bet set: {values.ravel()}"
        )
    return idx


# ── Domain checks ─────────────────────────────────────────────────────

def check_strategy_a(strategy: np.ndarray, config: EvolutionConfig) -> np.ndarray:
    """Validate a single rank → bet strategy; returns it as a float array."""
    arr = np.asarray(strategy, dtype=np.float64)
    if arr.shape != (config.num_ranks,):
        raise ValueError(
            f"StrategyA must have shape ({config.num_ranks},), got {arr.shape}."
        )
    bet_indices(arr, config)
    return arr


def check_strategy_b(strategy: np.ndarray, config: EvolutionConfig) -> np.ndarray:
    """Validate a single (rank, bet) → action table; returns a bool array."""
    arr = np.asarray(strategy)
    expected = (config.num_ranks, config.num_bets)
    if arr.shape != expected:
        raise ValueError(f"StrategyB must have shape {expected}, got {arr.shape}.")
    if arr.dtype != np.bool_:
        if not np.isin(arr, (0, 1)).all():
            raise ValueError("StrategyB entries must be Call/Fold booleans.")
        arr = arr.astype(bool)
    return arr


# ── Populations ───────────────────────────────────────────────────────

def random_population_a(config: EvolutionConfig, rng: np.random.Generator) -> np.ndarray:
    """``(N, C)`` array of bets drawn uniformly from the bet set."""
    return rng.choice(config.bets, size=(config.population_size, config.num_ranks))


def random_population_b(config: EvolutionConfig, rng: np.random.Generator) -> np.ndarray:
    """``(N, C, n_bets)`` Call/Fold tables with fair coin flips, repaired."""
    shape = (config.population_size, config.num_ranks, config.num_bets)
    return repair_population_b(rng.random(shape) < 0.5, config)


def repair_population_b(pop_b: np.ndarray, config: EvolutionConfig) -> np.ndarray:
    """
    Force Call at the top rank and against a zero bet.

    Works on a whole population ``(N, C, n_bets)`` or a single table
    ``(C, n_bets)``; always returns a new array.
    """
    repaired = np.array(pop_b, dtype=bool, copy=True)
    repaired[..., -1, :] = CALL
    zero_col = int(bet_indices(np.array([0.0]), config)[0])
    repaired[..., :, zero_col] = CALL
    return repaired
