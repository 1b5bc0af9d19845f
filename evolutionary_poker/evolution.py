"""
evolution.py — Generation Loop and Snapshot History
====================================================

Drives the co-evolution of the two populations:

  Initialise → (Evaluate → Generate)* → Terminate after G generations

Each evaluated generation is frozen into a :class:`GenerationSnapshot`.
Snapshots are produced by a generator so that callers can persist,
subsample or drop them instead of holding the whole run in memory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional

import numpy as np

from .confrontation import fitness_a, fitness_b, payoff_matrix
from .domain import (
    PLAYER_A,
    PLAYER_B,
    EvolutionConfig,
    random_population_a,
    random_population_b,
)
from .generation import next_population_a, next_population_b

logger = logging.getLogger(__name__)


def _frozen(arr: np.ndarray) -> np.ndarray:
    out = np.array(arr, copy=True)
    out.flags.writeable = False
    return out


# ── Snapshot ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GenerationSnapshot:
    """One evaluated generation; arrays are read-only copies."""

    generation: int
    pop_a: np.ndarray
    pop_b: np.ndarray
    payoffs: np.ndarray

    def __post_init__(self) -> None:
        for name in ("pop_a", "pop_b", "payoffs"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    @property
    def fitness_a(self) -> np.ndarray:
        return fitness_a(self.payoffs)

    @property
    def fitness_b(self) -> np.ndarray:
        return fitness_b(self.payoffs)


# ── Evolution Engine ──────────────────────────────────────────────────

class EvolutionEngine:
    """
    Co-evolves bettor (A) and caller (B) populations.

    Parameters
    ----------
    config : EvolutionConfig
        Validated on construction; an invalid config raises
        ``ValueError`` before any work is done.
    """

    def __init__(self, config: EvolutionConfig) -> None:
        self.config = config.validate()
        self.history: List[GenerationSnapshot] = []
        self._generations_run: int = 0

    # ── Generation loop ───────────────────────────────────────────

    def iter_generations(
        self,
        callback: Optional[Callable[[GenerationSnapshot], None]] = None,
        keep_history: bool = True,
    ) -> Iterator[GenerationSnapshot]:
        """
        Yield one snapshot per evaluated generation, ``1..G-1``.

        Generation ``g`` is evaluated and then bred into ``g + 1``; the
        last bred population (generation ``G``) is never evaluated, so
        ``G = 1`` yields nothing.

        With ``keep_history=False`` snapshots are only yielded, never
        retained on the engine. Every call restarts from the seed and
        clears the previous history.
        """
        cfg = self.config
        # One independent stream per player, both derived from the seed.
        streams = np.random.SeedSequence(cfg.seed).spawn(2)
        rngs = [np.random.default_rng(s) for s in streams]
        rng_a, rng_b = rngs[PLAYER_A], rngs[PLAYER_B]

        self.history = []
        self._generations_run = 0

        pop_a = random_population_a(cfg, rng_a)
        pop_b = random_population_b(cfg, rng_b)

        for g in range(1, cfg.generations):
            matrix = payoff_matrix(pop_a, pop_b, cfg)
            snapshot = GenerationSnapshot(g, pop_a, pop_b, matrix)
            if keep_history:
                self.history.append(snapshot)
            self._generations_run = g

            if callback is not None:
                callback(snapshot)
            yield snapshot

            pop_a = next_population_a(pop_a, fitness_a(matrix), cfg, rng_a)
            pop_b = next_population_b(pop_b, fitness_b(matrix), cfg, rng_b)

    def run(
        self,
        log_every: Optional[int] = None,
        callback: Optional[Callable[[GenerationSnapshot], None]] = None,
    ) -> List[GenerationSnapshot]:
        """
        Run all generations and return the full snapshot history.

        Parameters
        ----------
        log_every : int | None
            Print progress every *n* generations (default: 10 times);
            values below 1 are treated as 1.
        callback : callable | None
            ``callback(snapshot)`` invoked for each generation.
        """
        total = self.config.generations - 1
        if log_every is None:
            log_every = total // 10
        log_every = max(1, log_every)

        for snap in self.iter_generations(callback=callback):
            if snap.generation % log_every == 0 or snap.generation == total:
                mean_gain = float(snap.payoffs.mean())
                mean_bet = float(snap.pop_a.mean())
                call_rate = float(snap.pop_b.mean())
                logger.info(
                    "G=%5d  GainA=%8.4f  MeanBet=%7.3f  CallB=%5.1f%%",
                    snap.generation, mean_gain, mean_bet, call_rate * 100,
                )
                print(
                    f"  G={snap.generation:>5d}  "
                    f"GainA={mean_gain:>8.4f}  "
                    f"MeanBet={mean_bet:>7.3f}  "
                    f"CallB={call_rate:>5.1%}"
                )

        return self.history

    # ── Reporting ─────────────────────────────────────────────────

    def summary(self) -> Dict[str, Any]:
        """Structured summary suitable for JSON serialisation."""
        last = self.history[-1] if self.history else None
        report: Dict[str, Any] = {
            "generations": self._generations_run,
            "snapshots": len(self.history),
            "config": self.config.to_dict(),
            "final": None,
        }
        if last is not None:
            best_a = int(np.argmax(last.fitness_a))
            best_b = int(np.argmax(last.fitness_b))
            report["final"] = {
                "generation": last.generation,
                "mean_gain_a": round(float(last.payoffs.mean()), 4),
                "mean_bet_a": round(float(last.pop_a.mean()), 4),
                "call_rate_b": round(float(last.pop_b.mean()), 4),
                "best_a": {
                    "index": best_a,
                    "fitness": round(float(last.fitness_a[best_a]), 4),
                    "bets": last.pop_a[best_a].tolist(),
                },
                "best_b": {
                    "index": best_b,
                    "fitness": round(float(last.fitness_b[best_b]), 4),
                },
            }
        return report

    def print_summary(self) -> None:
        """Pretty-print session report to stdout."""
        s = self.summary()
        c = s["config"]
        print()
        print("═" * 60)
        print("  EVOLUTION — SESSION REPORT")
        print("═" * 60)
        print(f"  Generations          : {s['generations']:>10,d}")
        print(f"  Population Size      : {c['population_size']:>10,d}")
        print(f"  Ante                 : {c['ante']:>10}")
        print(f"  Bets                 : {c['bet_min']}..{c['bet_max']} "
              f"step {c['bet_step']}")
        print(f"  Mutation Rate        : {c['mutation_rate']:>10}")
        print(f"  Parent Proportion    : {c['parent_proportion']:>10}")
        f = s["final"]
        if f is not None:
            print("─" * 60)
            print(f"  FINAL GENERATION ({f['generation']})")
            print(f"  Mean Gain (A)        : {f['mean_gain_a']:>10.4f}")
            print(f"  Mean Bet (A)         : {f['mean_bet_a']:>10.4f}")
            print(f"  Call Rate (B)        : {f['call_rate_b']:.1%}")
            print(f"  Best A Bets          : {f['best_a']['bets']}")
        print("═" * 60)
