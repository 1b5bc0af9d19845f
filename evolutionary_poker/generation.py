"""
generation.py — Selection, Crossover, Mutation, Repair
=======================================================

Produces a replacement population for one player from the current
population and its fitness vector:

  ParentSelection → Crossover → Mutation → DomainRepair (B only)

* Parents are the top ``round(N · parent_proportion)`` strategies.
* Each element of each child is copied from a parent drawn with
  probability ∝ ``exp(fitness)``.
* The whole population is replaced; there is no elitism.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from scipy.special import softmax

from .domain import EvolutionConfig, repair_population_b


# ── Parent selection ──────────────────────────────────────────────────

def select_parents(fitness: np.ndarray, parent_proportion: float) -> np.ndarray:
    """
    Indices of the fittest strategies, best first.

    Ties keep population order (stable sort), so the selection is
    reproducible.
    """
    fitness = np.asarray(fitness, dtype=np.float64)
    k = max(1, int(round(len(fitness) * parent_proportion)))
    order = np.argsort(-fitness, kind="stable")
    return order[:k]


def selection_weights(parent_fitness: np.ndarray) -> np.ndarray:
    """
    Sampling probabilities ∝ ``exp(fitness)``.

    ``softmax`` shifts by the maximum before exponentiating, so large
    fitness values cannot overflow while the ratios stay the same.
    """
    return softmax(np.asarray(parent_fitness, dtype=np.float64))


# ── Crossover ─────────────────────────────────────────────────────────

def crossover(
    parents: np.ndarray,
    weights: np.ndarray,
    size: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """
    Build *size* children from ``parents`` of shape ``(k, *element_shape)``.

    Every element position of every child draws its own parent.
    """
    element_shape: Tuple[int, ...] = parents.shape[1:]
    chosen = rng.choice(len(parents), size=(size,) + element_shape, p=weights)
    positions = np.indices(element_shape)
    return parents[(chosen,) + tuple(positions)]


# ── Mutation ──────────────────────────────────────────────────────────

def mutate_a(
    children: np.ndarray,
    config: EvolutionConfig,
    rate: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """Redraw each bet uniformly from the bet set with probability *rate*."""
    mask = rng.random(children.shape) < rate
    redraw = rng.choice(config.bets, size=children.shape)
    return np.where(mask, redraw, children)


def mutate_b(
    children: np.ndarray,
    rate: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """
    Redraw each action uniformly from {Call, Fold}.

    Half of the redraws reproduce the old action, so the Bernoulli rate
    is doubled (capped at 1) to match the effective rate of player A.
    """
    effective = min(1.0, 2.0 * rate)
    mask = rng.random(children.shape) < effective
    redraw = rng.random(children.shape) < 0.5
    return np.where(mask, redraw, children)


# ── Full generation step ──────────────────────────────────────────────

def next_population_a(
    pop_a: np.ndarray,
    fitness: np.ndarray,
    config: EvolutionConfig,
    rng: np.random.Generator,
) -> np.ndarray:
    """Replacement population for player A (fitness = column means)."""
    fitness = np.asarray(fitness, dtype=np.float64)
    parent_idx = select_parents(fitness, config.parent_proportion)
    weights = selection_weights(fitness[parent_idx])
    children = crossover(pop_a[parent_idx], weights, len(pop_a), rng)
    return mutate_a(children, config, config.mutation_rate, rng)


def next_population_b(
    pop_b: np.ndarray,
    fitness: np.ndarray,
    config: EvolutionConfig,
    rng: np.random.Generator,
) -> np.ndarray:
    """Replacement population for player B (fitness = negated row means)."""
    fitness = np.asarray(fitness, dtype=np.float64)
    parent_idx = select_parents(fitness, config.parent_proportion)
    weights = selection_weights(fitness[parent_idx])
    children = crossover(pop_b[parent_idx], weights, len(pop_b), rng)
    children = mutate_b(children, config.mutation_rate, rng)
    return repair_population_b(children, config)
