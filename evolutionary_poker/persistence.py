"""
persistence.py — Snapshot History on Disk
==========================================

A run is stored as one compressed ``.npz`` archive:

==============  ====================  =================================
Key             Shape                 Content
==============  ====================  =================================
``generation``  ``(G,)``              Generation indices
``pop_a``       ``(G, N, C)``         Bets of every A strategy
``pop_b``       ``(G, N, C, n_bets)`` Call/Fold tables (bool)
``payoffs``     ``(G, N, N)``         Payoff matrices (B rows, A cols)
``config``      scalar str            JSON-encoded EvolutionConfig
==============  ====================  =================================
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Sequence, Tuple, Union

import numpy as np

from .domain import EvolutionConfig
from .evolution import GenerationSnapshot

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_ARRAY_KEYS = ("generation", "pop_a", "pop_b", "payoffs")


def save_history(
    path: PathLike,
    history: Sequence[GenerationSnapshot],
    config: EvolutionConfig,
) -> Path:
    """Write *history* and *config* to *path*; returns the written path."""
    if not history:
        raise ValueError("Cannot save an empty snapshot history.")
    path = Path(path)
    np.savez_compressed(
        path,
        generation=np.array([s.generation for s in history], dtype=np.int64),
        pop_a=np.stack([s.pop_a for s in history]),
        pop_b=np.stack([s.pop_b for s in history]),
        payoffs=np.stack([s.payoffs for s in history]),
        config=np.array(json.dumps(config.to_dict())),
    )
    # numpy appends the suffix when it is missing
    if path.suffix != ".npz":
        path = path.with_name(path.name + ".npz")
    logger.info("Saved %d snapshot(s) to %s", len(history), path)
    return path


def load_history(path: PathLike) -> Tuple[EvolutionConfig, List[GenerationSnapshot]]:
    """Read an archive written by :func:`save_history`."""
    with np.load(path, allow_pickle=False) as data:
        missing = [k for k in _ARRAY_KEYS + ("config",) if k not in data.files]
        if missing:
            raise ValueError(f"{path}: missing arrays {missing}.")
        config = EvolutionConfig.from_dict(json.loads(str(data["config"])))
        generation = data["generation"]
        pop_a, pop_b, payoffs = data["pop_a"], data["pop_b"], data["payoffs"]

    n = len(generation)
    if not (len(pop_a) == len(pop_b) == len(payoffs) == n):
        raise ValueError(f"{path}: arrays disagree on the number of generations.")

    snapshots = [
        GenerationSnapshot(int(generation[i]), pop_a[i], pop_b[i], payoffs[i])
        for i in range(n)
    ]
    return config, snapshots
