"""
evolutionary-poker — co-evolved strategies for one-card, one-bet poker.

Public API::

    from evolutionary_poker import EvolutionConfig, EvolutionEngine

    config = EvolutionConfig(num_ranks=10, ante=5, population_size=50)
    engine = EvolutionEngine(config)
    history = engine.run()
"""

__version__ = "1.0.0"

from .domain import EvolutionConfig
from .confrontation import confront, payoff_matrix
from .evolution import EvolutionEngine, GenerationSnapshot

__all__ = [
    "EvolutionConfig",
    "EvolutionEngine",
    "GenerationSnapshot",
    "confront",
    "payoff_matrix",
    "__version__",
]
