"""
Genetic Algorithm Solver for the 0/1 Knapsack Problem

This package evolves bit-vector selections of items toward a subset with
maximal total value whose total cost stays within a capacity.

Key Features:
- Explicit, seedable RNG threaded through every operator
- Roulette-wheel selection, single-point crossover, bit-flip mutation
- Configurable penalty policy for overweight selections
- Per-generation best/average/worst fitness history

Modules:
- data_models: Core data structures (Item, Candidate, FitnessRecord, EvolutionResult)
- errors: Exception types
- fitness: Fitness evaluation and penalty policies
- selection: Roulette-wheel selection
- crossover: Single-point crossover
- mutation: Bit-flip mutation
- population: Population and generation step
- evolution: Generation loop and statistics
- io_utils: Dataset and result CSV I/O
- visualization: Fitness chart
- cli: Run configuration loading and validation
- orchestration: End-to-end run from a configuration
"""

__version__ = "0.1.0"

from .data_models import Item, Candidate, FitnessRecord, EvolutionResult
from .errors import (
    KnapsackGAError,
    ConfigurationError,
    DegenerateFitnessError,
    DatasetMismatchError,
)
from .fitness import (
    FitnessEvaluator,
    PenaltyPolicy,
    ProportionalPenalty,
    CapacityMultiplePenalty,
    evaluate,
)
from .population import Population
from .evolution import EvolutionDriver, run_evolution

__all__ = [
    "Item",
    "Candidate",
    "FitnessRecord",
    "EvolutionResult",
    "KnapsackGAError",
    "ConfigurationError",
    "DegenerateFitnessError",
    "DatasetMismatchError",
    "FitnessEvaluator",
    "PenaltyPolicy",
    "ProportionalPenalty",
    "CapacityMultiplePenalty",
    "evaluate",
    "Population",
    "EvolutionDriver",
    "run_evolution",
]
