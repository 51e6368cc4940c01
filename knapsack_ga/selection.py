"""
Roulette-wheel selection.

Builds the next generation by fitness-proportionate sampling with
replacement.
"""

from typing import List, Sequence

import numpy as np

from .data_models import Candidate
from .errors import ConfigurationError, DegenerateFitnessError

ZERO_FITNESS_POLICIES = ("raise", "uniform")


def selection_probabilities(fitness: Sequence[float]) -> np.ndarray:
    """
    Normalize fitness values into selection probabilities.

    Args:
        fitness: Non-negative fitness value per candidate

    Returns:
        Array of probabilities summing to 1

    Raises:
        ValueError: If fitness is empty, negative, or not finite
        DegenerateFitnessError: If the total fitness is zero
    """
    fitness = np.asarray(fitness, dtype=float)

    if fitness.size == 0:
        raise ValueError("Cannot select from an empty population")
    if not np.all(np.isfinite(fitness)):
        raise ValueError("Fitness values must be finite")
    if np.any(fitness < 0):
        raise ValueError("Fitness values must be non-negative for roulette selection")

    total = fitness.sum()
    if total == 0:
        raise DegenerateFitnessError()

    return fitness / total


def cumulative_distribution(probabilities: np.ndarray) -> np.ndarray:
    """Running sum of the probabilities, cum[i] = p[0] + ... + p[i]."""
    return np.cumsum(probabilities)


def roulette_indices(
    fitness: Sequence[float],
    rng: np.random.Generator,
    num_draws: int,
    on_zero_fitness: str = "raise"
) -> np.ndarray:
    """
    Draw candidate indices proportionally to fitness.

    Each draw samples u in [0, 1) and picks the first index whose cumulative
    probability is >= u.

    Args:
        fitness: Fitness value per candidate
        rng: Random number generator
        num_draws: Number of indices to draw
        on_zero_fitness: "raise" to fail on zero total fitness, "uniform" to
            fall back to uniform sampling

    Returns:
        Integer array of num_draws selected indices

    Raises:
        DegenerateFitnessError: If total fitness is zero and the policy is "raise"
        ConfigurationError: If the zero-fitness policy is unknown
    """
    if on_zero_fitness not in ZERO_FITNESS_POLICIES:
        raise ConfigurationError(
            f"Unknown zero-fitness policy: '{on_zero_fitness}'. "
            f"Must be one of {list(ZERO_FITNESS_POLICIES)}"
        )

    size = len(fitness)
    try:
        probabilities = selection_probabilities(fitness)
    except DegenerateFitnessError:
        if on_zero_fitness == "raise":
            raise
        return rng.integers(0, size, size=num_draws)

    cumulative = cumulative_distribution(probabilities)
    draws = rng.random(num_draws)
    indices = np.searchsorted(cumulative, draws, side='left')

    # Rounding can leave cum[-1] a hair below a draw close to 1
    return np.minimum(indices, size - 1)


def roulette_selection(
    candidates: Sequence[Candidate],
    fitness: Sequence[float],
    rng: np.random.Generator,
    on_zero_fitness: str = "raise"
) -> List[Candidate]:
    """
    Build a new population of the same size by roulette-wheel selection.

    Selected candidates are copied, so the new population shares no bit
    arrays with the old one, even when one candidate is drawn repeatedly.

    Args:
        candidates: Current population
        fitness: Fitness per candidate (same order as candidates)
        rng: Random number generator
        on_zero_fitness: Policy when the total fitness is zero

    Returns:
        List of len(candidates) copied candidates

    Raises:
        ValueError: If candidates and fitness differ in length
        DegenerateFitnessError: If total fitness is zero under the "raise" policy
    """
    if len(candidates) != len(fitness):
        raise ValueError(
            f"Got {len(fitness)} fitness values for {len(candidates)} candidates"
        )

    indices = roulette_indices(fitness, rng, len(candidates), on_zero_fitness)
    return [candidates[i].copy() for i in indices]
