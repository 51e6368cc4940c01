"""
Mutation operators for the knapsack GA.

Independent per-bit flips with a fixed probability.
"""

from typing import List

import numpy as np

from .data_models import Candidate
from .errors import ConfigurationError


def default_mutation_rate(bit_length: int) -> float:
    """1 / bit_length, so each candidate expects about one flipped bit."""
    if bit_length <= 0:
        raise ConfigurationError(f"Bit length must be positive, got: {bit_length}")
    return 1.0 / bit_length


def validate_mutation_rate(mutation_rate: float) -> None:
    """
    Check that a mutation rate is a probability.

    Raises:
        ConfigurationError: If mutation_rate is outside [0, 1]
    """
    if not 0.0 <= mutation_rate <= 1.0:
        raise ConfigurationError(
            f"Mutation rate must be in [0, 1], got: {mutation_rate}"
        )


def bit_flip_mutation(
    candidate: Candidate,
    mutation_rate: float,
    rng: np.random.Generator
) -> int:
    """
    Flip each bit of a candidate independently with probability mutation_rate.

    Mutates the candidate in place.

    Args:
        candidate: Candidate to mutate
        mutation_rate: Per-bit flip probability in [0, 1]
        rng: Random number generator

    Returns:
        Number of bits flipped
    """
    validate_mutation_rate(mutation_rate)
    mask = rng.random(len(candidate)) < mutation_rate
    candidate.bits ^= mask
    return int(mask.sum())


def mutate_population(
    candidates: List[Candidate],
    mutation_rate: float,
    rng: np.random.Generator
) -> int:
    """
    Apply bit-flip mutation to every candidate in place.

    Args:
        candidates: Population to mutate
        mutation_rate: Per-bit flip probability in [0, 1]
        rng: Random number generator

    Returns:
        Total number of bits flipped across the population
    """
    validate_mutation_rate(mutation_rate)
    return sum(bit_flip_mutation(candidate, mutation_rate, rng) for candidate in candidates)
