"""
Crossover operators for the knapsack GA.

Implements single-point crossover as a pure function plus the pairwise
application over a population.
"""

from typing import List, Tuple

import numpy as np

from .data_models import Candidate


def single_point_crossover(
    parent_a: Candidate,
    parent_b: Candidate,
    point: int
) -> Tuple[Candidate, Candidate]:
    """
    Recombine two parents at one crossover point.

    Bits before the point are kept, bits from the point onward are swapped
    between the parents. Parents are not modified.

    Args:
        parent_a: First parent
        parent_b: Second parent
        point: Crossover point in [0, bit_length]

    Returns:
        Tuple of (child_a, child_b) where child_a = a[:point] + b[point:]
        and child_b = b[:point] + a[point:]

    Raises:
        ValueError: If parents differ in length or point is out of range

    Example:
        parents 1100 and 0011 at point 2 give children 1111 and 0000
    """
    if len(parent_a) != len(parent_b):
        raise ValueError(
            f"Parents must have the same length, got {len(parent_a)} and {len(parent_b)}"
        )
    if not 0 <= point <= len(parent_a):
        raise ValueError(f"Crossover point {point} out of range [0, {len(parent_a)}]")

    child_a = np.concatenate([parent_a.bits[:point], parent_b.bits[point:]])
    child_b = np.concatenate([parent_b.bits[:point], parent_a.bits[point:]])

    return Candidate(bits=child_a), Candidate(bits=child_b)


def apply_crossover(
    candidates: List[Candidate],
    rng: np.random.Generator
) -> List[int]:
    """
    Cross disjoint consecutive pairs (0, 1), (2, 3), ... in place.

    Each pair draws one point uniformly in [0, bit_length) and is replaced
    by its two children. With an odd population size the last candidate is
    left unchanged.

    Args:
        candidates: Post-selection population; entries are replaced
        rng: Random number generator

    Returns:
        List of crossover points used, one per pair
    """
    points = []
    if not candidates:
        return points

    bit_length = len(candidates[0])

    for i in range(0, len(candidates) - 1, 2):
        point = int(rng.integers(0, bit_length))
        candidates[i], candidates[i + 1] = single_point_crossover(
            candidates[i], candidates[i + 1], point
        )
        points.append(point)

    return points
