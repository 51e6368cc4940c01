"""
Fitness evaluation for knapsack candidates.

A candidate scores the total value of its selected items. When the selected
cost exceeds the capacity, a penalty policy reduces the score, floored at 0.
"""

from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from .data_models import Candidate, Item
from .errors import ConfigurationError, DatasetMismatchError


class PenaltyPolicy:
    """
    Maps a capacity overshoot to a non-negative penalty.

    Subclasses must be monotonic non-decreasing in overshoot.
    """

    name = "base"

    def penalty(self, overshoot: float, capacity: float) -> float:
        raise NotImplementedError


class ProportionalPenalty(PenaltyPolicy):
    """Penalty = factor * overshoot."""

    name = "proportional"

    def __init__(self, factor: float = 10.0):
        if factor < 0:
            raise ConfigurationError(f"Penalty factor must be non-negative, got: {factor}")
        self.factor = float(factor)

    def penalty(self, overshoot: float, capacity: float) -> float:
        return self.factor * max(overshoot, 0.0)

    def __repr__(self) -> str:
        return f"ProportionalPenalty(factor={self.factor})"


class CapacityMultiplePenalty(PenaltyPolicy):
    """
    Fixed penalty of multiple * capacity for any overshoot.

    Every overweight selection loses the same amount regardless of how far
    over the capacity it is.
    """

    name = "capacity_multiple"

    def __init__(self, multiple: float = 2.0):
        if multiple < 0:
            raise ConfigurationError(f"Penalty multiple must be non-negative, got: {multiple}")
        self.multiple = float(multiple)

    def penalty(self, overshoot: float, capacity: float) -> float:
        if overshoot <= 0:
            return 0.0
        return self.multiple * capacity

    def __repr__(self) -> str:
        return f"CapacityMultiplePenalty(multiple={self.multiple})"


PENALTY_POLICIES = {
    ProportionalPenalty.name: ProportionalPenalty,
    CapacityMultiplePenalty.name: CapacityMultiplePenalty,
}


def create_penalty_policy(config: Optional[Dict] = None) -> PenaltyPolicy:
    """
    Build a penalty policy from its configuration section.

    Args:
        config: Dict with 'policy' plus policy parameters ('factor' for
            proportional, 'multiple' for capacity_multiple). None selects the
            default proportional policy.

    Returns:
        PenaltyPolicy instance

    Raises:
        ConfigurationError: If the policy name is unknown
    """
    if not config:
        return ProportionalPenalty()

    name = config.get('policy', ProportionalPenalty.name)
    if name not in PENALTY_POLICIES:
        raise ConfigurationError(
            f"Unknown penalty policy: '{name}'. Must be one of {sorted(PENALTY_POLICIES)}"
        )

    if name == ProportionalPenalty.name:
        return ProportionalPenalty(factor=config.get('factor', 10.0))
    return CapacityMultiplePenalty(multiple=config.get('multiple', 2.0))


def evaluate(
    candidate: Candidate,
    items: Sequence[Item],
    capacity: float,
    penalty: Optional[PenaltyPolicy] = None
) -> float:
    """
    Score a single candidate against the items and the capacity.

    Args:
        candidate: Candidate to score
        items: Dataset items, one per candidate bit
        capacity: Maximum total cost before the penalty applies
        penalty: Penalty policy (defaults to ProportionalPenalty())

    Returns:
        Fitness value, always >= 0 and <= the total value of all items

    Raises:
        DatasetMismatchError: If the candidate length differs from len(items)
    """
    return FitnessEvaluator(items, capacity, penalty).evaluate(candidate)


class FitnessEvaluator:
    """
    Scores candidates against a fixed dataset and capacity.

    Item values and costs are cached as arrays so scoring a candidate is two
    masked sums. The evaluator holds no mutable state and can be shared
    between threads.
    """

    def __init__(
        self,
        items: Sequence[Item],
        capacity: float,
        penalty: Optional[PenaltyPolicy] = None
    ):
        if capacity < 0:
            raise ConfigurationError(f"Capacity must be non-negative, got: {capacity}")

        self.items = items
        self.capacity = capacity
        self.penalty = penalty if penalty is not None else ProportionalPenalty()
        self.values = np.array([item.value for item in items], dtype=float)
        self.costs = np.array([item.cost for item in items], dtype=float)

    @property
    def num_items(self) -> int:
        return len(self.values)

    def raw_value(self, candidate: Candidate) -> float:
        self._check_length(candidate)
        return float(self.values[candidate.bits].sum())

    def selected_cost(self, candidate: Candidate) -> float:
        self._check_length(candidate)
        return float(self.costs[candidate.bits].sum())

    def is_feasible(self, candidate: Candidate) -> bool:
        return self.selected_cost(candidate) <= self.capacity

    def evaluate(self, candidate: Candidate) -> float:
        """
        Score one candidate.

        Args:
            candidate: Candidate to score

        Returns:
            raw value when within capacity, otherwise raw value minus the
            penalty for the overshoot, floored at 0
        """
        raw_value = self.raw_value(candidate)
        selected_cost = self.selected_cost(candidate)

        if selected_cost <= self.capacity:
            return raw_value

        overshoot = selected_cost - self.capacity
        penalty = max(self.penalty.penalty(overshoot, self.capacity), 0.0)
        return max(raw_value - penalty, 0.0)

    def evaluate_all(
        self,
        candidates: Sequence[Candidate],
        workers: int = 1,
        executor: Optional[Executor] = None
    ) -> np.ndarray:
        """
        Score every candidate of a population.

        Args:
            candidates: Candidates to score
            workers: Thread count; values above 1 score candidates in a
                temporary thread pool
            executor: Existing pool to score candidates in; takes precedence
                over workers

        Returns:
            Float array where entry i is the fitness of candidates[i]
        """
        if executor is not None:
            scores: List[float] = list(executor.map(self.evaluate, candidates))
        elif workers > 1 and len(candidates) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                scores = list(executor.map(self.evaluate, candidates))
        else:
            scores = [self.evaluate(candidate) for candidate in candidates]

        return np.array(scores, dtype=float)

    def describe(self, candidate: Candidate) -> Dict[str, Union[float, bool, List[int]]]:
        """
        Break down a candidate's score for reporting.

        Returns:
            Dict with selected item ids, raw value, selected cost,
            feasibility, and fitness
        """
        return {
            'selected_ids': [self.items[i].id for i in candidate.selected_indices()],
            'raw_value': self.raw_value(candidate),
            'selected_cost': self.selected_cost(candidate),
            'feasible': self.is_feasible(candidate),
            'fitness': self.evaluate(candidate),
        }

    def _check_length(self, candidate: Candidate) -> None:
        if len(candidate) != self.num_items:
            raise DatasetMismatchError(len(candidate), self.num_items)
