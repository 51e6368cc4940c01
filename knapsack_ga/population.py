"""
Population of knapsack candidates.

Owns the candidates of a run and performs one generation step:
select -> crossover -> mutate -> evaluate.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

import numpy as np

from .crossover import apply_crossover
from .data_models import Candidate, FitnessRecord, Item
from .errors import ConfigurationError, DatasetMismatchError
from .fitness import FitnessEvaluator, PenaltyPolicy
from .mutation import default_mutation_rate, mutate_population, validate_mutation_rate
from .selection import ZERO_FITNESS_POLICIES, roulette_selection


def random_candidates(
    size: int,
    bit_length: int,
    rng: np.random.Generator
) -> List[Candidate]:
    """Create size candidates with each bit set with probability 0.5."""
    bits = rng.random((size, bit_length)) < 0.5
    return [Candidate(bits=row.copy()) for row in bits]


class Population:
    """
    Fixed-size population of candidates over one item dataset.

    The population keeps its size and bit length for the whole run. Each
    call to step() replaces the candidates with the next generation.

    Args:
        size: Number of candidates (> 0)
        bit_length: Bits per candidate, must equal len(items)
        items: Dataset items referenced for the run
        rng: Random number generator used by every operator
        mutation_rate: Per-bit flip probability; None means 1 / bit_length
        penalty: Penalty policy for overweight candidates
        on_zero_fitness: "raise" or "uniform", see roulette_selection
        workers: Thread count for fitness evaluation
        candidates: Optional initial candidates instead of random ones

    Raises:
        ConfigurationError: On invalid size, bit length, or mutation rate
        DatasetMismatchError: If bit_length or a supplied candidate does not
            match the dataset size
    """

    def __init__(
        self,
        size: int,
        bit_length: int,
        items: Sequence[Item],
        rng: np.random.Generator,
        mutation_rate: Optional[float] = None,
        penalty: Optional[PenaltyPolicy] = None,
        on_zero_fitness: str = "raise",
        workers: int = 1,
        candidates: Optional[List[Candidate]] = None
    ):
        if size <= 0:
            raise ConfigurationError(f"Population size must be positive, got: {size}")
        if bit_length <= 0:
            raise ConfigurationError(f"Bit length must be positive, got: {bit_length}")
        if mutation_rate is None:
            mutation_rate = default_mutation_rate(bit_length)
        validate_mutation_rate(mutation_rate)
        if on_zero_fitness not in ZERO_FITNESS_POLICIES:
            raise ConfigurationError(
                f"Unknown zero-fitness policy: '{on_zero_fitness}'. "
                f"Must be one of {list(ZERO_FITNESS_POLICIES)}"
            )
        if workers < 1:
            raise ConfigurationError(f"Workers must be at least 1, got: {workers}")
        if bit_length != len(items):
            raise DatasetMismatchError(bit_length, len(items))

        self.size = size
        self.bit_length = bit_length
        self.items = items
        self.rng = rng
        self.mutation_rate = float(mutation_rate)
        self.penalty = penalty
        self.on_zero_fitness = on_zero_fitness
        self.workers = workers
        self._evaluator: Optional[FitnessEvaluator] = None
        self._executor: Optional[ThreadPoolExecutor] = None

        if candidates is None:
            self.candidates = random_candidates(size, bit_length, rng)
        else:
            if len(candidates) != size:
                raise ConfigurationError(
                    f"Expected {size} initial candidates, got {len(candidates)}"
                )
            for candidate in candidates:
                if len(candidate) != bit_length:
                    raise DatasetMismatchError(len(candidate), bit_length)
            self.candidates = [candidate.copy() for candidate in candidates]

    def __len__(self) -> int:
        return len(self.candidates)

    def evaluator(self, capacity: float) -> FitnessEvaluator:
        """Fitness evaluator for this dataset, rebuilt only when the capacity changes."""
        if self._evaluator is None or self._evaluator.capacity != capacity:
            self._evaluator = FitnessEvaluator(self.items, capacity, self.penalty)
        return self._evaluator

    def executor(self) -> Optional[ThreadPoolExecutor]:
        """Thread pool shared by every evaluation, or None when workers is 1."""
        if self.workers > 1 and self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.workers)
        return self._executor

    def close(self) -> None:
        """Shut down the evaluation thread pool; a later evaluation starts a new one."""
        if self._executor is not None:
            self._executor.shutdown()
            self._executor = None

    def evaluate(self, capacity: float) -> np.ndarray:
        """Fitness of every candidate, in candidate order."""
        return self.evaluator(capacity).evaluate_all(self.candidates, executor=self.executor())

    def select(self, capacity: float) -> None:
        """Replace the candidates by roulette selection on current fitness."""
        fitness = self.evaluate(capacity)
        self.candidates = roulette_selection(
            self.candidates, fitness, self.rng, on_zero_fitness=self.on_zero_fitness
        )

    def crossover(self) -> List[int]:
        return apply_crossover(self.candidates, self.rng)

    def mutate(self) -> int:
        return mutate_population(self.candidates, self.mutation_rate, self.rng)

    def step(self, capacity: float) -> np.ndarray:
        """
        Advance one generation.

        Runs selection, crossover, and mutation in that order, then scores the
        resulting generation.

        Args:
            capacity: Capacity the selected cost is compared against

        Returns:
            Fitness of the post-variation candidates

        Raises:
            DegenerateFitnessError: If selection sees zero total fitness under
                the "raise" policy
        """
        self.select(capacity)
        self.crossover()
        self.mutate()
        return self.evaluate(capacity)

    def statistics(self, capacity: float) -> FitnessRecord:
        return FitnessRecord.from_fitness(self.evaluate(capacity))

    def best(self, capacity: float, fitness: Optional[np.ndarray] = None):
        """
        Best candidate of the current population.

        Args:
            capacity: Capacity used for scoring
            fitness: Precomputed fitness of the current candidates, if available

        Returns:
            Tuple of (copy of best candidate, its fitness); ties go to the
            lowest index
        """
        if fitness is None:
            fitness = self.evaluate(capacity)
        index = int(np.argmax(fitness))
        return self.candidates[index].copy(), float(fitness[index])
