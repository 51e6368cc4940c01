"""
Generation loop for the knapsack GA.

Runs a population for a fixed number of generations and collects the
best/average/worst fitness of every generation.
"""

from typing import Callable, Optional

from .data_models import EvolutionResult, FitnessRecord
from .errors import ConfigurationError
from .population import Population

GenerationSink = Callable[[int, FitnessRecord], None]
StopCheck = Callable[[int], bool]


class EvolutionDriver:
    """
    Drives a Population through its generations.

    Args:
        on_generation: Optional sink called with (generation_index, record)
            after each generation, e.g. for progress output or live charts
        should_stop: Optional check called with the index of the next
            generation before it starts; returning True ends the run early
    """

    def __init__(
        self,
        on_generation: Optional[GenerationSink] = None,
        should_stop: Optional[StopCheck] = None
    ):
        self.on_generation = on_generation
        self.should_stop = should_stop

    def run(
        self,
        population: Population,
        capacity: float,
        generations: int,
        seed: Optional[int] = None
    ) -> EvolutionResult:
        """
        Evolve the population for exactly `generations` steps.

        Args:
            population: Population to evolve; its candidates are replaced
            capacity: Capacity the selected cost is compared against
            generations: Number of generation steps (0 gives an empty history)
            seed: Seed the population's RNG was created from, recorded in the
                result

        Returns:
            EvolutionResult with one FitnessRecord per generation and the best
            candidates found

        Raises:
            ConfigurationError: If generations or capacity is negative
            DegenerateFitnessError: Propagated from selection
        """
        if generations < 0:
            raise ConfigurationError(f"Generations must be non-negative, got: {generations}")
        if capacity < 0:
            raise ConfigurationError(f"Capacity must be non-negative, got: {capacity}")

        result = EvolutionResult(seed=seed)

        try:
            self._evolve(population, capacity, generations, result)
        finally:
            population.close()

        return result

    def _evolve(
        self,
        population: Population,
        capacity: float,
        generations: int,
        result: EvolutionResult
    ) -> None:
        for generation in range(generations):
            if self.should_stop is not None and self.should_stop(generation):
                result.cancelled = True
                break

            fitness = population.step(capacity)
            record = FitnessRecord.from_fitness(fitness)
            result.history.append(record)
            result.generations_run += 1

            candidate, score = population.best(capacity, fitness)
            if result.best_overall is None or score > result.best_overall_fitness:
                result.best_overall = candidate
                result.best_overall_fitness = score

            if self.on_generation is not None:
                self.on_generation(generation, record)

        result.final_best, result.final_best_fitness = population.best(capacity)
        if result.best_overall is None or result.final_best_fitness > result.best_overall_fitness:
            result.best_overall = result.final_best.copy()
            result.best_overall_fitness = result.final_best_fitness


def run_evolution(
    population: Population,
    capacity: float,
    generations: int,
    on_generation: Optional[GenerationSink] = None,
    seed: Optional[int] = None
) -> EvolutionResult:
    """Run a population with a default EvolutionDriver."""
    driver = EvolutionDriver(on_generation=on_generation)
    return driver.run(population, capacity, generations, seed=seed)
