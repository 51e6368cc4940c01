"""
Tests for the population generation step and the evolution driver.
"""

import unittest
import numpy as np

from knapsack_ga.data_models import Item, Candidate, FitnessRecord
from knapsack_ga.errors import ConfigurationError, DegenerateFitnessError, DatasetMismatchError
from knapsack_ga.evolution import EvolutionDriver, run_evolution
from knapsack_ga.population import Population


def sample_items():
    """Four items as (value, cost): (10,5), (6,4), (8,3), (4,2)."""
    return [
        Item(id=1, value=10, cost=5),
        Item(id=2, value=6, cost=4),
        Item(id=3, value=8, cost=3),
        Item(id=4, value=4, cost=2),
    ]


def make_population(items=None, size=50, seed=42, **kwargs):
    """Build a seeded population over the given items."""
    items = items if items is not None else sample_items()
    return Population(
        size=size,
        bit_length=len(items),
        items=items,
        rng=np.random.default_rng(seed),
        **kwargs
    )


class TestPopulation(unittest.TestCase):
    """Test population construction and generation step."""

    def test_invalid_parameters(self):
        """Test construction fails fast on invalid parameters."""
        items = sample_items()
        rng = np.random.default_rng(0)

        with self.assertRaises(ConfigurationError):
            Population(size=0, bit_length=4, items=items, rng=rng)
        with self.assertRaises(ConfigurationError):
            Population(size=10, bit_length=0, items=items, rng=rng)
        with self.assertRaises(ConfigurationError):
            Population(size=10, bit_length=4, items=items, rng=rng, mutation_rate=1.5)
        with self.assertRaises(ConfigurationError):
            Population(size=10, bit_length=4, items=items, rng=rng, mutation_rate=-0.1)
        with self.assertRaises(ConfigurationError):
            Population(size=10, bit_length=4, items=items, rng=rng, on_zero_fitness="skip")
        with self.assertRaises(ConfigurationError):
            Population(size=10, bit_length=4, items=items, rng=rng, workers=0)

    def test_dataset_mismatch(self):
        """Test bit length must match dataset size."""
        with self.assertRaises(DatasetMismatchError):
            Population(size=10, bit_length=5, items=sample_items(), rng=np.random.default_rng(0))

    def test_supplied_candidates_checked(self):
        """Test explicit initial candidates are validated."""
        items = sample_items()
        rng = np.random.default_rng(0)

        with self.assertRaises(DatasetMismatchError):
            Population(
                size=2, bit_length=4, items=items, rng=rng,
                candidates=[Candidate.from_bitstring("1010"), Candidate.from_bitstring("101")]
            )
        with self.assertRaises(ConfigurationError):
            Population(
                size=3, bit_length=4, items=items, rng=rng,
                candidates=[Candidate.from_bitstring("1010")]
            )

    def test_default_mutation_rate(self):
        """Test mutation rate defaults to 1 / bit_length."""
        population = make_population()
        self.assertEqual(population.mutation_rate, 0.25)

    def test_initial_population_shape(self):
        """Test random initialization creates size candidates of bit_length."""
        population = make_population(size=30)

        self.assertEqual(len(population), 30)
        for candidate in population.candidates:
            self.assertEqual(len(candidate), 4)

    def test_step_preserves_size(self):
        """Test each generation keeps size and bit length."""
        population = make_population(size=21)

        for _ in range(5):
            fitness = population.step(7)
            self.assertEqual(len(fitness), 21)
            self.assertEqual(len(population), 21)
            for candidate in population.candidates:
                self.assertEqual(len(candidate), 4)

    def test_step_returns_post_variation_fitness(self):
        """Test step fitness matches a fresh evaluation of the new candidates."""
        population = make_population()
        fitness = population.step(7)
        np.testing.assert_array_equal(fitness, population.evaluate(7))

    def test_single_evaluator_per_capacity(self):
        """Test the evaluator is reused for a capacity and replaced when it changes."""
        population = make_population()

        first = population.evaluator(7)
        self.assertIs(population.evaluator(7), first)

        other = population.evaluator(9)
        self.assertIsNot(other, first)
        self.assertEqual(other.capacity, 9)
        self.assertIs(population.evaluator(9), other)

    def test_thread_pool_reused_across_steps(self):
        """Test parallel evaluation keeps one pool until closed."""
        population = make_population(workers=3)
        population.step(7)
        pool = population.executor()

        population.step(7)
        self.assertIs(population.executor(), pool)

        population.close()
        self.assertIsNone(population._executor)
        self.assertIsNone(make_population().executor())

    def test_best(self):
        """Test best candidate lookup."""
        population = Population(
            size=3, bit_length=4, items=sample_items(), rng=np.random.default_rng(0),
            candidates=[Candidate.from_bitstring(bits) for bits in ["1000", "1001", "0010"]]
        )
        candidate, fitness = population.best(7)

        self.assertEqual(candidate.to_bitstring(), "1001")
        self.assertEqual(fitness, 14)

        # Returned candidate is a copy
        candidate.bits[:] = False
        self.assertEqual(population.candidates[1].to_bitstring(), "1001")


class TestEvolutionDriver(unittest.TestCase):
    """Test the generation loop and fitness history."""

    def test_end_to_end_converges(self):
        """Test the sample problem reaches the optimum of 14."""
        population = make_population(size=50, seed=42)
        result = run_evolution(population, capacity=7, generations=30, seed=42)

        self.assertEqual(len(result.history), 30)
        self.assertEqual(max(result.best_history), 14)
        self.assertEqual(result.best_overall_fitness, 14)
        self.assertIn(result.best_overall.to_bitstring(), ["1001", "0110"])

        # 14 is optimal, so no generation can score above it
        for record in result.history:
            self.assertLessEqual(record.best, 14)
            self.assertLessEqual(record.worst, record.average)
            self.assertLessEqual(record.average, record.best)

    def test_determinism(self):
        """Test identical seeds give identical histories."""
        first = run_evolution(make_population(seed=123), capacity=7, generations=25)
        second = run_evolution(make_population(seed=123), capacity=7, generations=25)

        self.assertEqual(first.history, second.history)
        self.assertEqual(first.final_best, second.final_best)
        self.assertEqual(repr(first.best_history), repr(second.best_history))

    def test_parallel_evaluation_is_deterministic(self):
        """Test threaded evaluation does not change the run."""
        serial = run_evolution(make_population(seed=9), capacity=7, generations=15)
        parallel = run_evolution(make_population(seed=9, workers=4), capacity=7, generations=15)

        self.assertEqual(serial.history, parallel.history)

    def test_run_closes_thread_pool(self):
        """Test the evaluation pool is shut down when a run ends, including on error."""
        population = make_population(seed=9, workers=2)
        run_evolution(population, capacity=7, generations=3)
        self.assertIsNone(population._executor)

        items = [Item(id=i, value=0, cost=1) for i in range(4)]
        failing = make_population(items=items, size=8, workers=2)
        with self.assertRaises(DegenerateFitnessError):
            run_evolution(failing, capacity=2, generations=3)
        self.assertIsNone(failing._executor)

    def test_zero_generations(self):
        """Test zero generations yields an empty history, not an error."""
        population = make_population()
        result = run_evolution(population, capacity=7, generations=0)

        self.assertEqual(result.history, [])
        self.assertEqual(result.generations_run, 0)
        self.assertIsNotNone(result.final_best)
        self.assertEqual(result.as_columns(), ([], [], []))

    def test_negative_generations(self):
        """Test negative generation count is rejected."""
        with self.assertRaises(ConfigurationError):
            run_evolution(make_population(), capacity=7, generations=-1)

    def test_negative_capacity(self):
        """Test negative capacity is rejected."""
        with self.assertRaises(ConfigurationError):
            run_evolution(make_population(), capacity=-1, generations=3)

    def test_zero_value_dataset_raises(self):
        """Test all-zero values fail on the first selection."""
        items = [Item(id=i, value=0, cost=1) for i in range(6)]
        population = make_population(items=items, size=10)

        with self.assertRaises(DegenerateFitnessError):
            run_evolution(population, capacity=3, generations=5)

    def test_zero_value_dataset_uniform_policy(self):
        """Test uniform fallback lets a zero-value dataset run."""
        items = [Item(id=i, value=0, cost=1) for i in range(6)]
        population = make_population(items=items, size=10, on_zero_fitness="uniform")

        result = run_evolution(population, capacity=3, generations=5)

        self.assertEqual(len(result.history), 5)
        for record in result.history:
            self.assertEqual(record, FitnessRecord(best=0.0, average=0.0, worst=0.0))

    def test_generation_sink(self):
        """Test the per-generation sink receives every record in order."""
        received = []
        driver = EvolutionDriver(on_generation=lambda gen, record: received.append((gen, record)))

        result = driver.run(make_population(), capacity=7, generations=8)

        self.assertEqual([gen for gen, _ in received], list(range(8)))
        self.assertEqual([record for _, record in received], result.history)

    def test_stop_at_generation_boundary(self):
        """Test cancellation ends the run between generations."""
        driver = EvolutionDriver(should_stop=lambda gen: gen >= 3)
        result = driver.run(make_population(), capacity=7, generations=10)

        self.assertTrue(result.cancelled)
        self.assertEqual(result.generations_run, 3)
        self.assertEqual(len(result.history), 3)

    def test_history_columns(self):
        """Test history is available as parallel sequences."""
        result = run_evolution(make_population(), capacity=7, generations=6)
        best, average, worst = result.as_columns()

        self.assertEqual(len(best), 6)
        self.assertEqual(len(average), 6)
        self.assertEqual(len(worst), 6)
        self.assertGreaterEqual(result.best_overall_fitness, max(best))


if __name__ == '__main__':
    unittest.main()
