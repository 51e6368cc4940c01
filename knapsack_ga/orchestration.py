"""
Orchestration module for the knapsack GA.

Wires dataset loading, the evolution run, and result export together.
"""

from typing import Dict
from pathlib import Path
import numpy as np

from .data_models import FitnessRecord
from .evolution import EvolutionDriver
from .fitness import create_penalty_policy
from .io_utils import (
    load_items_csv,
    save_fitness_history,
    save_best_candidate,
    save_run_summary
)
from .population import Population


def progress_printer(total_generations: int, every: int):
    """
    Build a generation sink that prints progress every `every` generations.

    The last generation is always reported.
    """
    def report(generation: int, record: FitnessRecord) -> None:
        done = generation + 1
        if done % every == 0 or done == total_generations:
            print(
                f"  Generation {done}/{total_generations}: "
                f"best={record.best:.2f} avg={record.average:.2f} worst={record.worst:.2f}"
            )
    return report


def run_knapsack(run_config: Dict):
    """
    Evolve a knapsack selection for one dataset and capacity.

    Args:
        run_config: Validated run configuration with defaults applied

    Algorithm:
        1. Load dataset from run_config['dataset']
        2. Setup RNG (run_config['random_seed'] or a freshly drawn seed)
        3. Build the Population and the penalty policy
        4. Check output directory: run_config['output']['root']
        5. Run the EvolutionDriver for run_config['generations'] generations
        6. Create the output directory, then save fitness history, best
           candidate, run summary, and chart
        7. Print summary report

    Returns:
        EvolutionResult of the run
    """
    print("=" * 70)
    print("KNAPSACK GA")
    print("=" * 70)

    # Load dataset
    dataset_path = run_config['dataset']
    print(f"Loading dataset from: {dataset_path}")
    items = load_items_csv(dataset_path)
    capacity = run_config['capacity']
    print(f"Items: {len(items)}")
    print(f"Capacity: {capacity}")

    # Setup RNG
    seed = run_config.get('random_seed')
    if seed is None:
        seed = int(np.random.SeedSequence().generate_state(1)[0] % 2**31)
    print(f"Random seed: {seed}")
    rng = np.random.default_rng(seed)

    penalty = create_penalty_policy(run_config.get('penalty'))
    print(f"Penalty policy: {penalty!r}")

    population = Population(
        size=run_config['population_size'],
        bit_length=len(items),
        items=items,
        rng=rng,
        mutation_rate=run_config.get('mutation_rate'),
        penalty=penalty,
        on_zero_fitness=run_config.get('on_zero_fitness', 'raise'),
        workers=run_config.get('workers', 1),
    )
    print(f"Population size: {population.size}")
    print(f"Mutation rate: {population.mutation_rate:.6f}")

    # Output directory is only created once the run has finished
    output_config = run_config['output']
    output_root = Path(output_config['root'])
    overwrite = output_config.get('overwrite', False)

    if output_root.exists() and not overwrite:
        raise FileExistsError(
            f"Output directory already exists: {output_root}\n"
            f"Set 'output.overwrite: true' in config to overwrite"
        )

    print(f"Output directory: {output_root}\n")

    # Evolve
    generations = run_config['generations']
    print(f"Running {generations} generations...")
    driver = EvolutionDriver(
        on_generation=progress_printer(generations, output_config.get('progress_every', 10))
    )
    result = driver.run(population, capacity, generations, seed=seed)

    # Save outputs
    output_root.mkdir(parents=True, exist_ok=overwrite)
    evaluator = population.evaluator(capacity)
    history_path = save_fitness_history(
        result.history, output_root / 'fitness_history.csv', overwrite=overwrite
    )
    best_path = save_best_candidate(
        result.best_overall, evaluator, output_root / 'best_candidate.csv', overwrite=overwrite
    )
    summary_path = save_run_summary(
        result, evaluator, output_root / 'run_summary.csv', overwrite=overwrite
    )

    plot_path = None
    if output_config.get('plot', True) and result.history:
        from .visualization import plot_fitness_history
        plot_path = plot_fitness_history(result.history, output_root / 'fitness_evolution.png')

    # Print summary
    best = evaluator.describe(result.best_overall)
    print()
    print("=" * 70)
    print("SUMMARY")
    print("=" * 70)
    print(f"Generations run: {result.generations_run}")
    print(f"Best fitness achieved: {result.best_overall_fitness}")
    print(f"Final generation best: {result.final_best_fitness}")
    print(f"Selected items: {len(best['selected_ids'])} "
          f"(value={best['raw_value']}, cost={best['selected_cost']}, feasible={best['feasible']})")
    print(f"Fitness history: {history_path}")
    print(f"Best candidate: {best_path}")
    print(f"Run summary: {summary_path}")
    if plot_path is not None:
        print(f"Fitness chart: {plot_path}")

    return result
