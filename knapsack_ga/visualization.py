"""
Fitness chart for knapsack GA runs.

Draws best, average, and worst fitness per generation to an image file.
"""

from pathlib import Path
from typing import List, Sequence, Tuple, Union

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .data_models import FitnessRecord


def plot_fitness_history(
    history: Sequence[FitnessRecord],
    output_path: Union[str, Path],
    title: str = "Fitness Evolution",
    figsize: Tuple[float, float] = (6.4, 4.8)
) -> Path:
    """
    Save a line chart of the fitness history.

    Args:
        history: One record per generation
        output_path: Path of the PNG file to write
        title: Chart title
        figsize: Figure size (width, height) in inches

    Returns:
        Path to the saved image

    Raises:
        ValueError: If history is empty
    """
    if not history:
        raise ValueError("Cannot plot an empty fitness history")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    generations: List[int] = list(range(len(history)))
    best = [record.best for record in history]
    average = [record.average for record in history]
    worst = [record.worst for record in history]

    fig, ax = plt.subplots(figsize=figsize)
    try:
        ax.plot(generations, best, color='red', label='Best Fitness')
        ax.plot(generations, average, color='green', label='Average Fitness')
        ax.plot(generations, worst, color='blue', label='Worst Fitness')

        ax.set_title(title)
        ax.set_xlabel('Generation')
        ax.set_ylabel('Fitness')
        ax.set_xlim(0, max(len(history) - 1, 1))
        ax.grid(True, alpha=0.3)
        ax.legend()

        fig.tight_layout()
        fig.savefig(output_path, dpi=100)
    finally:
        plt.close(fig)

    return output_path
