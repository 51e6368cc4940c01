"""
Data models for the knapsack GA.

Core data structures representing items, candidates, and per-generation
fitness records.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np


@dataclass(frozen=True)
class Item:
    """
    A selectable item loaded from the dataset.

    Attributes:
        id: Item identifier from the dataset
        value: Non-negative value gained when the item is selected
        cost: Non-negative cost counted against the capacity
        flag: Extra integer column carried through from the dataset
    """
    id: int
    value: Union[int, float]
    cost: Union[int, float]
    flag: int = 0

    def __post_init__(self):
        """Validate item fields."""
        if not (math.isfinite(self.value) and math.isfinite(self.cost)):
            raise ValueError(
                f"Item {self.id} has a non-finite value or cost: value={self.value}, cost={self.cost}"
            )
        if self.value < 0:
            raise ValueError(f"Item {self.id} has negative value: {self.value}")
        if self.cost < 0:
            raise ValueError(f"Item {self.id} has negative cost: {self.cost}")


@dataclass
class Candidate:
    """
    One bit-vector solution in the population.

    Bit i set means item i is selected.

    Attributes:
        bits: 1-D boolean array, one entry per item
    """
    bits: np.ndarray

    def __post_init__(self):
        """Ensure bits is a 1-D boolean array."""
        self.bits = np.asarray(self.bits, dtype=bool)
        if self.bits.ndim != 1:
            raise ValueError(f"Candidate bits must be 1-D, got shape {self.bits.shape}")

    def __len__(self) -> int:
        return int(self.bits.shape[0])

    def copy(self) -> "Candidate":
        """
        Create an independent copy of this candidate.

        Returns:
            New Candidate with copied bits
        """
        return Candidate(bits=self.bits.copy())

    def selected_indices(self) -> list[int]:
        """Indices of the selected items."""
        return [int(i) for i in np.flatnonzero(self.bits)]

    def to_bitstring(self) -> str:
        return "".join("1" if bit else "0" for bit in self.bits)

    @classmethod
    def from_bitstring(cls, bitstring: str) -> "Candidate":
        """
        Build a candidate from a string such as "1100".

        Args:
            bitstring: String made only of '0' and '1' characters

        Returns:
            Candidate with the corresponding bits

        Raises:
            ValueError: If the string contains other characters
        """
        if any(ch not in "01" for ch in bitstring):
            raise ValueError(f"Invalid bitstring: {bitstring!r}")
        return cls(bits=np.array([ch == "1" for ch in bitstring], dtype=bool))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Candidate):
            return NotImplemented
        return np.array_equal(self.bits, other.bits)


@dataclass(frozen=True)
class FitnessRecord:
    """
    Fitness summary of one generation.

    Attributes:
        best: Highest fitness in the generation
        average: Mean fitness across the generation
        worst: Lowest fitness in the generation
    """
    best: float
    average: float
    worst: float

    @classmethod
    def from_fitness(cls, fitness: np.ndarray) -> "FitnessRecord":
        """
        Summarize an array of fitness values.

        Raises:
            ValueError: If fitness is empty
        """
        fitness = np.asarray(fitness, dtype=float)
        if fitness.size == 0:
            raise ValueError("Cannot summarize an empty fitness array")
        return cls(
            best=float(fitness.max()),
            average=float(fitness.mean()),
            worst=float(fitness.min()),
        )

    def to_dict(self) -> dict[str, float]:
        return {"best": self.best, "average": self.average, "worst": self.worst}


@dataclass
class EvolutionResult:
    """
    Outcome of a complete evolution run.

    Attributes:
        history: One FitnessRecord per generation, in generation order
        final_best: Best candidate of the final population
        final_best_fitness: Fitness of final_best
        best_overall: Best candidate observed in any recorded generation
        best_overall_fitness: Fitness of best_overall
        generations_run: Number of generation steps completed
        seed: Random seed of the run, if known
        cancelled: True if the caller stopped the run at a generation boundary
    """
    history: list[FitnessRecord] = field(default_factory=list)
    final_best: Optional[Candidate] = None
    final_best_fitness: float = 0.0
    best_overall: Optional[Candidate] = None
    best_overall_fitness: float = 0.0
    generations_run: int = 0
    seed: Optional[int] = None
    cancelled: bool = False

    @property
    def best_history(self) -> list[float]:
        return [record.best for record in self.history]

    @property
    def average_history(self) -> list[float]:
        return [record.average for record in self.history]

    @property
    def worst_history(self) -> list[float]:
        return [record.worst for record in self.history]

    def as_columns(self) -> tuple[list[float], list[float], list[float]]:
        """
        History as three parallel sequences, suitable for charting.

        Returns:
            Tuple of (best, average, worst) lists indexed by generation
        """
        return self.best_history, self.average_history, self.worst_history
