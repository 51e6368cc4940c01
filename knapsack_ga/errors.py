"""
Exception types for the knapsack GA.

All errors raised by the solver derive from KnapsackGAError so callers can
catch them in one place.
"""


class KnapsackGAError(Exception):
    """Base class for solver errors."""
    pass


class ConfigurationError(KnapsackGAError):
    """Raised when run parameters or the run configuration are invalid."""
    pass


class DegenerateFitnessError(KnapsackGAError):
    """Raised when roulette selection sees a total fitness of zero."""

    def __init__(self, message: str = "Total population fitness is zero; roulette selection is undefined"):
        super().__init__(message)


class DatasetMismatchError(KnapsackGAError):
    """Raised when candidate bit length does not match the number of items."""

    def __init__(self, bit_length: int, num_items: int):
        self.bit_length = bit_length
        self.num_items = num_items
        super().__init__(
            f"Candidate bit length ({bit_length}) does not match dataset size ({num_items})"
        )
