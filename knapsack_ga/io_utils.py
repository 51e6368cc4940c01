"""
I/O utilities for the knapsack GA.

Handles dataset CSV parsing, fitness history export, and best-candidate
export.
"""

import csv
from pathlib import Path
from typing import List, Union

from .data_models import Candidate, EvolutionResult, FitnessRecord, Item
from .fitness import FitnessEvaluator

HISTORY_COLUMNS = ['generation', 'best', 'average', 'worst']


def _parse_number(text: str) -> Union[int, float]:
    """Parse an integer if possible, otherwise a float."""
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


def load_items_csv(csv_path: Union[str, Path]) -> List[Item]:
    """
    Load a knapsack dataset CSV file into Item objects.

    CSV format (header row required, columns read by position):
        id,value,cost,flag
        1,10,5,0
        2,6,4,0
        ...

    Args:
        csv_path: Path to CSV file

    Returns:
        List of items in file order

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValueError: If a row is malformed, has a negative or non-finite
            value/cost, or repeats an item id
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"Dataset file not found: {csv_path}")

    items = []
    seen_ids = set()
    with open(csv_path, 'r', newline='') as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if header is None:
            raise ValueError(f"Dataset file is empty: {csv_path}")

        for line_no, row in enumerate(reader, start=2):
            if not row or all(not cell.strip() for cell in row):
                continue
            if len(row) != 4:
                raise ValueError(
                    f"Invalid row {line_no} in {csv_path}: expected 4 columns (id,value,cost,flag), got {len(row)}"
                )
            try:
                item = Item(
                    id=int(row[0]),
                    value=_parse_number(row[1]),
                    cost=_parse_number(row[2]),
                    flag=int(row[3]),
                )
            except ValueError as e:
                raise ValueError(f"Invalid row {line_no} in {csv_path}: {e}") from e

            if item.id in seen_ids:
                raise ValueError(f"Invalid row {line_no} in {csv_path}: duplicate item id {item.id}")
            seen_ids.add(item.id)
            items.append(item)

    if not items:
        raise ValueError(f"Dataset file has no items: {csv_path}")

    return items


def save_items_csv(
    items: List[Item],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save items to a dataset CSV file readable by load_items_csv.

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['id', 'value', 'cost', 'flag'])
        for item in items:
            writer.writerow([item.id, item.value, item.cost, item.flag])

    return output_path


def save_fitness_history(
    history: List[FitnessRecord],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save per-generation fitness records to CSV.

    CSV format:
        generation,best,average,worst
        0,14.0,9.32,0.0
        ...

    Args:
        history: Records in generation order
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved CSV file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Fitness history already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=HISTORY_COLUMNS)
        writer.writeheader()
        for generation, record in enumerate(history):
            writer.writerow({'generation': generation, **record.to_dict()})

    return output_path


def load_fitness_history(csv_path: Union[str, Path]) -> List[FitnessRecord]:
    """
    Load fitness records written by save_fitness_history.

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValueError: If required columns are missing
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"Fitness history not found: {csv_path}")

    with open(csv_path, 'r', newline='') as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None or not all(col in reader.fieldnames for col in HISTORY_COLUMNS):
            raise ValueError(f"Invalid fitness history format in {csv_path}. Expected columns: {','.join(HISTORY_COLUMNS)}")

        rows = sorted(reader, key=lambda row: int(row['generation']))

    return [
        FitnessRecord(best=float(row['best']), average=float(row['average']), worst=float(row['worst']))
        for row in rows
    ]


def save_best_candidate(
    candidate: Candidate,
    evaluator: FitnessEvaluator,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save the selected items of a candidate to CSV.

    Uses the dataset format (id,value,cost,flag), one row per selected item.

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    selected = [evaluator.items[i] for i in candidate.selected_indices()]
    return save_items_csv(selected, output_path, overwrite=overwrite)


def save_run_summary(
    result: EvolutionResult,
    evaluator: FitnessEvaluator,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save a small key/value summary of a run to CSV.

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Run summary already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    rows = [
        ('seed', result.seed if result.seed is not None else ''),
        ('generations_run', result.generations_run),
        ('cancelled', result.cancelled),
        ('capacity', evaluator.capacity),
        ('penalty', repr(evaluator.penalty)),
    ]
    for label, candidate, fitness in [
        ('final_best', result.final_best, result.final_best_fitness),
        ('best_overall', result.best_overall, result.best_overall_fitness),
    ]:
        if candidate is None:
            continue
        rows.append((f'{label}_fitness', fitness))
        rows.append((f'{label}_bits', candidate.to_bitstring()))
        rows.append((f'{label}_cost', evaluator.selected_cost(candidate)))

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['key', 'value'])
        writer.writerows(rows)

    return output_path
