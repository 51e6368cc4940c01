"""
CLI module for the knapsack GA.

Handles run configuration loading, validation, and dispatching to the
orchestration layer.
"""

from numbers import Real
from typing import Any, Dict, Optional
from pathlib import Path
import yaml

from .errors import ConfigurationError
from .fitness import PENALTY_POLICIES
from .selection import ZERO_FITNESS_POLICIES

DEFAULTS = {
    'population_size': 100,
    'generations': 100,
    'mutation_rate': None,
    'random_seed': None,
    'workers': 1,
    'on_zero_fitness': 'raise',
}

OUTPUT_DEFAULTS = {
    'overwrite': False,
    'plot': True,
    'progress_every': 10,
}


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If config is invalid YAML or empty
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigurationError("Configuration file is empty")

    if not isinstance(config, dict):
        raise ConfigurationError("Configuration file must contain a mapping")

    return config


def apply_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fill optional fields with their defaults.

    Sections that are not mappings are passed through unchanged so that
    validate_run_config reports them.

    Returns:
        New configuration dict; the input is not modified
    """
    merged = {**DEFAULTS, **config}

    output = config.get('output') or {}
    if isinstance(output, dict):
        merged['output'] = {**OUTPUT_DEFAULTS, **output}

    penalty = config.get('penalty') or {'policy': 'proportional'}
    if isinstance(penalty, dict):
        merged['penalty'] = dict(penalty)

    return merged


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_run_config(config: Dict[str, Any]) -> None:
    """
    Validate run configuration structure.

    Expects a config that already went through apply_defaults.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigurationError: If configuration is invalid
    """
    for field in ['dataset', 'capacity']:
        if field not in config:
            raise ConfigurationError(f"Missing required field: '{field}'")

    capacity = config['capacity']
    if not _is_number(capacity) or capacity < 0:
        raise ConfigurationError(
            f"'capacity' must be a non-negative number, got: {capacity}"
        )

    population_size = config['population_size']
    if not _is_int(population_size) or population_size <= 0:
        raise ConfigurationError(
            f"'population_size' must be a positive integer, got: {population_size}"
        )

    generations = config['generations']
    if not _is_int(generations) or generations < 0:
        raise ConfigurationError(
            f"'generations' must be a non-negative integer, got: {generations}"
        )

    mutation_rate = config['mutation_rate']
    if mutation_rate is not None:
        if not _is_number(mutation_rate) or not 0.0 <= mutation_rate <= 1.0:
            raise ConfigurationError(
                f"'mutation_rate' must be a number in [0, 1] or null, got: {mutation_rate}"
            )

    seed = config['random_seed']
    if seed is not None and (not _is_int(seed) or seed < 0):
        raise ConfigurationError(
            f"'random_seed' must be a non-negative integer or null, got: {seed}"
        )

    workers = config['workers']
    if not _is_int(workers) or workers < 1:
        raise ConfigurationError(f"'workers' must be a positive integer, got: {workers}")

    if config['on_zero_fitness'] not in ZERO_FITNESS_POLICIES:
        raise ConfigurationError(
            f"Invalid on_zero_fitness: '{config['on_zero_fitness']}'. "
            f"Must be one of {list(ZERO_FITNESS_POLICIES)}"
        )

    _validate_penalty_config(config['penalty'])
    _validate_output_config(config['output'])


def _validate_penalty_config(penalty: Dict[str, Any]) -> None:
    """
    Validate the penalty section.

    Raises:
        ConfigurationError: If the policy or its parameters are invalid
    """
    if not isinstance(penalty, dict):
        raise ConfigurationError("'penalty' must be a dictionary")

    policy = penalty.get('policy', 'proportional')
    if policy not in PENALTY_POLICIES:
        raise ConfigurationError(
            f"Invalid penalty policy: '{policy}'. Must be one of {sorted(PENALTY_POLICIES)}"
        )

    for param in ['factor', 'multiple']:
        if param in penalty:
            value = penalty[param]
            if not _is_number(value) or value < 0:
                raise ConfigurationError(
                    f"'penalty.{param}' must be a non-negative number, got: {value}"
                )


def _validate_output_config(output: Dict[str, Any]) -> None:
    """
    Validate the output section.

    Raises:
        ConfigurationError: If output settings are invalid
    """
    if not isinstance(output, dict):
        raise ConfigurationError("'output' must be a dictionary")

    if 'root' not in output:
        raise ConfigurationError("Missing required field: 'output.root'")

    progress_every = output['progress_every']
    if not _is_int(progress_every) or progress_every < 1:
        raise ConfigurationError(
            f"'output.progress_every' must be a positive integer, got: {progress_every}"
        )


def run_from_config(config_path: str, overwrite: Optional[bool] = None):
    """
    Load run configuration and execute the run.

    This is the main entry point called by ga_cli.py.

    Args:
        config_path: Path to run configuration YAML file
        overwrite: If given, replaces the config's output.overwrite setting

    Returns:
        EvolutionResult of the run

    Raises:
        FileNotFoundError: If config or dataset file doesn't exist
        ConfigurationError: If config is invalid
        Various exceptions from the solver
    """
    print(f"Loading configuration from: {config_path}")
    config = apply_defaults(load_run_config(config_path))

    print("Validating configuration...")
    validate_run_config(config)

    if overwrite is not None:
        config['output']['overwrite'] = overwrite

    # Relative dataset/output paths are resolved against the config file
    base_dir = Path(config_path).resolve().parent
    for key, section in [('dataset', config), ('root', config['output'])]:
        path = Path(section[key])
        if not path.is_absolute():
            section[key] = str(base_dir / path)

    from .orchestration import run_knapsack
    result = run_knapsack(config)

    print("\n✅ Run completed successfully!")
    return result
