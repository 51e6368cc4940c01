#!/usr/bin/env python3
"""
Run Configuration Validation Tool

Validates YAML run configuration files for the knapsack GA and provides
detailed feedback about parameter values and potential issues.
"""

import sys
import argparse
from pathlib import Path
from typing import Dict, List, Any

# Add current directory to path for imports
sys.path.append(str(Path(__file__).parent))

from knapsack_ga.cli import load_run_config, apply_defaults, validate_run_config
from knapsack_ga.errors import ConfigurationError
from knapsack_ga.io_utils import load_items_csv
from knapsack_ga.data_models import Item


class ConfigValidator:
    """Run configuration validator with detailed feedback"""

    def __init__(self):
        self.warnings = []
        self.errors = []
        self.recommendations = []

    def validate_comprehensive(self, config_path: str) -> Dict[str, Any]:
        """Perform comprehensive validation with detailed feedback"""
        try:
            config = apply_defaults(load_run_config(config_path))
        except Exception as e:
            return {
                'valid': False,
                'errors': [f"Failed to load configuration: {e}"],
                'warnings': [],
                'recommendations': [],
                'summary': {}
            }

        self.warnings = []
        self.errors = []
        self.recommendations = []

        # Basic validation
        try:
            validate_run_config(config)
        except ConfigurationError as e:
            self.errors.append(str(e))

        items = self._load_dataset(config, Path(config_path).resolve().parent)

        # Advanced validation
        if items and not self.errors:
            self._validate_capacity(config['capacity'], items)
            self._validate_penalty(config['penalty'], items)
            self._validate_operators(config, len(items))
        self._validate_reproducibility(config)

        summary = self._generate_summary(config, items)

        return {
            'valid': len(self.errors) == 0,
            'errors': self.errors,
            'warnings': self.warnings,
            'recommendations': self.recommendations,
            'summary': summary
        }

    def _load_dataset(self, config: Dict[str, Any], base_dir: Path) -> List[Item]:
        """Load the dataset referenced by the config, recording any failure"""
        if 'dataset' not in config:
            return []

        dataset_path = Path(config['dataset'])
        if not dataset_path.is_absolute():
            dataset_path = base_dir / dataset_path

        try:
            return load_items_csv(dataset_path)
        except (FileNotFoundError, ValueError) as e:
            self.errors.append(f"Dataset could not be loaded: {e}")
            return []

    def _validate_capacity(self, capacity: float, items: List[Item]):
        """Validate capacity against the dataset costs"""
        total_cost = sum(item.cost for item in items)
        min_cost = min(item.cost for item in items)

        if capacity >= total_cost:
            self.warnings.append(
                f"Capacity ({capacity}) covers the total cost of all items ({total_cost}); selecting everything is optimal"
            )
        elif capacity < min_cost:
            self.warnings.append(
                f"Capacity ({capacity}) is below the cheapest item cost ({min_cost}); only the empty selection is feasible"
            )

    def _validate_penalty(self, penalty: Dict[str, Any], items: List[Item]):
        """Check the penalty is strong enough to keep overweight selections behind"""
        if penalty.get('policy', 'proportional') != 'proportional':
            return

        factor = penalty.get('factor', 10.0)
        ratios = [item.value / item.cost for item in items if item.cost > 0]
        if ratios and factor < max(ratios):
            self.warnings.append(
                f"Penalty factor ({factor}) is below the best value/cost ratio ({max(ratios):.3f}); "
                f"overweight selections may outscore feasible ones"
            )

    def _validate_operators(self, config: Dict[str, Any], num_items: int):
        """Validate population and mutation settings"""
        population_size = config['population_size']
        mutation_rate = config['mutation_rate']
        generations = config['generations']

        if population_size < 10:
            self.warnings.append(f"Small population ({population_size}) loses diversity quickly")

        if population_size % 2 == 1:
            self.recommendations.append(
                "Use an even population size so every candidate takes part in crossover"
            )

        if mutation_rate is not None and mutation_rate > 0.5:
            self.warnings.append(
                f"High mutation rate ({mutation_rate}) makes the search close to random"
            )
        elif mutation_rate == 0:
            self.warnings.append("Mutation rate is 0; the search can only recombine initial bits")

        if generations == 0:
            self.warnings.append("Generations is 0; no evolution will run")

        if population_size * generations > 10_000_000:
            self.warnings.append(
                f"Large run ({population_size} x {generations} evaluations) may be slow; consider 'workers'"
            )

        if num_items > 1000 and config['workers'] == 1:
            self.recommendations.append(
                f"Dataset has {num_items} items; 'workers' > 1 can speed up fitness evaluation"
            )

    def _validate_reproducibility(self, config: Dict[str, Any]):
        if config.get('random_seed') is None:
            self.recommendations.append("Set 'random_seed' to make runs reproducible")

    def _generate_summary(self, config: Dict[str, Any], items: List[Item]) -> Dict[str, Any]:
        """Generate configuration summary"""
        mutation_rate = config.get('mutation_rate')
        if mutation_rate is None:
            mutation_rate = f"1/{len(items)}" if items else "1/num_items"

        penalty = config.get('penalty')
        if not isinstance(penalty, dict):
            penalty = {'policy': penalty}

        summary = {
            'run': {
                'population_size': config.get('population_size'),
                'generations': config.get('generations'),
                'mutation_rate': mutation_rate,
                'random_seed': config.get('random_seed'),
            },
            'penalty': dict(penalty),
        }

        if items:
            summary['dataset'] = {
                'items': len(items),
                'total_value': sum(item.value for item in items),
                'total_cost': sum(item.cost for item in items),
                'capacity': config.get('capacity'),
            }

        return summary


def main():
    """Main function for configuration validation"""
    parser = argparse.ArgumentParser(
        description="Validate knapsack GA run configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python validate_config.py examples/sample_run.yaml
  python validate_config.py my_run.yaml --verbose
        """
    )

    parser.add_argument('config_file', help='Run configuration file to validate')

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show detailed validation information'
    )

    parser.add_argument(
        '--warnings-only', '-w',
        action='store_true',
        help='Show only warnings and errors (no recommendations)'
    )

    args = parser.parse_args()

    validator = ConfigValidator()
    result = validator.validate_comprehensive(args.config_file)

    # Print results
    print("=" * 60)
    print("RUN CONFIGURATION VALIDATION REPORT")
    print("=" * 60)
    print(f"File: {args.config_file}")
    print(f"Status: {'VALID' if result['valid'] else 'INVALID'}")
    print()

    if result['errors']:
        print("ERRORS:")
        for error in result['errors']:
            print(f"  - {error}")
        print()

    if result['warnings']:
        print("WARNINGS:")
        for warning in result['warnings']:
            print(f"  - {warning}")
        print()

    if result['recommendations'] and not args.warnings_only:
        print("RECOMMENDATIONS:")
        for rec in result['recommendations']:
            print(f"  - {rec}")
        print()

    if result['summary'] and args.verbose:
        print("SUMMARY:")
        for section, data in result['summary'].items():
            print(f"  {section.title()}:")
            for key, value in data.items():
                print(f"    {key}: {value}")
        print()

    # Quick stats
    if not args.verbose and 'dataset' in result['summary']:
        dataset_info = result['summary']['dataset']
        print(f"Items: {dataset_info['items']}, Total cost: {dataset_info['total_cost']}, Capacity: {dataset_info['capacity']}")

    print("=" * 60)

    sys.exit(0 if result['valid'] else 1)


if __name__ == "__main__":
    main()
