#!/usr/bin/env python3
"""
Knapsack GA command-line entry point.

Runs one evolution from a YAML run configuration and writes the fitness
history, best selection, run summary, and chart to the configured output
directory.
"""

import sys
import argparse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Evolve a 0/1 knapsack selection with a genetic algorithm",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  knapsack-ga examples/sample_run.yaml
  knapsack-ga --config examples/sample_run.yaml
  knapsack-ga examples/sample_run.yaml --overwrite
        """
    )

    parser.add_argument('config_file', nargs='?', help='Run configuration file')
    parser.add_argument('--config', '-c', dest='config_option', help='Run configuration file')

    parser.add_argument(
        '--overwrite',
        action='store_true',
        help="Replace an existing output directory (same as 'output.overwrite: true')"
    )

    return parser


def main(argv=None):
    """Parse arguments and run the configured evolution."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config_path = args.config_option or args.config_file
    if config_path is None:
        parser.error("a run configuration file is required")

    try:
        from knapsack_ga.cli import run_from_config
        run_from_config(config_path, overwrite=args.overwrite or None)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
