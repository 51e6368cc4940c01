"""
Tests for the run configuration validation tool.
"""

import unittest
import tempfile
import shutil
from pathlib import Path

import yaml

from validate_config import ConfigValidator


class TestConfigValidator(unittest.TestCase):
    """Test detailed run configuration feedback."""

    def setUp(self):
        """Create temporary directory with a dataset."""
        self.test_dir = Path(tempfile.mkdtemp())
        (self.test_dir / "items.csv").write_text(
            "id,value,cost,flag\n1,10,5,0\n2,6,4,0\n3,8,3,0\n4,4,2,0\n"
        )
        self.validator = ConfigValidator()

    def tearDown(self):
        """Clean up temporary directory."""
        shutil.rmtree(self.test_dir)

    def write_config(self, config):
        path = self.test_dir / "run.yaml"
        with open(path, 'w') as f:
            yaml.safe_dump(config, f)
        return str(path)

    def base_config(self, **overrides):
        config = {
            'dataset': 'items.csv',
            'capacity': 7,
            'population_size': 50,
            'generations': 30,
            'random_seed': 1,
            'output': {'root': 'out'},
        }
        config.update(overrides)
        return config

    def test_valid_config(self):
        """Test a sound configuration passes without warnings."""
        result = self.validator.validate_comprehensive(self.write_config(self.base_config()))

        self.assertTrue(result['valid'])
        self.assertEqual(result['errors'], [])
        self.assertEqual(result['warnings'], [])
        self.assertEqual(result['summary']['dataset']['items'], 4)
        self.assertEqual(result['summary']['run']['mutation_rate'], "1/4")

    def test_missing_file(self):
        """Test unreadable configuration is reported as invalid."""
        result = self.validator.validate_comprehensive(str(self.test_dir / "missing.yaml"))

        self.assertFalse(result['valid'])
        self.assertEqual(len(result['errors']), 1)

    def test_invalid_field_and_missing_dataset(self):
        """Test validation errors are collected."""
        config = self.base_config(population_size=0, dataset='nowhere.csv')
        result = self.validator.validate_comprehensive(self.write_config(config))

        self.assertFalse(result['valid'])
        self.assertEqual(len(result['errors']), 2)

    def test_scalar_penalty_section(self):
        """Test a penalty given as a plain string is reported, not raised."""
        result = self.validator.validate_comprehensive(
            self.write_config(self.base_config(penalty='proportional'))
        )

        self.assertFalse(result['valid'])
        self.assertIn("'penalty' must be a dictionary", result['errors'][0])
        self.assertEqual(result['summary']['penalty'], {'policy': 'proportional'})

    def test_warnings(self):
        """Test capacity and penalty warnings."""
        config = self.base_config(capacity=100, penalty={'policy': 'proportional', 'factor': 1.0})
        result = self.validator.validate_comprehensive(self.write_config(config))

        self.assertTrue(result['valid'])
        self.assertTrue(any('total cost' in warning for warning in result['warnings']))
        self.assertTrue(any('Penalty factor' in warning for warning in result['warnings']))

    def test_recommendations(self):
        """Test odd population and missing seed recommendations."""
        config = self.base_config(population_size=51, random_seed=None)
        result = self.validator.validate_comprehensive(self.write_config(config))

        self.assertTrue(any('even population' in rec for rec in result['recommendations']))
        self.assertTrue(any('random_seed' in rec for rec in result['recommendations']))


if __name__ == '__main__':
    unittest.main()
