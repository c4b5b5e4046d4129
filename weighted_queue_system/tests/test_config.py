import unittest
from unittest.mock import patch
import tempfile
import shutil
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import yaml

from utils.config import ConfigManager, ConfigurationError, build_extractor
from weighted_queue import PriorityQueue


class Job:
    def __init__(self, kind):
        self.kind = kind


class TestConfigManager(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.temp_dir, 'config.yaml')

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def _write_config(self, data):
        with open(self.config_path, 'w') as file:
            yaml.safe_dump(data, file)

    def test_defaults_when_file_missing(self):
        """Test that defaults are used when no configuration file exists."""
        manager = ConfigManager(os.path.join(self.temp_dir, 'missing.yaml'))
        self.assertEqual(manager.get('benchmark.elements'), 3000)
        self.assertEqual(manager.get('logging.level'), 'INFO')
        self.assertEqual(len(manager.build_queue_config()), 0)

    def test_load_features(self):
        """Test that features from the file build a working queue config."""
        self._write_config({
            'queue': {
                'features': [
                    {'name': 'feature1', 'key': 'identity', 'weights': {'a': 1, 'b': 2}},
                    {'name': 'feature2', 'weights': {'a': 2, 'b': 1}}
                ]
            },
            'benchmark': {'rounds': 3}
        })
        manager = ConfigManager(self.config_path)

        # Merged with defaults
        self.assertEqual(manager.get('benchmark.rounds'), 3)
        self.assertEqual(manager.get('benchmark.elements'), 3000)

        queue_config = manager.build_queue_config()
        self.assertEqual(queue_config.feature_names(), ['feature1', 'feature2'])

        queue = PriorityQueue(queue_config)
        queue.add('b')
        self.assertEqual(queue.occupancy(), {'feature1': 2, 'feature2': 1})

    def test_validation_errors_are_collected(self):
        """Test that every validation problem is reported at once."""
        self._write_config({
            'queue': {
                'features': [
                    {'name': 'dup', 'weights': {'a': -1}},
                    {'name': 'dup', 'key': {'method': 'x'}},
                    {'weights': {}}
                ]
            },
            'benchmark': {'elements': 0},
            'logging': {'level': 'LOUD'}
        })

        with self.assertRaises(ConfigurationError) as ctx:
            ConfigManager(self.config_path)

        message = str(ctx.exception)
        self.assertIn("Invalid weight for key a in feature dup", message)
        self.assertIn("Duplicate feature name: dup", message)
        self.assertIn("Unknown key extractor", message)
        self.assertIn("Feature #2 is missing a name", message)
        self.assertIn("Invalid benchmark elements: 0", message)
        self.assertIn("Invalid logging level: LOUD", message)

    def test_invalid_yaml(self):
        with open(self.config_path, 'w') as file:
            file.write("queue: [unclosed")
        with self.assertRaises(ConfigurationError):
            ConfigManager(self.config_path)

    def test_non_mapping_file(self):
        with open(self.config_path, 'w') as file:
            file.write("- just\n- a list\n")
        with self.assertRaises(ConfigurationError):
            ConfigManager(self.config_path)

    def test_section_not_mapping(self):
        """Test that sections of the wrong type are reported as configuration errors."""
        cases = {
            "benchmark: 5\n": "Section benchmark must be a mapping, got int",
            "queue: [1]\n": "Section queue must be a mapping, got list",
            "logging: loud\n": "Section logging must be a mapping, got str",
            "queue:\n  features:\n    - name: f\n      key: {attribute: 5}\n": "Attribute extractor needs a non-empty name",
            "queue:\n  features:\n    - name: f\n      key: {item: [1, 2]}\n": "Item extractor needs a hashable key",
            "logging:\n  file: [a, b]\n": "Invalid logging file",
            "logging:\n  format: 12\n": "Invalid logging format: 12"
        }

        for text, expected in cases.items():
            with self.subTest(config=text):
                with open(self.config_path, 'w') as file:
                    file.write(text)
                with self.assertRaises(ConfigurationError) as ctx:
                    ConfigManager(self.config_path)
                self.assertIn(expected, str(ctx.exception))

    @patch.dict(os.environ, {'BENCHMARK_ROUNDS': '5'})
    def test_env_override_on_non_mapping_section(self):
        """Test that an override into a non-mapping section is skipped and validation reports it."""
        with open(self.config_path, 'w') as file:
            file.write("benchmark: 5\n")
        with self.assertRaises(ConfigurationError) as ctx:
            ConfigManager(self.config_path)
        self.assertIn("Section benchmark must be a mapping", str(ctx.exception))

    @patch.dict(os.environ, {'LOG_LEVEL': 'DEBUG', 'BENCHMARK_ROUNDS': '5', 'BENCHMARK_ELEMENTS': 'many'})
    def test_env_overrides(self):
        """Test that environment variables override file values and bad values are ignored."""
        manager = ConfigManager(os.path.join(self.temp_dir, 'missing.yaml'))
        self.assertEqual(manager.get('logging.level'), 'DEBUG')
        self.assertEqual(manager.get('benchmark.rounds'), 5)
        self.assertEqual(manager.get('benchmark.elements'), 3000)

    def test_get_and_set(self):
        manager = ConfigManager(os.path.join(self.temp_dir, 'missing.yaml'))
        self.assertIsNone(manager.get('benchmark.missing'))
        self.assertEqual(manager.get('no.such.path', 'fallback'), 'fallback')

        manager.set('benchmark.rounds', 2)
        manager.set('extra.section.value', True)
        self.assertEqual(manager.get('benchmark.rounds'), 2)
        self.assertTrue(manager.get('extra.section.value'))

    def test_save_and_reload(self):
        """Test that a saved configuration loads back unchanged."""
        manager = ConfigManager(self.config_path)
        manager.set('benchmark.rounds', 7)
        self.assertTrue(manager.save_config())

        self.assertTrue(manager.reload_config())
        self.assertEqual(manager.get('benchmark.rounds'), 7)

        exported = manager.export_config('json')
        self.assertIn('"rounds": 7', exported)
        self.assertEqual(yaml.safe_load(manager.export_config())['benchmark']['rounds'], 7)


class TestBuildExtractor(unittest.TestCase):

    def test_identity(self):
        self.assertEqual(build_extractor('identity')('a'), 'a')
        self.assertEqual(build_extractor(None)(3), 3)

    def test_attribute(self):
        self.assertEqual(build_extractor({'attribute': 'kind'})(Job('urgent')), 'urgent')

    def test_item(self):
        self.assertEqual(build_extractor({'item': 'kind'})({'kind': 'normal'}), 'normal')

    def test_unknown(self):
        with self.assertRaises(ConfigurationError):
            build_extractor('upper')
        with self.assertRaises(ConfigurationError):
            build_extractor({'attribute': 'a', 'item': 'b'})
        with self.assertRaises(ConfigurationError):
            build_extractor({'attribute': 5})
        with self.assertRaises(ConfigurationError):
            build_extractor({'attribute': ''})
        with self.assertRaises(ConfigurationError):
            build_extractor({'item': [1, 2]})


if __name__ == '__main__':
    unittest.main()
