"""
Configuration Manager for the Weighted Queue System.

Handles loading, validation, and management of queue feature definitions,
benchmark and logging settings from YAML files and environment variables.
"""

import yaml
import os
import copy
import json
import logging
import operator
from collections.abc import Hashable
from typing import Dict, Any, Optional, List, Callable

from weighted_queue import PriorityQueueConfig

class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""
    pass


def _identity(elem):
    return elem


def build_extractor(spec: Any) -> Callable[[Any], Any]:
    """
    Build a key extractor from its configuration form.

    Args:
        spec: 'identity', {'attribute': name} or {'item': key}

    Returns:
        Callable returning the key of an element
    """
    if spec is None or spec == 'identity':
        return _identity

    if isinstance(spec, dict) and len(spec) == 1:
        kind, target = next(iter(spec.items()))
        if kind == 'attribute':
            if not isinstance(target, str) or not target:
                raise ConfigurationError(f"Attribute extractor needs a non-empty name: {target!r}")
            return operator.attrgetter(target)
        if kind == 'item':
            if not isinstance(target, Hashable):
                raise ConfigurationError(f"Item extractor needs a hashable key: {target!r}")
            return operator.itemgetter(target)

    raise ConfigurationError(f"Unknown key extractor: {spec!r}")


class ConfigManager:
    """
    Configuration manager for the queue system.

    Loads and validates configuration from YAML files,
    supports environment variable overrides, and builds
    the priority queue configuration.
    """

    def __init__(self, config_file_path: str = "config.yaml"):
        """
        Initialize configuration manager.

        Args:
            config_file_path: Path to main configuration file
        """
        self.config_file_path = config_file_path
        self.logger = logging.getLogger(__name__)

        # Configuration data
        self.config: Dict[str, Any] = {}
        self.defaults: Dict[str, Any] = {}

        # Load default configuration
        self._load_defaults()

        # Load configuration from file
        self.load_config()

    def _load_defaults(self):
        """Load default configuration values."""
        self.defaults = {
            # Queue Configuration
            'queue': {
                'features': []
            },

            # Benchmark Configuration
            'benchmark': {
                'elements': 3000,
                'rounds': 10
            },

            # Logging Configuration
            'logging': {
                'level': 'INFO',
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                'file': None
            }
        }

    def load_config(self) -> Dict[str, Any]:
        """
        Load configuration from file with defaults fallback.

        Returns:
            Loaded configuration dictionary
        """
        try:
            # Start with defaults
            self.config = copy.deepcopy(self.defaults)

            # Load from file if it exists
            if os.path.exists(self.config_file_path):
                with open(self.config_file_path, 'r') as file:
                    file_config = yaml.safe_load(file)
                if file_config:
                    if not isinstance(file_config, dict):
                        raise ConfigurationError(
                            f"Configuration file {self.config_file_path} must contain a mapping"
                        )
                    self.config = self._merge_configs(self.config, file_config)
                    self.logger.info(f"Loaded configuration from {self.config_file_path}")
                else:
                    self.logger.warning(f"Configuration file {self.config_file_path} is empty, using defaults")
            else:
                self.logger.warning(f"Configuration file {self.config_file_path} not found, using defaults")

            # Apply environment variable overrides
            self._apply_env_overrides()

            # Validate configuration
            self._validate_config()

            return self.config

        except ConfigurationError:
            raise
        except (OSError, yaml.YAMLError) as e:
            self.logger.error(f"Failed to load configuration: {e}")
            raise ConfigurationError(f"Configuration loading failed: {e}")

    def _merge_configs(self, base: Dict, override: Dict) -> Dict:
        """
        Recursively merge configuration dictionaries.

        Args:
            base: Base configuration
            override: Configuration to merge in

        Returns:
            Merged configuration
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self):
        """Apply environment variable overrides to configuration."""
        env_mappings = {
            'LOG_LEVEL': ('logging', 'level', str),
            'BENCHMARK_ELEMENTS': ('benchmark', 'elements', int),
            'BENCHMARK_ROUNDS': ('benchmark', 'rounds', int)
        }

        for env_var, (section, key, type_func) in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                try:
                    converted_value = type_func(env_value)
                    section_config = self.config.setdefault(section, {})
                    if not isinstance(section_config, dict):
                        self.logger.warning(f"Cannot apply {env_var}: section {section} is not a mapping")
                        continue
                    section_config[key] = converted_value
                    self.logger.info(f"Applied environment override {env_var}={converted_value}")
                except (ValueError, TypeError) as e:
                    self.logger.warning(f"Invalid environment variable {env_var}={env_value}: {e}")

    def _validate_config(self):
        """Validate configuration for required values and constraints."""
        errors = []

        # Validate queue features
        self._validate_queue_config(errors)

        # Validate benchmark settings
        self._validate_benchmark_config(errors)

        # Validate logging settings
        self._validate_logging_config(errors)

        if errors:
            error_message = "Configuration validation failed:\n" + "\n".join(errors)
            raise ConfigurationError(error_message)

        self.logger.info("Configuration validation successful")

    def _get_section(self, section: str, errors: List[str]) -> Optional[Dict[str, Any]]:
        """Return a configuration section, recording an error if it is not a mapping."""
        section_config = self.config.get(section) or {}
        if not isinstance(section_config, dict):
            errors.append(f"Section {section} must be a mapping, got {type(section_config).__name__}")
            return None
        return section_config

    def _validate_queue_config(self, errors: List[str]):
        """Validate queue feature definitions."""
        queue_config = self._get_section('queue', errors)
        if queue_config is None:
            return
        features = queue_config.get('features') or []

        if not isinstance(features, list):
            errors.append("queue.features must be a list")
            return

        seen_names = set()
        for index, feature in enumerate(features):
            if not isinstance(feature, dict):
                errors.append(f"Feature #{index} must be a mapping")
                continue

            name = feature.get('name')
            if not name or not isinstance(name, str):
                errors.append(f"Feature #{index} is missing a name")
            elif name in seen_names:
                errors.append(f"Duplicate feature name: {name}")
            else:
                seen_names.add(name)

            weights = feature.get('weights', {})
            if not isinstance(weights, dict):
                errors.append(f"Weights of feature {name} must be a mapping")
            else:
                for key, weight in weights.items():
                    if isinstance(weight, bool) or not isinstance(weight, int) or weight < 0:
                        errors.append(f"Invalid weight for key {key} in feature {name}: {weight}")

            try:
                build_extractor(feature.get('key', 'identity'))
            except ConfigurationError as e:
                errors.append(f"Feature {name}: {e}")

    def _validate_benchmark_config(self, errors: List[str]):
        """Validate benchmark configuration."""
        benchmark_config = self._get_section('benchmark', errors)
        if benchmark_config is None:
            return

        for key in ('elements', 'rounds'):
            value = benchmark_config.get(key)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                errors.append(f"Invalid benchmark {key}: {value}")

    def _validate_logging_config(self, errors: List[str]):
        """Validate logging configuration."""
        log_config = self._get_section('logging', errors)
        if log_config is None:
            return

        level = log_config.get('level', 'INFO')
        if not isinstance(level, str) or not isinstance(logging.getLevelName(level.upper()), int):
            errors.append(f"Invalid logging level: {level}")

        log_format = log_config.get('format')
        if log_format is not None and not isinstance(log_format, str):
            errors.append(f"Invalid logging format: {log_format}")

        log_file = log_config.get('file')
        if log_file is not None and not isinstance(log_file, str):
            errors.append(f"Invalid logging file: {log_file}")

    def build_queue_config(self) -> PriorityQueueConfig:
        """
        Build the priority queue configuration from the queue section.

        Returns:
            PriorityQueueConfig with one feature per configured entry
        """
        queue_config = PriorityQueueConfig()

        for feature in (self.config.get('queue') or {}).get('features') or []:
            queue_config.add_feature(
                feature['name'],
                feature.get('weights') or {},
                build_extractor(feature.get('key', 'identity'))
            )

        self.logger.info(f"Built queue configuration with {len(queue_config)} features")
        return queue_config

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value by dotted key path.

        Args:
            key_path: Dotted key path (e.g., 'benchmark.elements')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        try:
            keys = key_path.split('.')
            value = self.config

            for key in keys:
                value = value[key]

            return value

        except (KeyError, TypeError):
            return default

    def set(self, key_path: str, value: Any):
        """
        Set configuration value by dotted key path.

        Args:
            key_path: Dotted key path (e.g., 'benchmark.elements')
            value: Value to set
        """
        keys = key_path.split('.')
        config_ref = self.config

        # Navigate to parent of target key
        for key in keys[:-1]:
            if key not in config_ref:
                config_ref[key] = {}
            config_ref = config_ref[key]

        # Set the value
        config_ref[keys[-1]] = value
        self.logger.info(f"Updated configuration: {key_path} = {value}")

    def save_config(self, file_path: Optional[str] = None) -> bool:
        """
        Save current configuration to file.

        Args:
            file_path: Optional file path (uses default if not provided)

        Returns:
            True if save was successful
        """
        try:
            save_path = file_path or self.config_file_path

            with open(save_path, 'w') as file:
                yaml.safe_dump(self.config, file, default_flow_style=False, indent=2)

            self.logger.info(f"Configuration saved to {save_path}")
            return True

        except (OSError, yaml.YAMLError) as e:
            self.logger.error(f"Failed to save configuration: {e}")
            return False

    def export_config(self, format_type: str = 'yaml') -> str:
        """
        Export configuration in specified format.

        Args:
            format_type: Export format ('yaml' or 'json')

        Returns:
            Configuration as formatted string
        """
        if format_type.lower() == 'json':
            return json.dumps(self.config, indent=2, default=str)
        return yaml.safe_dump(self.config, default_flow_style=False, indent=2)

    def reload_config(self) -> bool:
        """
        Reload configuration from file.

        Returns:
            True if reload was successful
        """
        try:
            self.load_config()
            self.logger.info("Configuration reloaded successfully")
            return True
        except ConfigurationError as e:
            self.logger.error(f"Failed to reload configuration: {e}")
            return False
