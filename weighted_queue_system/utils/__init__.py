"""
Utilities module for the Weighted Queue System.

This module provides utility functions and classes including:
- Configuration loading and validation
- Priority queue configuration building from YAML feature definitions
- Queue benchmarks
"""

from .config import ConfigManager, ConfigurationError
from .benchmark import QueueBenchmark

__all__ = ['ConfigManager', 'ConfigurationError', 'QueueBenchmark']
