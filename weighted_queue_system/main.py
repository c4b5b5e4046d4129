#!/usr/bin/env python3
"""
Weighted Queue System
Command line entry point

Builds a weighted priority queue from a YAML feature configuration and:
- adds elements given on the command line or in a YAML list file
- logs the feature tables and per-feature queue contents
- pops the queue to exhaustion and prints the pop order
- optionally runs the queue benchmarks
"""

import sys
import os
import json
import logging
import argparse
from typing import Any, Dict, List, Optional

import yaml

# Add project root to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from utils.config import ConfigManager, ConfigurationError
from utils.benchmark import QueueBenchmark
from weighted_queue import PriorityQueue


def setup_logging(config: Dict[str, Any], verbose: bool = False):
    """Setup logging with configuration settings."""
    log_config = config.get('logging', {})
    log_level = logging.DEBUG if verbose else getattr(logging, log_config.get('level', 'INFO').upper())
    log_format = log_config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    log_file = log_config.get('file')

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=handlers,
        force=True
    )


def load_elements(input_file: Optional[str]) -> List[Any]:
    """
    Load elements from a YAML file containing a list.

    Args:
        input_file: Path to YAML file, or None

    Returns:
        List of elements (empty if no file given)
    """
    if not input_file:
        return []

    try:
        with open(input_file, 'r') as file:
            elements = yaml.safe_load(file)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load elements from {input_file}: {e}")

    if elements is None:
        return []
    if not isinstance(elements, list):
        raise ConfigurationError(f"Elements file {input_file} must contain a list")
    return elements


def run_queue(config_manager: ConfigManager, elements: List[Any]) -> List[Any]:
    """
    Fill a priority queue with the elements and pop it to exhaustion.

    Returns:
        Elements in pop order
    """
    logger = logging.getLogger(__name__)

    queue = PriorityQueue(config_manager.build_queue_config())
    for elem in elements:
        try:
            queue.add(elem)
        except (AttributeError, KeyError, IndexError, TypeError) as e:
            raise ConfigurationError(f"Cannot extract feature keys from element {elem!r}: {e}")

    logger.info(f"Added {len(elements)} elements, {queue.len()} entries stored")
    queue.log_state(logger, logging.INFO)

    order = []
    while not queue.is_empty():
        order.append(queue.pop())
    return order


def run_benchmarks(config_manager: ConfigManager, elements: List[Any]) -> List[Dict[str, Any]]:
    """Run the FIFO dump benchmark and, when elements are given, the priority benchmark."""
    benchmark = QueueBenchmark(config_manager.config)
    results = [benchmark.run_dump_benchmark()]

    if elements:
        try:
            results.append(benchmark.run_priority_benchmark(
                config_manager.build_queue_config(), elements
            ))
        except (AttributeError, KeyError, IndexError, TypeError) as e:
            raise ConfigurationError(f"Cannot extract feature keys from benchmark elements: {e}")
    return results


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description='Weighted multi-feature priority queue')
    parser.add_argument('elements', nargs='*',
                        help='Elements to add to the queue (read as strings)')
    parser.add_argument('--config', '-c', default='config.yaml',
                        help='Configuration file path (default: config.yaml)')
    parser.add_argument('--input', '-i',
                        help='YAML file containing a list of elements to add')
    parser.add_argument('--benchmark', action='store_true',
                        help='Run queue benchmarks instead of draining the queue')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')

    args = parser.parse_args(argv)

    try:
        config_manager = ConfigManager(args.config)
        setup_logging(config_manager.config, args.verbose)
        logger = logging.getLogger(__name__)

        elements = list(args.elements) + load_elements(args.input)

        if args.benchmark:
            results = run_benchmarks(config_manager, elements)
            print(json.dumps(results, indent=2))
            return 0

        order = run_queue(config_manager, elements)
        logger.info(f"Popped {len(order)} entries")
        for elem in order:
            print(elem)
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
