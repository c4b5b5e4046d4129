"""
Queue benchmarks for the Weighted Queue System.

Times the FIFO dump path and a full fill/drain cycle of a priority
queue, reporting memory growth from element replication.
"""

import logging
import statistics
import time
from typing import Any, Dict, Iterable, List, Optional

import psutil

from weighted_queue import FIFOQueue, PriorityQueue, PriorityQueueConfig


class QueueBenchmark:
    """
    Benchmark runner for queue operations.

    Each benchmark runs a fixed number of rounds and reports timing
    statistics in seconds.
    """

    def __init__(self, config: Dict):
        """
        Initialize benchmark runner.

        Args:
            config: Configuration dictionary containing the benchmark section
        """
        self.config = config
        self.logger = logging.getLogger(__name__)

        self.benchmark_config = config.get('benchmark', {})
        self.elements = self.benchmark_config.get('elements', 3000)
        self.rounds = self.benchmark_config.get('rounds', 10)

        self.process = psutil.Process()

    def _summarize(self, timings: List[float]) -> Dict[str, float]:
        return {
            'mean': statistics.mean(timings),
            'median': statistics.median(timings),
            'min': min(timings),
            'max': max(timings)
        }

    def run_dump_benchmark(self, elements: Optional[int] = None, rounds: Optional[int] = None) -> Dict[str, Any]:
        """
        Fill a FIFO queue and dump it into another one.

        Args:
            elements: Elements added per round (defaults to configuration)
            rounds: Number of rounds (defaults to configuration)

        Returns:
            Timing results dictionary
        """
        elements = elements or self.elements
        rounds = rounds or self.rounds

        timings = []
        for _ in range(rounds):
            start = time.perf_counter()
            source: FIFOQueue[int] = FIFOQueue()
            target: FIFOQueue[int] = FIFOQueue()
            for i in range(elements):
                source.add(i)
            source.dump(target)
            timings.append(time.perf_counter() - start)

        self.logger.info(f"Dump benchmark: {rounds} rounds of {elements} elements")

        return {
            'benchmark': 'fifo_dump',
            'elements': elements,
            'rounds': rounds,
            'seconds': self._summarize(timings)
        }

    def run_priority_benchmark(self, queue_config: PriorityQueueConfig,
                               samples: Iterable[Any], rounds: Optional[int] = None) -> Dict[str, Any]:
        """
        Add samples to a fresh priority queue and pop it to exhaustion.

        Args:
            queue_config: Feature configuration for the queue
            samples: Elements added each round
            rounds: Number of rounds (defaults to configuration)

        Returns:
            Timing, replication and memory results dictionary
        """
        rounds = rounds or self.rounds
        samples = list(samples)

        timings = []
        stored_entries = 0
        rss_delta = 0
        for _ in range(rounds):
            queue = PriorityQueue(queue_config)
            rss_before = self.process.memory_info().rss

            start = time.perf_counter()
            for sample in samples:
                queue.add(sample)
            stored_entries = queue.len()
            rss_delta = max(rss_delta, self.process.memory_info().rss - rss_before)

            while not queue.is_empty():
                queue.pop()
            timings.append(time.perf_counter() - start)

        self.logger.info(
            f"Priority benchmark: {rounds} rounds of {len(samples)} samples, "
            f"{stored_entries} stored entries"
        )

        return {
            'benchmark': 'priority_fill_drain',
            'samples': len(samples),
            'stored_entries': stored_entries,
            'rounds': rounds,
            'rss_delta_bytes': rss_delta,
            'seconds': self._summarize(timings)
        }
