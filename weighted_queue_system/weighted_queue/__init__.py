"""
Queue module for the Weighted Queue System.

This module provides the in-memory queue types:
- Queue capability shared by all implementations
- Linked-list FIFO queue with order-preserving dump
- Weighted multi-feature priority queue and its configuration
"""

from .base import Queue
from .fifo_queue import FIFOQueue
from .priority_queue import Feature, FeatureError, PriorityQueue, PriorityQueueConfig

__all__ = ['Queue', 'FIFOQueue', 'Feature', 'FeatureError', 'PriorityQueue', 'PriorityQueueConfig']
