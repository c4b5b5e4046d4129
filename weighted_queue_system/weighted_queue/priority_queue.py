"""
Configurable weighted priority queue.

A PriorityQueueConfig holds named features. Each feature extracts a key
from an element and maps that key to a weight. A PriorityQueue keeps one
FIFOQueue per feature and, on insert, stores the element in each feature
queue as many times as the feature's weight for the element's key.

Removal always takes the front of the feature queue with the most
entries. Higher-weighted keys fill their queues faster and so tend to be
served first, but the weights themselves are never consulted at pop time.
"""

import logging
from types import MappingProxyType
from typing import (Callable, Dict, Generic, Hashable, Iterator, List,
                    Mapping, Optional, TypeVar)

from .fifo_queue import FIFOQueue

T = TypeVar('T')
K = TypeVar('K', bound=Hashable)


class FeatureError(ValueError):
    """Raised for invalid feature definitions or mismatched feature sets."""
    pass


class Feature(Generic[T, K]):
    """
    Named weighting rule.

    The weight table is copied on construction and exposed read-only, so a
    feature never changes once built.
    """
    __slots__ = ("_name", "_weights", "_extractor")

    def __init__(self, name: str, weights: Mapping[K, int], extractor: Callable[[T], K]):
        """
        Initialize feature.

        Args:
            name: Feature name, unique within a config
            weights: Mapping of extracted key to non-negative weight
            extractor: Pure function returning the key of an element
        """
        if not callable(extractor):
            raise FeatureError(f"Extractor for feature '{name}' is not callable")

        for key, weight in weights.items():
            if isinstance(weight, bool) or not isinstance(weight, int) or weight < 0:
                raise FeatureError(
                    f"Invalid weight for key {key!r} in feature '{name}': {weight!r}"
                )

        self._name = name
        self._weights: Mapping[K, int] = MappingProxyType(dict(weights))
        self._extractor = extractor

    @property
    def name(self) -> str:
        return self._name

    @property
    def weights(self) -> Mapping[K, int]:
        return self._weights

    @property
    def extractor(self) -> Callable[[T], K]:
        return self._extractor

    def weight_for(self, elem: T) -> int:
        """Weight of an element under this feature; 0 for unmapped keys."""
        return self._weights.get(self._extractor(elem), 0)

    def __repr__(self) -> str:
        return f"Feature(name={self._name!r}, weights={dict(self._weights)!r})"


class PriorityQueueConfig(Generic[T, K]):
    """
    Set of features describing how a PriorityQueue weights its elements.

    Features are iterated in the order they were first added. That order
    is also the tie-break order used by PriorityQueue.pop.
    """

    def __init__(self):
        self._features: Dict[str, Feature[T, K]] = {}
        self.logger = logging.getLogger(__name__)

    def add_feature(self, name: str, weights: Mapping[K, int], extractor: Callable[[T], K]) -> None:
        """
        Add a feature, replacing any existing feature with the same name.

        Args:
            name: Feature name
            weights: Mapping of extracted key to non-negative weight
            extractor: Pure function returning the key of an element
        """
        replaced = name in self._features
        self._features[name] = Feature(name, weights, extractor)

        if replaced:
            self.logger.debug(f"Replaced feature '{name}'")
        else:
            self.logger.debug(f"Added feature '{name}' with {len(weights)} weighted keys")

    def get_feature(self, name: str) -> Optional[Feature[T, K]]:
        return self._features.get(name)

    def features(self) -> Iterator[Feature[T, K]]:
        """Return a fresh iterator over all features."""
        return iter(self._features.values())

    def feature_names(self) -> List[str]:
        return list(self._features)

    def clone(self) -> 'PriorityQueueConfig[T, K]':
        """
        Copy the config.

        Weight tables are copied by value; extractors are shared, not
        re-created.
        """
        config: PriorityQueueConfig[T, K] = PriorityQueueConfig()
        for feature in self.features():
            config.add_feature(feature.name, feature.weights, feature.extractor)
        return config

    __copy__ = clone

    def describe(self) -> List[str]:
        """Render every feature and its full weight table as text lines."""
        lines = []
        for feature in self.features():
            lines.append(f"Feature: {feature.name}")
            lines.append("Weights:")
            for key, weight in feature.weights.items():
                lines.append(f"{key}: {weight}")
        return lines

    def log_state(self, logger: Optional[logging.Logger] = None, level: int = logging.DEBUG) -> None:
        target = logger or self.logger
        for line in self.describe():
            target.log(level, line)

    def __iter__(self) -> Iterator[Feature[T, K]]:
        return self.features()

    def __len__(self) -> int:
        return len(self._features)

    def __contains__(self, name: object) -> bool:
        return name in self._features

    def __str__(self) -> str:
        return "\n".join(self.describe())


class PriorityQueue(Generic[T, K]):
    """
    Weighted priority queue composed of one FIFOQueue per feature.

    The config is cloned on construction. Changes made to the caller's
    config afterwards are not seen by the queue, so the set of feature
    queues always matches the features it was built with.
    """

    def __init__(self, config: PriorityQueueConfig[T, K]):
        """
        Initialize priority queue.

        Args:
            config: Fully populated feature configuration
        """
        self._config = config.clone()
        self._queues: Dict[str, FIFOQueue[T]] = {
            feature.name: FIFOQueue() for feature in self._config.features()
        }
        self.logger = logging.getLogger(__name__)

    @property
    def config(self) -> PriorityQueueConfig[T, K]:
        """Snapshot of the config this queue was built from."""
        return self._config

    def add(self, elem: T) -> None:
        """
        Insert an element into every feature queue, once per unit of weight.

        A feature whose weight for the element's key is 0 (or unmapped)
        does not store the element at all.
        """
        for feature in self._config.features():
            weight = feature.weight_for(elem)
            queue = self._queues[feature.name]
            for _ in range(weight):
                queue.add(elem)

    def _select_queue(self) -> Optional[FIFOQueue[T]]:
        """Return the feature queue with the most entries; first one wins ties."""
        max_length = 0
        selected = None
        for feature in self._config.features():
            queue = self._queues[feature.name]
            length = queue.len()
            if length > max_length:
                max_length = length
                selected = queue
        return selected

    def pop(self) -> Optional[T]:
        """
        Remove and return the front of the fullest feature queue.

        Returns:
            The element, or None if every feature queue is empty
        """
        queue = self._select_queue()
        if queue is None:
            return None
        return queue.get()

    def peek(self) -> Optional[T]:
        """Return the element pop() would return, without removing it."""
        queue = self._select_queue()
        if queue is None:
            return None
        return queue.peek()

    def len(self) -> int:
        """Total entries across all feature queues, replicas included."""
        return sum(queue.len() for queue in self._queues.values())

    def is_empty(self) -> bool:
        return all(queue.is_empty() for queue in self._queues.values())

    def occupancy(self) -> Dict[str, int]:
        """Current length of each feature queue, in feature order."""
        return {
            feature.name: self._queues[feature.name].len()
            for feature in self._config.features()
        }

    def feature_queue(self, name: str) -> Iterator[T]:
        """Iterate over one feature queue, front to back, without removing anything."""
        if name not in self._queues:
            raise KeyError(name)
        return iter(self._queues[name])

    def dump(self, other: 'PriorityQueue[T, K]') -> None:
        """
        Move every feature queue's contents into the same-named queue of another.

        Per-feature order is preserved; entries are not rebalanced between
        features.

        Args:
            other: Priority queue built from a config with the same feature names
        """
        if set(self._queues) != set(other._queues):
            raise FeatureError(
                f"Cannot dump between queues with different features: "
                f"{sorted(self._queues)} != {sorted(other._queues)}"
            )

        for feature in self._config.features():
            self._queues[feature.name].dump(other._queues[feature.name])

        self.logger.debug(f"Dumped {len(self._queues)} feature queues")

    def clear(self) -> None:
        for queue in self._queues.values():
            queue.clear()

    def describe(self) -> List[str]:
        """Render the config followed by each feature queue's contents."""
        lines = self._config.describe()
        for feature in self._config.features():
            lines.append(f"Queue: {feature.name}; {self._queues[feature.name]}")
        return lines

    def log_state(self, logger: Optional[logging.Logger] = None, level: int = logging.DEBUG) -> None:
        target = logger or self.logger
        for line in self.describe():
            target.log(level, line)

    def __len__(self) -> int:
        return self.len()

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __str__(self) -> str:
        return "\n".join(self.describe())
