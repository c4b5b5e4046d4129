"""
Queue capability shared by every queue implementation.

Components that only need to move elements around (for example the
``dump`` target of a FIFO queue) are written against this contract
instead of a concrete class.
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


class Queue(ABC, Generic[T]):
    """Abstract FIFO-style queue."""

    @abstractmethod
    def add(self, elem: T) -> None:
        """Add an element to the back of the queue."""

    @abstractmethod
    def get(self) -> Optional[T]:
        """Remove and return the front element, or None if empty."""

    @abstractmethod
    def peek(self) -> Optional[T]:
        """Return the front element without removing it, or None if empty."""

    @abstractmethod
    def len(self) -> int:
        """Return the number of elements in the queue."""

    @abstractmethod
    def is_empty(self) -> bool:
        """Return True if the queue holds no elements."""

    @abstractmethod
    def dump(self, other: 'Queue[T]') -> None:
        """Move every element, front to back, into another queue."""

    def __len__(self) -> int:
        return self.len()

    def __bool__(self) -> bool:
        return not self.is_empty()
