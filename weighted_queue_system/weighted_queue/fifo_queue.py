"""
Linked-list FIFO queue.

Elements are held in a singly-linked chain of nodes. The queue keeps a
reference to the first node for O(1) removal and to the last node for
O(1) append; the tail reference is only ever used to append.
"""

import logging
from typing import Generic, Iterator, List, Optional, TypeVar

from .base import Queue

T = TypeVar('T')

logger = logging.getLogger(__name__)


class Node(Generic[T]):
    """One link in the queue chain."""
    __slots__ = ("elem", "next")

    def __init__(self, elem: T) -> None:
        self.elem = elem
        self.next: Optional['Node[T]'] = None


class FIFOQueue(Queue[T]):
    """
    First in, first out queue backed by a linked list.

    ``add``, ``get``, ``peek`` and ``is_empty`` run in O(1). ``len`` walks
    the chain and is O(n); callers that need the length in a hot loop
    should keep their own count.
    """
    __slots__ = ("_head", "_tail")

    def __init__(self) -> None:
        self._head: Optional[Node[T]] = None
        # Last node of the chain; None whenever _head is None.
        self._tail: Optional[Node[T]] = None

    def add(self, elem: T) -> None:
        """Add an element to the back of the queue."""
        node = Node(elem)

        if self._tail is not None:
            self._tail.next = node
        else:
            self._head = node

        self._tail = node

    def get(self) -> Optional[T]:
        """Remove and return the front element, or None if the queue is empty."""
        node = self._head
        if node is None:
            return None

        self._head = node.next
        if self._head is None:
            self._tail = None

        node.next = None
        return node.elem

    def peek(self) -> Optional[T]:
        """Return the front element without removing it."""
        if self._head is None:
            return None
        return self._head.elem

    def len(self) -> int:
        """Count the elements by walking the chain."""
        count = 0
        node = self._head
        while node is not None:
            count += 1
            node = node.next
        return count

    def is_empty(self) -> bool:
        return self._head is None

    def dump(self, other: Queue[T]) -> None:
        """
        Move every element into another queue.

        Elements are added to ``other`` in the order they would have been
        removed from this queue. The chain is detached first, so this queue
        is empty before ``other.add`` is called; dumping a queue into itself
        leaves its contents unchanged.

        Args:
            other: Any Queue implementation receiving the elements
        """
        node = self._head
        self._head = None
        self._tail = None

        moved = 0
        while node is not None:
            following = node.next
            node.next = None
            other.add(node.elem)
            node = following
            moved += 1

        logger.debug(f"Dumped {moved} elements into {type(other).__name__}")

    def clear(self) -> None:
        """Drop every element, unlinking the chain one node at a time."""
        node = self._head
        self._head = None
        self._tail = None

        while node is not None:
            following = node.next
            node.next = None
            node = following

    def __del__(self):
        # Iterative teardown; a long chain must not be freed recursively.
        self.clear()

    def __iter__(self) -> Iterator[T]:
        node = self._head
        while node is not None:
            yield node.elem
            node = node.next

    def _element_type_name(self) -> str:
        names: List[str] = []
        for elem in self:
            name = type(elem).__name__
            if name not in names:
                names.append(name)
        return "|".join(names)

    def __str__(self) -> str:
        items = ", ".join(str(elem) for elem in self)
        type_name = self._element_type_name()
        if not type_name:
            return f"FIFOQueue [{items}]"
        return f"FIFOQueue<{type_name}> [{items}]"

    __repr__ = __str__
