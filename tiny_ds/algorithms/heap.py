"""
d-ary Min-Heap implementation for TinyDS.

This module provides a priority queue backed by a min-heap in which every node
has up to `fan_out` children. The ordering is injected as a comparator
function, so elements do not need to define their own ordering and the same
element type can be queued under different priorities.

A larger fan-out makes the tree shallower, which speeds up insert (fewer
levels to sift up) at the cost of extract (more children to scan per level).
A fan-out of 1 degenerates into a sorted list.
"""

import logging
from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")  # Type for the queued items

# Returns a negative number, zero or a positive number when the first argument
# orders before, equal to or after the second (the functools.cmp_to_key contract)
Comparator = Callable[[T, T], int]

logger = logging.getLogger(__name__)


def natural_order(a: Any, b: Any) -> int:
    """Comparator using the elements' own < and > operators."""
    return (a > b) - (a < b)


class MinHeap(Generic[T]):
    """
    Priority queue backed by a d-ary min-heap with an injected comparator.

    The heap keeps the invariant that no child orders before its parent, so
    the root is always a minimum under the comparator. Elements that compare
    equal are extracted in unspecified order.

    Example:
        heap = MinHeap(lambda a, b: a - b, fan_out=4)
        heap.insert(11)
        heap.insert(5)
        heap.insert(7)

        len(heap)       # 3
        heap.extract()  # 5
        heap.extract()  # 7
        heap.extract()  # 11
        heap.extract()  # None
    """

    def __init__(self, comparator: Optional[Comparator] = None, fan_out: int = 2):
        """
        Initialize an empty heap.

        Args:
            comparator: Total-order function (a, b) -> int. None uses the
                        elements' natural ordering.
            fan_out: Maximum number of children per node (at least 1).

        Raises:
            ValueError: If fan_out is less than 1.
            TypeError: If fan_out is not an integer or comparator is not callable.
        """
        if not isinstance(fan_out, int):
            raise TypeError(f"Fan-out must be an integer, got {type(fan_out).__name__}")
        if fan_out < 1:
            raise ValueError("Fan-out (children per node) must be at least 1")
        if comparator is None:
            comparator = natural_order
        elif not callable(comparator):
            raise TypeError(f"Comparator {comparator!r} is not callable")

        self._data: List[T] = []
        self._fan_out = fan_out
        self._compare: Comparator = comparator

        logger.debug("Created %d-ary min-heap", fan_out)

    @classmethod
    def from_iterable(
        cls,
        items: Iterable[T],
        comparator: Optional[Comparator] = None,
        fan_out: int = 2,
    ) -> "MinHeap[T]":
        """
        Build a heap from existing items in linear time.

        Args:
            items: Items to place in the heap.
            comparator: Total-order function (a, b) -> int.
            fan_out: Maximum number of children per node.

        Returns:
            A new MinHeap holding all items.
        """
        heap = cls(comparator, fan_out)
        heap._data = list(items)
        if len(heap._data) > 1:
            # Sift down every internal node, deepest first
            for i in range(heap._parent(len(heap._data) - 1), -1, -1):
                heap._sift_down(i)
        return heap

    @property
    def fan_out(self) -> int:
        """Maximum number of children per node."""
        return self._fan_out

    @property
    def comparator(self) -> Comparator:
        return self._compare

    def __len__(self) -> int:
        return len(self._data)

    def is_empty(self) -> bool:
        return not self._data

    def _parent(self, i: int) -> int:
        return (i - 1) // self._fan_out

    def _child(self, i: int, n: int) -> int:
        """Index of the n-th child (0-indexed) of node i."""
        return i * self._fan_out + n + 1

    def _sift_up(self, i: int) -> None:
        data = self._data
        compare = self._compare
        while i > 0:
            parent = self._parent(i)
            if compare(data[parent], data[i]) <= 0:
                break
            data[i], data[parent] = data[parent], data[i]
            i = parent

    def _sift_down(self, i: int) -> None:
        data = self._data
        compare = self._compare
        size = len(data)
        while True:
            smallest = i
            first = self._child(i, 0)
            # Strict comparison keeps the lowest index among equal children
            for child in range(first, min(first + self._fan_out, size)):
                if compare(data[child], data[smallest]) < 0:
                    smallest = child

            if smallest == i:
                return

            data[i], data[smallest] = data[smallest], data[i]
            i = smallest

    def insert(self, item: T) -> None:
        """
        Add an item to the heap.

        The item is appended as the last leaf and sifted up towards the root
        until its parent no longer orders after it.

        Args:
            item: The item to add.
        """
        self._data.append(item)
        self._sift_up(len(self._data) - 1)

    def extend(self, items: Iterable[T]) -> None:
        """Insert every item from an iterable."""
        for item in items:
            self.insert(item)

    def peek(self) -> Optional[T]:
        """Return the minimum item without removing it, or None if the heap is empty."""
        if not self._data:
            return None
        return self._data[0]

    def extract(self) -> Optional[T]:
        """
        Remove and return the minimum item.

        The last leaf replaces the root and is sifted down, swapping with its
        smallest child until no child orders before it.

        Returns:
            The minimum item, or None if the heap is empty. Heaps that may
            contain None as an item should check len() before extracting.
        """
        data = self._data
        if not data:
            return None

        last = data.pop()
        if not data:
            return last

        root = data[0]
        data[0] = last
        self._sift_down(0)
        return root

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(fan_out={self._fan_out}, size={len(self._data)})"
