"""
Array-backed binary min-heap ordered by a comparator.
"""

from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")


class BinaryHeap(Generic[T]):
    """
    Priority queue returning the smallest element under compare first.

    Ties are broken only by what the comparator decides; elements that
    compare equal come out in no particular order.
    """

    def __init__(self, compare: Callable[[T, T], int]):
        self._compare = compare
        self._heap: List[T] = []

    def insert(self, item: T) -> None:
        self._heap.append(item)
        self._sift_up(len(self._heap) - 1)

    def extract_min(self) -> Optional[T]:
        if not self._heap:
            return None
        if len(self._heap) == 1:
            return self._heap.pop()
        smallest = self._heap[0]
        self._heap[0] = self._heap.pop()
        self._sift_down(0)
        return smallest

    def retain(self, keep: Callable[[T], bool]) -> int:
        """Drop every element keep() rejects, re-heapify, return how many went."""
        before = len(self._heap)
        self._heap = [item for item in self._heap if keep(item)]
        for index in reversed(range(len(self._heap) // 2)):
            self._sift_down(index)
        return before - len(self._heap)

    def peek(self) -> Optional[T]:
        return self._heap[0] if self._heap else None

    def size(self) -> int:
        return len(self._heap)

    def is_empty(self) -> bool:
        return not self._heap

    def __len__(self) -> int:
        return len(self._heap)

    def _sift_up(self, index: int) -> None:
        heap = self._heap
        while index > 0:
            parent = (index - 1) // 2
            if self._compare(heap[index], heap[parent]) >= 0:
                break
            heap[index], heap[parent] = heap[parent], heap[index]
            index = parent

    def _sift_down(self, index: int) -> None:
        heap = self._heap
        length = len(heap)
        while True:
            left = 2 * index + 1
            right = left + 1
            smallest = index

            if left < length and self._compare(heap[left], heap[smallest]) < 0:
                smallest = left
            if right < length and self._compare(heap[right], heap[smallest]) < 0:
                smallest = right

            if smallest == index:
                return
            heap[index], heap[smallest] = heap[smallest], heap[index]
            index = smallest
