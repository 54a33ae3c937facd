"""
Sequential containers: array list, stack, queue and singly linked list.

Empty pops/peeks return None instead of raising.
"""

from collections import deque
from functools import cmp_to_key
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ArrayList(Generic[T]):
    """Thin list wrapper used for task lists and search results."""

    def __init__(self):
        self._items: List[T] = []

    def add(self, item: T) -> None:
        self._items.append(item)

    def remove(self, index: int) -> Optional[T]:
        """Remove and return the item at index, or None if out of range."""
        if 0 <= index < len(self._items):
            return self._items.pop(index)
        return None

    def get(self, index: int) -> Optional[T]:
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def size(self) -> int:
        return len(self._items)

    def search(self, predicate: Callable[[T], bool]) -> List[T]:
        return [item for item in self._items if predicate(item)]

    def sort(self, compare: Optional[Callable[[T, T], int]] = None) -> List[T]:
        """Return a sorted copy; the list itself is left untouched."""
        if compare is None:
            return sorted(self._items)
        return sorted(self._items, key=cmp_to_key(compare))

    def clear(self) -> None:
        self._items = []

    def get_all(self) -> List[T]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


class Stack(Generic[T]):
    """LIFO stack, used for the command history."""

    def __init__(self):
        self._items: List[T] = []

    def push(self, item: T) -> None:
        self._items.append(item)

    def pop(self) -> Optional[T]:
        return self._items.pop() if self._items else None

    def peek(self) -> Optional[T]:
        return self._items[-1] if self._items else None

    def is_empty(self) -> bool:
        return not self._items

    def size(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)


class Queue(Generic[T]):
    """FIFO queue, used for pending notifications."""

    def __init__(self):
        self._items: deque = deque()

    def enqueue(self, item: T) -> None:
        self._items.append(item)

    def dequeue(self) -> Optional[T]:
        return self._items.popleft() if self._items else None

    def front(self) -> Optional[T]:
        return self._items[0] if self._items else None

    def is_empty(self) -> bool:
        return not self._items

    def size(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)


class _Node(Generic[T]):
    __slots__ = ("data", "next")

    def __init__(self, data: T, next: "Optional[_Node[T]]" = None):
        self.data = data
        self.next = next


class LinkedList(Generic[T]):
    """
    Singly linked list, used for the task activity history.

    append() walks to the tail on every call, so it is O(n).
    """

    def __init__(self):
        self._head: Optional[_Node[T]] = None
        self._size = 0

    def append(self, data: T) -> None:
        node = _Node(data)
        if self._head is None:
            self._head = node
        else:
            current = self._head
            while current.next is not None:
                current = current.next
            current.next = node
        self._size += 1

    def prepend(self, data: T) -> None:
        self._head = _Node(data, self._head)
        self._size += 1

    def remove(self, data: T) -> bool:
        """Remove the first node equal to data."""
        if self._head is None:
            return False
        if self._head.data == data:
            self._head = self._head.next
            self._size -= 1
            return True

        current = self._head
        while current.next is not None and current.next.data != data:
            current = current.next
        if current.next is not None:
            current.next = current.next.next
            self._size -= 1
            return True
        return False

    def to_list(self) -> List[T]:
        result = []
        current = self._head
        while current is not None:
            result.append(current.data)
            current = current.next
        return result

    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size
