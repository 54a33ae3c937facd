"""
Binary trees.

BinaryTree places each new node on a random side and has no ordering;
it exists for traversal demos only. BinarySearchTree orders by an
injected comparator and is unbalanced, so sorted insertions degrade it
to a linked list.
"""

import random
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")


class _TreeNode(Generic[T]):
    __slots__ = ("data", "left", "right")

    def __init__(self, data: T):
        self.data = data
        self.left: Optional[_TreeNode[T]] = None
        self.right: Optional[_TreeNode[T]] = None


def _in_order(root: Optional[_TreeNode[T]]) -> List[T]:
    result = []
    stack = []
    node = root
    while stack or node is not None:
        while node is not None:
            stack.append(node)
            node = node.left
        node = stack.pop()
        result.append(node.data)
        node = node.right
    return result


class BinaryTree(Generic[T]):
    """Unordered binary tree with random left/right descent."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._root: Optional[_TreeNode[T]] = None
        self._rng = rng or random.Random()
        self._size = 0

    def insert(self, data: T) -> None:
        node = _TreeNode(data)
        self._size += 1
        if self._root is None:
            self._root = node
            return

        current = self._root
        while True:
            if self._rng.random() < 0.5:
                if current.left is None:
                    current.left = node
                    return
                current = current.left
            else:
                if current.right is None:
                    current.right = node
                    return
                current = current.right

    def in_order(self) -> List[T]:
        return _in_order(self._root)

    def size(self) -> int:
        return self._size


class BinarySearchTree(Generic[T]):
    """
    Comparator-ordered binary search tree.

    Elements comparing equal go to the right subtree, so in-order
    traversal keeps equal elements in insertion order.
    """

    def __init__(self, compare: Callable[[T, T], int]):
        self._compare = compare
        self._root: Optional[_TreeNode[T]] = None
        self._size = 0

    def insert(self, data: T) -> None:
        node = _TreeNode(data)
        self._size += 1
        if self._root is None:
            self._root = node
            return

        current = self._root
        while True:
            if self._compare(data, current.data) < 0:
                if current.left is None:
                    current.left = node
                    return
                current = current.left
            else:
                if current.right is None:
                    current.right = node
                    return
                current = current.right

    def in_order(self) -> List[T]:
        return _in_order(self._root)

    def find_min(self) -> Optional[T]:
        if self._root is None:
            return None
        current = self._root
        while current.left is not None:
            current = current.left
        return current.data

    def find_max(self) -> Optional[T]:
        if self._root is None:
            return None
        current = self._root
        while current.right is not None:
            current = current.right
        return current.data

    def size(self) -> int:
        return self._size
