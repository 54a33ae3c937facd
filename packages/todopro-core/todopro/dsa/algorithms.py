"""
Search, sort and helper algorithms.

All functions take the sequence to work on and return new values; none of
them modify their input. Comparators follow the cmp convention: negative
if a sorts before b, zero if equal, positive otherwise.
"""

from collections import deque
from typing import Callable, Dict, List, Sequence, TypeVar

T = TypeVar("T")

Compare = Callable[[T, T], int]

BIT_MASK = 0xFFFFFFFF

_factorial_memo: Dict[int, int] = {}


def linear_search(items: Sequence[T], target: T) -> int:
    """Index of the first item equal to target, or -1."""
    for index, item in enumerate(items):
        if item == target:
            return index
    return -1


def binary_search(items: Sequence[T], target: T, compare: Compare) -> int:
    """
    Index of an item comparing equal to target, or -1.

    items must already be sorted by the same comparator.
    """
    left, right = 0, len(items) - 1
    while left <= right:
        mid = (left + right) // 2
        result = compare(items[mid], target)
        if result == 0:
            return mid
        if result < 0:
            left = mid + 1
        else:
            right = mid - 1
    return -1


def quick_sort(items: Sequence[T], compare: Compare) -> List[T]:
    """
    Quicksort with the first element as pivot.

    Not stable, and quadratic on already-sorted input.
    """
    result: List[T] = []
    # (is_pivot, payload) pairs, popped as less, pivot, greater
    pending = [(False, list(items))]
    while pending:
        is_pivot, part = pending.pop()
        if is_pivot:
            result.append(part)
            continue
        if len(part) <= 1:
            result.extend(part)
            continue
        pivot, rest = part[0], part[1:]
        less = [x for x in rest if compare(x, pivot) < 0]
        greater = [x for x in rest if compare(x, pivot) >= 0]
        pending.append((False, greater))
        pending.append((True, pivot))
        pending.append((False, less))
    return result


def merge_sort(items: Sequence[T], compare: Compare) -> List[T]:
    """Stable top-down merge sort."""
    items = list(items)
    if len(items) <= 1:
        return items
    mid = len(items) // 2
    return _merge(merge_sort(items[:mid], compare), merge_sort(items[mid:], compare), compare)


def _merge(left: List[T], right: List[T], compare: Compare) -> List[T]:
    result = []
    i = j = 0
    while i < len(left) and j < len(right):
        if compare(left[i], right[j]) <= 0:
            result.append(left[i])
            i += 1
        else:
            result.append(right[j])
            j += 1
    result.extend(left[i:])
    result.extend(right[j:])
    return result


def greedy_selection(items: Sequence[T], value: Callable[[T], float]) -> List[T]:
    """Items ordered by value, highest first; ties keep input order."""
    return sorted(items, key=value, reverse=True)


def set_bit(flags: int, position: int) -> int:
    return (flags | (1 << position)) & BIT_MASK


def clear_bit(flags: int, position: int) -> int:
    return flags & ~(1 << position) & BIT_MASK


def toggle_bit(flags: int, position: int) -> int:
    return (flags ^ (1 << position)) & BIT_MASK


def check_bit(flags: int, position: int) -> bool:
    return (flags & (1 << position)) != 0


def sliding_window_max(values: Sequence[float], k: int) -> List[float]:
    """
    Maximum of every window of k consecutive values, in O(n).

    Returns [] when k exceeds the number of values.
    """
    if k < 1:
        raise ValueError("window size must be at least 1")
    if k > len(values):
        return []

    result = []
    window: deque = deque()  # indices, values decreasing
    for i, value in enumerate(values):
        if window and window[0] <= i - k:
            window.popleft()
        while window and values[window[-1]] <= value:
            window.pop()
        window.append(i)
        if i >= k - 1:
            result.append(values[window[0]])
    return result


def factorial(n: int) -> int:
    """n! with results memoized across calls."""
    if n <= 1:
        return 1
    if n in _factorial_memo:
        return _factorial_memo[n]

    start = max((m for m in _factorial_memo if m < n), default=1)
    value = _factorial_memo.get(start, 1)
    for m in range(start + 1, n + 1):
        value *= m
        _factorial_memo[m] = value
    return value
