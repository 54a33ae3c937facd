"""
Tests for the search, sort and helper algorithms.
"""

import pytest

from todopro.dsa import algorithms


def by_key(a, b):
    return a[0] - b[0]


class TestSearching:
    """Tests for linear and binary search."""

    def test_linear_search(self):
        assert algorithms.linear_search(["a", "b", "c"], "c") == 2
        assert algorithms.linear_search(["a", "b", "c"], "z") == -1

    def test_binary_search(self):
        items = [1, 3, 5, 7, 9, 11]
        compare = lambda a, b: a - b

        assert algorithms.binary_search(items, 7, compare) == 3
        assert algorithms.binary_search(items, 4, compare) == -1
        assert algorithms.binary_search([], 4, compare) == -1


class TestSorting:
    """Tests for quick sort, merge sort and greedy selection."""

    def test_quick_sort(self):
        items = [5, 3, 8, 1, 9, 2, 5]

        result = algorithms.quick_sort(items, lambda a, b: a - b)

        assert result == [1, 2, 3, 5, 5, 8, 9]
        assert items == [5, 3, 8, 1, 9, 2, 5]

    def test_quick_sort_sorted_input(self):
        """Test already-sorted input, the pivot's worst case."""
        items = list(range(2000))

        assert algorithms.quick_sort(items, lambda a, b: a - b) == items

    def test_merge_sort_is_stable(self):
        items = [(2, "a"), (1, "b"), (2, "c"), (1, "d"), (0, "e")]

        result = algorithms.merge_sort(items, by_key)

        assert result == [(0, "e"), (1, "b"), (1, "d"), (2, "a"), (2, "c")]

    def test_sorts_agree_on_multiset(self):
        items = [(3, "x"), (1, "y"), (3, "z"), (2, "w")]

        quick = algorithms.quick_sort(items, by_key)
        merge = algorithms.merge_sort(items, by_key)

        assert sorted(quick) == sorted(merge) == sorted(items)
        assert [k for k, _ in quick] == [k for k, _ in merge] == [1, 2, 3, 3]

    def test_greedy_selection(self):
        items = [("a", 1), ("b", 5), ("c", 3), ("d", 5)]

        result = algorithms.greedy_selection(items, lambda item: item[1])

        assert [name for name, _ in result] == ["b", "d", "c", "a"]


class TestBits:
    """Tests for the flag bit helpers."""

    def test_bit_helpers(self):
        assert algorithms.set_bit(0, 1) == 2
        assert algorithms.clear_bit(2, 1) == 0
        assert algorithms.check_bit(2, 1) is True
        assert algorithms.check_bit(1, 1) is False
        assert algorithms.toggle_bit(3, 0) == 2

    def test_bits_stay_within_32(self):
        assert algorithms.set_bit(0, 31) == 0x80000000
        assert algorithms.clear_bit(0xFFFFFFFF, 0) == 0xFFFFFFFE


class TestSlidingWindowMax:
    """Tests for sliding_window_max."""

    def test_example(self):
        values = [1, 3, -1, -3, 5, 3, 6, 7]

        assert algorithms.sliding_window_max(values, 3) == [3, 3, 5, 5, 6, 7]

    def test_window_larger_than_input(self):
        assert algorithms.sliding_window_max([1, 2], 3) == []

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            algorithms.sliding_window_max([1, 2], 0)


class TestFactorial:
    """Tests for the memoized factorial."""

    def test_values(self):
        assert algorithms.factorial(0) == 1
        assert algorithms.factorial(5) == 120
        assert algorithms.factorial(10) == 3628800
        assert algorithms.factorial(7) == 5040
