"""
Tests for the in-memory containers.
"""

import random
from datetime import datetime

import pytest


class TestLinearContainers:
    """Tests for ArrayList, Stack, Queue and LinkedList."""

    def test_array_list_bounds(self):
        from todopro.dsa import ArrayList

        items = ArrayList()
        items.add("a")
        items.add("b")

        assert items.get(1) == "b"
        assert items.get(5) is None
        assert items.remove(-1) is None
        assert items.remove(0) == "a"
        assert items.get_all() == ["b"]

    def test_array_list_sort_returns_copy(self):
        from todopro.dsa import ArrayList

        items = ArrayList()
        for value in (3, 1, 2):
            items.add(value)

        assert items.sort(lambda a, b: b - a) == [3, 2, 1]
        assert items.get_all() == [3, 1, 2]

    def test_stack_lifo(self):
        from todopro.dsa import Stack

        stack = Stack()
        stack.push(1)
        stack.push(2)

        assert stack.peek() == 2
        assert stack.pop() == 2
        assert stack.pop() == 1
        assert stack.pop() is None

    def test_queue_fifo(self):
        from todopro.dsa import Queue

        queue = Queue()
        queue.enqueue("first")
        queue.enqueue("second")

        assert queue.front() == "first"
        assert queue.dequeue() == "first"
        assert queue.dequeue() == "second"
        assert queue.dequeue() is None

    def test_linked_list(self):
        from todopro.dsa import LinkedList

        history = LinkedList()
        history.append("b")
        history.append("c")
        history.prepend("a")

        assert history.to_list() == ["a", "b", "c"]
        assert history.remove("b") is True
        assert history.remove("missing") is False
        assert history.to_list() == ["a", "c"]
        assert history.size() == 2


class TestHashTable:
    """Tests for HashTable."""

    def test_set_get_delete(self):
        from todopro.dsa import HashTable

        table = HashTable(4)
        table.set("task-1", "one")
        table.set("task-1", "uno")
        table.set("task-2", "two")

        assert table.get("task-1") == "uno"
        assert table.size() == 2
        assert "task-2" in table
        assert table.delete("task-2") is True
        assert table.delete("task-2") is False
        assert table.get("task-2") is None

    def test_collisions_chain(self):
        """Test every key survives when the table has one bucket."""
        from todopro.dsa import HashTable

        table = HashTable(1)
        for i in range(20):
            table.set(f"key-{i}", i)

        assert table.bucket_lengths() == [20]
        assert all(table.get(f"key-{i}") == i for i in range(20))

    def test_invalid_capacity(self):
        from todopro.dsa import HashTable

        with pytest.raises(ValueError):
            HashTable(0)


class TestTrees:
    """Tests for BinaryTree and BinarySearchTree."""

    def test_bst_in_order(self):
        from todopro.dsa import BinarySearchTree

        tree = BinarySearchTree(lambda a, b: a - b)
        for value in (5, 2, 8, 1, 9, 5):
            tree.insert(value)

        assert tree.in_order() == [1, 2, 5, 5, 8, 9]
        assert tree.find_min() == 1
        assert tree.find_max() == 9

    def test_binary_tree_keeps_every_node(self):
        from todopro.dsa import BinaryTree

        tree = BinaryTree(rng=random.Random(42))
        for value in range(10):
            tree.insert(value)

        assert tree.size() == 10
        assert sorted(tree.in_order()) == list(range(10))


class TestBinaryHeap:
    """Tests for BinaryHeap with the task importance comparator."""

    def test_extracts_by_priority_then_due_date(self):
        from todopro.dsa import BinaryHeap
        from todopro.models.task import Task, compare_importance

        heap = BinaryHeap(compare_importance)
        heap.insert(Task(title="c5", priority="Critical", due_date=datetime(2025, 1, 5)))
        heap.insert(Task(title="h1", priority="High", due_date=datetime(2025, 1, 1)))
        heap.insert(Task(title="c1", priority="Critical", due_date=datetime(2025, 1, 1)))

        order = [heap.extract_min().title for _ in range(3)]

        assert order == ["c1", "c5", "h1"]
        assert heap.extract_min() is None

    def test_extracts_in_order(self):
        from todopro.dsa import BinaryHeap

        values = random.Random(7).sample(range(100), 30)
        heap = BinaryHeap(lambda a, b: a - b)
        for value in values:
            heap.insert(value)

        assert [heap.extract_min() for _ in values] == sorted(values)

    def test_retain_drops_rejected_and_keeps_order(self):
        from todopro.dsa import BinaryHeap

        heap = BinaryHeap(lambda a, b: a - b)
        for value in [9, 4, 7, 1, 8, 2, 6, 3, 5]:
            heap.insert(value)

        dropped = heap.retain(lambda value: value % 2 == 1)

        assert dropped == 4
        assert heap.size() == 5
        assert [heap.extract_min() for _ in range(5)] == [1, 3, 5, 7, 9]


class TestTrie:
    """Tests for Trie autocomplete."""

    def test_suggestions_by_prefix(self):
        from todopro.dsa import Trie

        trie = Trie()
        trie.insert("urgent")
        trie.insert("Urban")
        trie.insert("home")

        assert trie.search("ur") == ["urgent", "Urban"]
        assert trie.search("UR") == ["urgent", "Urban"]
        assert trie.search("x") == []
        assert trie.contains("home") is True
        assert trie.contains("hom") is False

    def test_buffer_keeps_ten_most_recent(self):
        """Test an eleventh word evicts the oldest suggestion."""
        from todopro.dsa import Trie

        trie = Trie()
        words = [f"task{i}" for i in range(11)]
        for word in words:
            trie.insert(word)

        suggestions = trie.search("task")

        assert len(suggestions) == 10
        assert "task0" not in suggestions
        assert suggestions == words[1:]


class TestGraph:
    """Tests for Graph and DisjointSet."""

    def test_topological_sort_chain(self):
        from todopro.dsa import Graph

        graph = Graph()
        graph.add_edge("b", "c")
        graph.add_edge("a", "b")

        order = graph.topological_sort()

        assert order.index("a") < order.index("b") < order.index("c")

    def test_topological_sort_with_cycle_lists_every_vertex(self):
        from todopro.dsa import Graph

        graph = Graph()
        graph.add_edge("a", "b")
        graph.add_edge("b", "a")
        graph.add_vertex("c")

        assert sorted(graph.topological_sort()) == ["a", "b", "c"]

    def test_remove_vertex_drops_edges(self):
        from todopro.dsa import Graph

        graph = Graph()
        graph.add_edge("a", "b")
        graph.add_edge("b", "c")

        assert graph.remove_vertex("b") is True
        assert graph.neighbors("a") == []
        assert graph.vertices() == ["a", "c"]
        assert graph.remove_vertex("b") is False

    def test_disjoint_set(self):
        from todopro.dsa import DisjointSet

        groups = DisjointSet()
        groups.union("a", "b")
        groups.union("b", "c")

        assert groups.connected("a", "c")
        assert not groups.connected("a", "d")
        assert groups.find("d") == "d"
