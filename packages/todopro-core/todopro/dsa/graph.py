"""
Directed graph and disjoint-set structures for task relationships.
"""

from typing import Dict, Generic, Hashable, List, TypeVar

T = TypeVar("T", bound=Hashable)


class Graph(Generic[T]):
    """
    Directed graph stored as an adjacency list.

    Edges point from a prerequisite to the task that depends on it.
    """

    def __init__(self):
        self._adjacency: Dict[T, List[T]] = {}

    def add_vertex(self, vertex: T) -> None:
        if vertex not in self._adjacency:
            self._adjacency[vertex] = []

    def add_edge(self, source: T, target: T) -> None:
        """Add source -> target, creating missing vertices."""
        self.add_vertex(source)
        self.add_vertex(target)
        self._adjacency[source].append(target)

    def remove_vertex(self, vertex: T) -> bool:
        """Remove a vertex together with every edge into or out of it."""
        if vertex not in self._adjacency:
            return False
        del self._adjacency[vertex]
        for targets in self._adjacency.values():
            targets[:] = [t for t in targets if t != vertex]
        return True

    def neighbors(self, vertex: T) -> List[T]:
        return list(self._adjacency.get(vertex, []))

    def vertices(self) -> List[T]:
        return list(self._adjacency)

    def has_vertex(self, vertex: T) -> bool:
        return vertex in self._adjacency

    def topological_sort(self) -> List[T]:
        """
        Depth-first postorder, reversed.

        Cycles are not detected: a cyclic graph still yields every vertex
        once, but some edges inside the cycle will point backwards.
        """
        visited = set()
        postorder: List[T] = []

        for start in self._adjacency:
            if start in visited:
                continue
            visited.add(start)
            stack = [(start, iter(self._adjacency[start]))]
            while stack:
                vertex, pending = stack[-1]
                for neighbor in pending:
                    if neighbor not in visited:
                        visited.add(neighbor)
                        stack.append((neighbor, iter(self._adjacency[neighbor])))
                        break
                else:
                    stack.pop()
                    postorder.append(vertex)

        postorder.reverse()
        return postorder

    def __len__(self) -> int:
        return len(self._adjacency)


class DisjointSet(Generic[T]):
    """
    Union-find with union by rank and path compression.

    find() on an element never seen before creates a singleton set for it.
    """

    def __init__(self):
        self._parent: Dict[T, T] = {}
        self._rank: Dict[T, int] = {}

    def make_set(self, item: T) -> None:
        self._parent[item] = item
        self._rank[item] = 0

    def find(self, item: T) -> T:
        if item not in self._parent:
            self.make_set(item)

        root = item
        while self._parent[root] != root:
            root = self._parent[root]

        # Point every node on the path directly at the root
        while self._parent[item] != root:
            self._parent[item], item = root, self._parent[item]
        return root

    def union(self, first: T, second: T) -> None:
        root1 = self.find(first)
        root2 = self.find(second)
        if root1 == root2:
            return

        rank1 = self._rank[root1]
        rank2 = self._rank[root2]
        if rank1 < rank2:
            self._parent[root1] = root2
        elif rank1 > rank2:
            self._parent[root2] = root1
        else:
            self._parent[root2] = root1
            self._rank[root1] = rank1 + 1

    def connected(self, first: T, second: T) -> bool:
        return self.find(first) == self.find(second)
