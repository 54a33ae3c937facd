"""
Chained hash table with a fixed number of buckets.

The table never resizes: average bucket length grows linearly with the
number of keys once it exceeds the capacity.
"""

from typing import Generic, List, Optional, Tuple, TypeVar

K = TypeVar("K")
V = TypeVar("V")

DEFAULT_CAPACITY = 16


class HashTable(Generic[K, V]):
    """
    Separate-chaining hash table keyed by the string form of the key.

    Used as the task cache (task id -> Task) and for deduplicating
    search results.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._buckets: List[List[Tuple[K, V]]] = [[] for _ in range(capacity)]
        self._size = 0

    def _hash(self, key: K) -> int:
        """Polynomial rolling hash (base 31) of str(key), kept in range."""
        value = 0
        for char in str(key):
            value = (value * 31 + ord(char)) % self.capacity
        return value

    def _bucket(self, key: K) -> List[Tuple[K, V]]:
        return self._buckets[self._hash(key)]

    def set(self, key: K, value: V) -> None:
        bucket = self._bucket(key)
        for i, (existing, _) in enumerate(bucket):
            if existing == key:
                bucket[i] = (key, value)
                return
        bucket.append((key, value))
        self._size += 1

    def get(self, key: K) -> Optional[V]:
        for existing, value in self._bucket(key):
            if existing == key:
                return value
        return None

    def delete(self, key: K) -> bool:
        bucket = self._bucket(key)
        for i, (existing, _) in enumerate(bucket):
            if existing == key:
                del bucket[i]
                self._size -= 1
                return True
        return False

    def has(self, key: K) -> bool:
        return any(existing == key for existing, _ in self._bucket(key))

    def size(self) -> int:
        return self._size

    def keys(self) -> List[K]:
        """All keys in bucket order (not insertion order)."""
        return [key for bucket in self._buckets for key, _ in bucket]

    def bucket_lengths(self) -> List[int]:
        return [len(bucket) for bucket in self._buckets]

    def __contains__(self, key: K) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        return self._size
