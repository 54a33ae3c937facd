"""
Prefix tree for autocomplete.

Each node remembers the last few words inserted through it. Lookups
return that recency buffer as-is: it is a sample of the most recent
completions for the prefix, not an enumeration of every match.
"""

from collections import deque
from typing import Dict, List

DEFAULT_SUGGESTION_LIMIT = 10


class _TrieNode:
    __slots__ = ("children", "is_end_of_word", "suggestions")

    def __init__(self, limit: int):
        self.children: Dict[str, "_TrieNode"] = {}
        self.is_end_of_word = False
        self.suggestions: deque = deque(maxlen=limit)


class Trie:
    """
    Character trie keyed by lower-cased characters.

    Words are stored in the suggestion buffers exactly as inserted;
    only the traversal path is case-folded.
    """

    def __init__(self, suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT):
        if suggestion_limit < 1:
            raise ValueError("suggestion_limit must be at least 1")
        self.suggestion_limit = suggestion_limit
        self._root = _TrieNode(suggestion_limit)

    def insert(self, word: str) -> None:
        current = self._root
        for char in word.lower():
            child = current.children.get(char)
            if child is None:
                child = current.children[char] = _TrieNode(self.suggestion_limit)
            current = child
            current.suggestions.append(word)
        current.is_end_of_word = True

    def _walk(self, prefix: str):
        current = self._root
        for char in prefix.lower():
            current = current.children.get(char)
            if current is None:
                return None
        return current

    def search(self, prefix: str) -> List[str]:
        """Recent words through prefix, oldest first; [] if unknown."""
        node = self._walk(prefix)
        if node is None:
            return []
        return list(node.suggestions)

    def starts_with(self, prefix: str) -> bool:
        return self._walk(prefix) is not None

    def contains(self, word: str) -> bool:
        node = self._walk(word)
        return node is not None and node.is_end_of_word
