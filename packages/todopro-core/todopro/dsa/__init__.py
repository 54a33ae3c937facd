"""
In-memory data structures and algorithms used by the task index.
"""

from todopro.dsa import algorithms
from todopro.dsa.graph import DisjointSet, Graph
from todopro.dsa.hashing import HashTable
from todopro.dsa.heap import BinaryHeap
from todopro.dsa.linear import ArrayList, LinkedList, Queue, Stack
from todopro.dsa.trees import BinarySearchTree, BinaryTree
from todopro.dsa.trie import Trie

__all__ = [
    "algorithms",
    "ArrayList",
    "Stack",
    "Queue",
    "LinkedList",
    "HashTable",
    "BinaryTree",
    "BinarySearchTree",
    "BinaryHeap",
    "Trie",
    "Graph",
    "DisjointSet",
]
