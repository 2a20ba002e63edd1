"""
tiny-ds - Lightweight In-Memory Data Structures

tiny-ds is a Python library of small, generic in-memory data structures:
a fixed-capacity Bloom filter for probabilistic set membership and a d-ary
min-heap priority queue with an injected comparator.
"""

__version__ = "0.1.0"

# Import main classes to make them available at the top level
from tiny_ds.algorithms.bloom.base import BloomFilter
from tiny_ds.algorithms.heap import MinHeap, natural_order
from tiny_ds.core.hash import SeededHash, make_hash_functions

__all__ = [
    # Data structures
    "BloomFilter",
    "MinHeap",
    # Collaborators
    "natural_order",
    "SeededHash",
    "make_hash_functions",
]
