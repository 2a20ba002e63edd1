"""
Data structure implementations for TinyDS.
"""

from tiny_ds.algorithms.bloom import BloomFilter
from tiny_ds.algorithms.heap import MinHeap

__all__ = [
    "BloomFilter",
    "MinHeap",
]
