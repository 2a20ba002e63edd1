"""
Bloom Filter implementations for TinyDS.

This module provides a fixed-capacity Bloom Filter for efficient set
membership testing with bounded memory usage.
"""

from tiny_ds.algorithms.bloom.base import BloomFilter

__all__ = [
    "BloomFilter",
]
