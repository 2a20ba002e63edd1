"""
Core functionality for TinyDS.
"""

from tiny_ds.core.bits import (
    all_bits_set,
    apply_bits,
    count_set_bits,
    render_bits,
    single_bit_mask,
)
from tiny_ds.core.hash import (
    SeededHash,
    fnv1a_64,
    key_to_bytes,
    make_hash_functions,
    murmurhash3_32,
)

__all__ = [
    # Bit-index utilities
    "single_bit_mask",
    "apply_bits",
    "all_bits_set",
    "count_set_bits",
    "render_bits",
    # Hashing
    "key_to_bytes",
    "murmurhash3_32",
    "fnv1a_64",
    "SeededHash",
    "make_hash_functions",
]
