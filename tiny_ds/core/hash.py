"""
Hashing functions for TinyDS.

This module provides the hash-function family consumed by the Bloom filter.
Every function maps an arbitrary key to a reproducible unsigned integer digest,
and SeededHash instances with different seeds behave as independent hash
functions. These functions are built for distribution quality, not
cryptographic security.
"""

import fractions
import hashlib
import numbers
import random
from typing import Any, Callable, Iterable, List, Optional

HashFunction = Callable[[Any], int]

MASK_32 = 0xFFFFFFFF
MASK_64 = 0xFFFFFFFFFFFFFFFF

ALGORITHMS = ("blake2b", "fnv1a", "murmur3")


def _join(parts: Iterable[bytes]) -> bytes:
    """Concatenate encodings with 8-byte length prefixes so boundaries are unambiguous."""
    return b"".join(len(part).to_bytes(8, "big") + part for part in parts)


def _encode_number(value: Any) -> bytes:
    if isinstance(value, complex):
        if value.imag != 0:
            return b"c" + _join([_encode_number(value.real), _encode_number(value.imag)])
        value = value.real

    try:
        exact = fractions.Fraction(value)
    except (OverflowError, ValueError):
        # Infinities and NaN have no exact ratio
        return b"n" + repr(float(value)).encode("ascii")
    except TypeError:
        return b"r" + repr(value).encode("utf-8")

    return b"n" + f"{exact.numerator}/{exact.denominator}".encode("ascii")


def key_to_bytes(key: Any) -> bytes:
    """
    Convert a key to the canonical bytes that get hashed.

    The encoding starts with a type tag, so 1 and "1" never share bytes, and
    values that compare equal encode identically:

    - numbers (bool, int, float, complex, Decimal, Fraction, and anything
      registered as numbers.Number) encode their exact value, so 1, 1.0,
      True and Decimal("1") are the same key
    - str encodes as UTF-8, bytes-like objects as their raw bytes
    - tuples and lists encode their elements in order
    - sets and frozensets encode their elements sorted, so iteration order
      does not matter, and dicts encode their sorted key/value pairs

    Any other object is encoded through repr(), so such keys must have a
    repr that is stable across calls and equal for equal values.
    """
    if isinstance(key, str):
        return b"s" + key.encode("utf-8")
    if isinstance(key, (bytes, bytearray, memoryview)):
        return b"b" + bytes(key)
    if isinstance(key, numbers.Number):
        return _encode_number(key)
    if isinstance(key, tuple):
        return b"t" + _join(key_to_bytes(item) for item in key)
    if isinstance(key, list):
        return b"l" + _join(key_to_bytes(item) for item in key)
    if isinstance(key, (set, frozenset)):
        return b"f" + _join(sorted(key_to_bytes(item) for item in key))
    if isinstance(key, dict):
        return b"d" + _join(
            sorted(_join([key_to_bytes(k), key_to_bytes(v)]) for k, v in key.items())
        )
    return b"r" + repr(key).encode("utf-8")


def _raw_bytes(key: Any) -> bytes:
    # Strings and bytes hash as-is so the raw functions match published vectors
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    return key_to_bytes(key)


def murmurhash3_32(key: Any, seed: int = 0) -> int:
    """
    Pure Python implementation of MurmurHash3 (32-bit variant).

    Args:
        key: The key to hash (will be converted to bytes if not already)
        seed: Optional seed for the hash

    Returns:
        32-bit hash value
    """
    key_bytes = _raw_bytes(key)
    length = len(key_bytes)

    c1 = 0xCC9E2D51
    c2 = 0x1B873593

    h = seed & MASK_32

    nblocks = length // 4
    for i in range(nblocks):
        k = int.from_bytes(key_bytes[i * 4 : i * 4 + 4], "little")

        k = (k * c1) & MASK_32
        k = ((k << 15) | (k >> 17)) & MASK_32  # rotl32(k, 15)
        k = (k * c2) & MASK_32

        h ^= k
        h = ((h << 13) | (h >> 19)) & MASK_32  # rotl32(h, 13)
        h = (h * 5 + 0xE6546B64) & MASK_32

    # Tail (0-3 bytes)
    k = 0
    idx = nblocks * 4
    if length & 3 >= 3:
        k ^= key_bytes[idx + 2] << 16
    if length & 3 >= 2:
        k ^= key_bytes[idx + 1] << 8
    if length & 3 >= 1:
        k ^= key_bytes[idx]
        k = (k * c1) & MASK_32
        k = ((k << 15) | (k >> 17)) & MASK_32
        k = (k * c2) & MASK_32
        h ^= k

    # Finalization mix
    h ^= length
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & MASK_32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & MASK_32
    h ^= h >> 16

    return h


def fnv1a_64(key: Any, seed: int = 0) -> int:
    """
    Pure Python implementation of FNV-1a hash (64-bit variant).

    Args:
        key: The key to hash (will be converted to bytes if not already)
        seed: Optional seed value (modifies the initial hash value)

    Returns:
        64-bit hash value
    """
    fnv_prime = 0x100000001B3
    fnv_offset_basis = 0xCBF29CE484222325

    h = (fnv_offset_basis ^ seed) & MASK_64
    for byte in _raw_bytes(key):
        h ^= byte
        h = (h * fnv_prime) & MASK_64

    return h


class SeededHash:
    """
    A single member of a hash-function family.

    Calling the instance returns a 64-bit digest of the key. The digest depends
    only on the key, the seed and the algorithm, so the same key always hashes
    to the same value while instances with different seeds act as independent
    hash functions.

    Supported algorithms:
        - "blake2b": hashlib.blake2b keyed with the seed (default)
        - "fnv1a": 64-bit FNV-1a with the seed folded into the offset basis
        - "murmur3": two 32-bit MurmurHash3 passes concatenated into 64 bits
    """

    __slots__ = ["seed", "algorithm"]

    def __init__(self, seed: int, algorithm: str = "blake2b"):
        if algorithm not in ALGORITHMS:
            raise ValueError(
                f"Unknown hash algorithm '{algorithm}', expected one of {ALGORITHMS}"
            )
        self.seed = seed & MASK_64
        self.algorithm = algorithm

    def __call__(self, key: Any) -> int:
        data = key_to_bytes(key)
        if self.algorithm == "fnv1a":
            return self._fnv1a(data)
        if self.algorithm == "murmur3":
            return self._murmur3(data)
        return self._blake2b(data)

    def _blake2b(self, data: bytes) -> int:
        h = hashlib.blake2b(data, digest_size=8, key=self.seed.to_bytes(8, "little"))
        return int.from_bytes(h.digest(), "little")

    def _fnv1a(self, data: bytes) -> int:
        return fnv1a_64(data, self.seed)

    def _murmur3(self, data: bytes) -> int:
        high = murmurhash3_32(data, self.seed & MASK_32)
        low = murmurhash3_32(data, (self.seed >> 32) ^ 0x9747B28C)
        return (high << 32) | low

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SeededHash):
            return NotImplemented
        return self.seed == other.seed and self.algorithm == other.algorithm

    def __hash__(self) -> int:
        return hash((self.seed, self.algorithm))

    def __repr__(self) -> str:
        return f"SeededHash(seed={self.seed:#018x}, algorithm='{self.algorithm}')"


def make_hash_functions(
    count: int, seed: Optional[int] = None, algorithm: str = "blake2b"
) -> List[SeededHash]:
    """
    Build a family of independent hash functions.

    Args:
        count: Number of hash functions to create.
        seed: Master seed. When given, the per-function seeds are derived from
              it deterministically, so two families built with the same seed
              hash identically across runs. When None, seeds are drawn from
              the operating system's random source and every family differs.
        algorithm: Digest algorithm for every function (see SeededHash).

    Returns:
        A list of `count` SeededHash instances with pairwise distinct seeds.

    Raises:
        ValueError: If count is less than 1 or the algorithm is unknown.
    """
    if count < 1:
        raise ValueError("Number of hash functions must be at least 1")

    rng = random.Random(seed) if seed is not None else random.SystemRandom()

    seeds: List[int] = []
    while len(seeds) < count:
        candidate = rng.getrandbits(64)
        if candidate not in seeds:
            seeds.append(candidate)

    return [SeededHash(s, algorithm) for s in seeds]
