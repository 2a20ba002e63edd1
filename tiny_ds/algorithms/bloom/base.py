"""
Bloom Filter implementation for TinyDS.

This module provides a fixed-capacity Bloom filter, a space-efficient
probabilistic data structure for set membership testing. A query answers
either "definitely never added" or "possibly added": false positives are
possible, false negatives are not.

The filter is generic over its storage (any mutable byte buffer) and over its
hash-function family (any sequence of callables returning integer digests),
so it can run on pooled or externally owned memory and on deterministic hash
functions for testing.

References:
    - Bloom, B. H. (1970). Space/time trade-offs in hash coding with allowable errors.
      Communications of the ACM, 13(7), 422-426.
"""

import array
import logging
import math
from typing import Any, Dict, Generic, List, MutableSequence, Optional, Sequence, TypeVar

from tiny_ds.core.bits import (
    BITS_PER_BYTE,
    all_bits_set,
    apply_bits,
    count_set_bits,
    render_bits,
)
from tiny_ds.core.hash import HashFunction, make_hash_functions

T = TypeVar("T")  # Type for the items being added

logger = logging.getLogger(__name__)


class BloomFilter(Generic[T]):
    """
    Fixed-size Bloom filter with a configurable number of hash functions.

    Each added item sets one bit per hash function, at position
    `digest mod (storage_size * 8)`. An item whose bits are not all set was
    never added.

    The membership guarantee only holds for items that hash reproducibly:
    the same item must produce the same digest on every call, and equal items
    must produce equal digests. The default hash family encodes numbers,
    strings, bytes and the built-in containers canonically (1, 1.0 and True
    are the same key; set order does not matter). Any other item is hashed
    through repr(), so equal values of such types must have equal reprs.

    Example:
        # 16 bytes (128 bits) of storage and 4 hash functions
        bloom = BloomFilter(capacity_bytes=16, hash_count=4, seed=42)

        bloom.add("apple")

        bloom.never_occurred("apple")   # False, all bits are set
        bloom.never_occurred("orange")  # True unless a false positive
        "apple" in bloom                # True

        bloom.false_positive_probability()
    """

    def __init__(
        self,
        capacity_bytes: int,
        hash_count: int,
        seed: Optional[int] = None,
        algorithm: str = "blake2b",
    ):
        """
        Initialize a new Bloom filter with zeroed storage.

        Args:
            capacity_bytes: Size of the bit array in bytes (capacity_bytes * 8 bits).
            hash_count: Number of hash functions, i.e. bits set per added item.
            seed: Optional master seed for the hash functions. None picks
                  random seeds, so two filters with the same settings answer
                  differently; pass a seed for reproducible filters.
            algorithm: Hash algorithm name (see tiny_ds.core.hash.SeededHash).

        Raises:
            ValueError: If capacity_bytes or hash_count is less than 1.
            TypeError: If capacity_bytes or hash_count is not an integer.
        """
        if not isinstance(capacity_bytes, int) or not isinstance(hash_count, int):
            raise TypeError(
                f"Storage capacity and hash count must be integers, got "
                f"{type(capacity_bytes).__name__} and {type(hash_count).__name__}"
            )
        if capacity_bytes < 1:
            raise ValueError("Storage capacity must be at least 1 byte")
        if hash_count < 1:
            raise ValueError("Number of hash functions must be at least 1")

        storage = array.array("B", bytes(capacity_bytes))
        hash_functions = make_hash_functions(hash_count, seed=seed, algorithm=algorithm)
        self._setup(storage, hash_functions)

    @classmethod
    def from_initialized(
        cls,
        storage: MutableSequence[int],
        hash_functions: Sequence[HashFunction],
    ) -> "BloomFilter[T]":
        """
        Create a Bloom filter over externally supplied storage and hash functions.

        The storage is used in place and becomes owned by the filter: it must
        not be modified through other references while the filter is in use.
        Non-zero bytes in the storage are treated as previously added bits.

        Args:
            storage: Mutable byte buffer (bytearray, array.array("B"), or a
                     writable memoryview of format "B").
            hash_functions: Callables mapping an item to a non-negative integer.

        Returns:
            A new BloomFilter backed by the given storage.

        Raises:
            ValueError: If the storage is empty or no hash functions are given.
            TypeError: If the storage is read-only or a hash function is not callable.
        """
        instance = cls.__new__(cls)
        instance._setup(storage, hash_functions)
        return instance

    @classmethod
    def for_expected_items(
        cls,
        expected_items: int,
        false_positive_rate: float = 0.01,
        seed: Optional[int] = None,
        algorithm: str = "blake2b",
    ) -> "BloomFilter[T]":
        """
        Create a Bloom filter sized for an expected number of items.

        Uses the optimal bit size m = -(n * ln(p)) / (ln(2)^2), rounded up to
        whole bytes, and the optimal hash count k = (m/n) * ln(2).

        Args:
            expected_items: Expected number of unique items.
            false_positive_rate: Target false positive rate (between 0 and 1).
            seed: Optional master seed for the hash functions.
            algorithm: Hash algorithm name.

        Raises:
            ValueError: If expected_items is less than 1 or false_positive_rate
                        is not between 0 and 1.
            TypeError: If expected_items is not an integer.
        """
        if not isinstance(expected_items, int):
            raise TypeError(
                f"Expected number of items must be an integer, got {type(expected_items).__name__}"
            )
        if expected_items < 1:
            raise ValueError("Expected number of items must be at least 1")
        if not (0 < false_positive_rate < 1):
            raise ValueError("False positive rate must be between 0 and 1")

        bit_size = math.ceil(
            -(expected_items * math.log(false_positive_rate)) / (math.log(2) ** 2)
        )
        capacity_bytes = max(1, (bit_size + BITS_PER_BYTE - 1) // BITS_PER_BYTE)
        hash_count = max(
            1,
            math.ceil(
                (capacity_bytes * BITS_PER_BYTE / expected_items) * math.log(2)
            ),
        )

        return cls(capacity_bytes, hash_count, seed=seed, algorithm=algorithm)

    def _setup(
        self, storage: MutableSequence[int], hash_functions: Sequence[HashFunction]
    ) -> None:
        view = memoryview(storage)  # type: ignore[arg-type]
        if view.readonly:
            raise TypeError("Bloom filter storage must be a writable buffer")
        storage_format = view.format
        view.release()
        if storage_format != "B":
            raise TypeError(
                f"Bloom filter storage must hold unsigned bytes, got format '{storage_format}'"
            )

        data_len = len(storage)
        if data_len < 1:
            raise ValueError("Storage capacity must be at least 1 byte")

        hash_functions = list(hash_functions)
        if not hash_functions:
            raise ValueError("Number of hash functions must be at least 1")
        for fn in hash_functions:
            if not callable(fn):
                raise TypeError(f"Hash function {fn!r} is not callable")

        self._data = storage
        self._data_len = data_len
        self._bit_size = data_len * BITS_PER_BYTE
        self._hash_functions: List[HashFunction] = hash_functions
        self._items_added = 0

        logger.debug(
            "Created Bloom filter with %d bytes (%d bits) and %d hash functions",
            self._data_len,
            self._bit_size,
            len(self._hash_functions),
        )

    @property
    def storage_size(self) -> int:
        """Number of bytes in the bit array. The filter holds storage_size * 8 bits."""
        return self._data_len

    @property
    def bit_size(self) -> int:
        """Number of addressable bits in the bit array."""
        return self._bit_size

    @property
    def hash_function_count(self) -> int:
        """Number of hash functions, i.e. bits probed per add or query."""
        return len(self._hash_functions)

    @property
    def items_added(self) -> int:
        """
        Number of add() calls so far.

        The counter is not deduplicated: adding the same item twice counts twice.
        """
        return self._items_added

    def _get_bit_positions(self, item: T) -> List[int]:
        """
        Compute the bit offsets probed for an item, one per hash function.

        The digests are reduced modulo the bit count, not the byte count.
        """
        return [fn(item) % self._bit_size for fn in self._hash_functions]

    def add(self, item: T) -> None:
        """
        Add an item to the Bloom filter.

        Sets the bit chosen by each hash function. Re-adding an item leaves
        the bitmap unchanged but still increments items_added.

        Args:
            item: The item to add to the filter.
        """
        self._items_added += 1
        apply_bits(self._data, self._get_bit_positions(item))

    def never_occurred(self, item: T) -> bool:
        """
        Test whether an item was definitely never added.

        A True result is proof that the item was never added (provided it
        hashes reproducibly). A False result is not proof of membership: the
        item may have been added, or its bits may have been set by other items.

        Args:
            item: The item to test.

        Returns:
            True if any of the item's bits is unset, False if all are set.
        """
        return not all_bits_set(self._data, self._get_bit_positions(item))

    def might_contain(self, item: T) -> bool:
        """Return True if the item may have been added (the negation of never_occurred)."""
        return not self.never_occurred(item)

    def __contains__(self, item: Any) -> bool:
        return self.might_contain(item)

    def fill_ratio(self) -> float:
        """Fraction of bits currently set to 1."""
        return count_set_bits(self._data) / self._bit_size

    def false_positive_probability(self) -> float:
        """
        Estimate the current false positive probability from the fill ratio.

        Uses FPP ≈ (fraction_bits_set)^k, computed from the bitmap at call time.
        It reflects the actual saturation of the filter rather than a target
        rate, and never decreases as items are added.

        Returns:
            Current estimated false positive probability.
        """
        return self.fill_ratio() ** self.hash_function_count

    def is_empty(self) -> bool:
        """Check whether no bit is set."""
        return not any(self._data)

    def estimate_cardinality(self) -> int:
        """
        Estimate the number of unique items added.

        Uses n ≈ -m * ln(1 - X/m) / k where X is the number of set bits,
        m the bit size and k the hash count. The result is capped at
        items_added, which is also returned for a saturated filter.
        """
        set_bits = count_set_bits(self._data)
        if set_bits == 0:
            return 0
        if set_bits >= self._bit_size:
            return self._items_added

        estimate = (
            -self._bit_size
            * math.log(1.0 - set_bits / self._bit_size)
            / self.hash_function_count
        )
        return min(max(0, int(round(estimate))), self._items_added)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the current state of the filter.

        Returns:
            A dictionary with sizing, fill and error information.
        """
        set_bits = count_set_bits(self._data)
        return {
            "type": self.__class__.__name__,
            "storage_bytes": self._data_len,
            "bit_size": self._bit_size,
            "hash_count": self.hash_function_count,
            "items_added": self._items_added,
            "set_bits": set_bits,
            "fill_ratio": set_bits / self._bit_size,
            "current_fpp": (set_bits / self._bit_size) ** self.hash_function_count,
            "estimated_cardinality": self.estimate_cardinality(),
        }

    def to_binary_string(self) -> str:
        """Render the bitmap for debugging, most-significant bit first per byte."""
        return render_bits(self._data)

    def __format__(self, format_spec: str) -> str:
        if format_spec == "b":
            return f"BloomFilter binary {{ {self.to_binary_string()} }}"
        return format(str(self), format_spec)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(storage_size={self._data_len}, "
            f"hash_function_count={self.hash_function_count}, "
            f"items_added={self._items_added})"
        )
