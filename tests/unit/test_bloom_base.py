"""
Unit tests for the Bloom Filter implementation.
"""

import array
import math
import random
import unittest

from tiny_ds.algorithms.bloom.base import BloomFilter
from tiny_ds.core.bits import apply_bits


def identity_hash(item):
    return item


def triple_hash(item):
    return item * 3


class TestBloomFilter(unittest.TestCase):
    """Test cases for Bloom Filter."""

    def test_init(self):
        """Test initialization with valid and invalid parameters."""
        bf = BloomFilter(capacity_bytes=16, hash_count=4)
        self.assertEqual(bf.storage_size, 16)
        self.assertEqual(bf.bit_size, 128)
        self.assertEqual(bf.hash_function_count, 4)
        self.assertEqual(bf.items_added, 0)
        self.assertTrue(bf.is_empty())

        with self.assertRaises(ValueError):
            BloomFilter(capacity_bytes=0, hash_count=4)
        with self.assertRaises(ValueError):
            BloomFilter(capacity_bytes=4, hash_count=0)
        with self.assertRaises(ValueError):
            BloomFilter(capacity_bytes=-1, hash_count=1)
        with self.assertRaises(ValueError):
            BloomFilter(capacity_bytes=4, hash_count=2, algorithm="sha1")
        with self.assertRaises(TypeError):
            BloomFilter(capacity_bytes=4.0, hash_count=2)
        with self.assertRaises(TypeError):
            BloomFilter(capacity_bytes=4, hash_count=2.0)

    def test_basic_scenario(self):
        """4 bytes, 4 hash functions: fresh filter rejects everything, added items are found."""
        bf = BloomFilter(capacity_bytes=4, hash_count=4)

        self.assertTrue(all(bf.never_occurred(i) for i in range(100)))

        bf.add(2)
        bf.add(4)

        self.assertFalse(bf.never_occurred(2))
        self.assertFalse(bf.never_occurred(4))
        self.assertTrue(bf.might_contain(2))
        self.assertIn(4, bf)
        self.assertEqual(bf.items_added, 2)

    def test_no_false_negatives(self):
        """Test that false negatives never occur, even past saturation."""
        bf = BloomFilter.for_expected_items(1000, 0.01, seed=11)

        test_items = [f"item-{i}" for i in range(2000)]
        for item in test_items:
            bf.add(item)

        missing = [item for item in test_items if bf.never_occurred(item)]
        self.assertEqual(missing, [], "False negatives detected!")

    def test_different_data_types(self):
        """Test that the filter works with numbers, strings, bytes, containers and None."""
        bf = BloomFilter(capacity_bytes=64, hash_count=3, seed=1)
        items = [
            "string",
            123,
            3.14,
            (1, 2, 3),
            {"key": "value", "num": 1},
            [1, 2, 3, 4],
            True,
            None,
            b"byte_string",
        ]

        for item in items:
            bf.add(item)

        for item in items:
            self.assertFalse(
                bf.never_occurred(item), f"Item {item} (type {type(item)}) not found."
            )

    def test_equal_items_are_found(self):
        """An item that compares equal to an added item is never reported absent."""
        bf = BloomFilter(capacity_bytes=64, hash_count=4, seed=8)
        bf.add(1)
        bf.add(frozenset([8, 0]))
        bf.add({"a": 1, "b": 2})

        self.assertFalse(bf.never_occurred(1.0))
        self.assertFalse(bf.never_occurred(True))
        self.assertFalse(bf.never_occurred(frozenset([0, 8])))
        self.assertFalse(bf.never_occurred({0, 8}))
        self.assertFalse(bf.never_occurred(dict([("b", 2), ("a", 1)])))

    def test_items_of_different_types_set_different_bits(self):
        """1 and "1" (or True and "True") are different items."""
        for number, text in [(1, "1"), (True, "True")]:
            numeric = BloomFilter(capacity_bytes=1024, hash_count=3, seed=21)
            textual = BloomFilter(capacity_bytes=1024, hash_count=3, seed=21)
            numeric.add(number)
            textual.add(text)

            self.assertNotEqual(numeric.to_binary_string(), textual.to_binary_string())
            self.assertTrue(numeric.never_occurred(text))

    def test_items_added_counts_duplicates(self):
        bf = BloomFilter(capacity_bytes=8, hash_count=2, seed=3)
        bf.add("dup")
        snapshot = bf.to_binary_string()
        bf.add("dup")

        self.assertEqual(bf.items_added, 2)
        self.assertEqual(bf.to_binary_string(), snapshot)

    def test_seeded_filters_are_reproducible(self):
        first = BloomFilter(capacity_bytes=32, hash_count=3, seed=2024)
        second = BloomFilter(capacity_bytes=32, hash_count=3, seed=2024)
        other = BloomFilter(capacity_bytes=32, hash_count=3, seed=2025)

        for i in range(20):
            first.add(i)
            second.add(i)
            other.add(i)

        self.assertEqual(first.to_binary_string(), second.to_binary_string())
        self.assertNotEqual(first.to_binary_string(), other.to_binary_string())

    def test_repr(self):
        bf = BloomFilter(capacity_bytes=4, hash_count=2)
        self.assertEqual(
            repr(bf),
            "BloomFilter(storage_size=4, hash_function_count=2, items_added=0)",
        )


class TestBloomFilterStorage(unittest.TestCase):
    """Test cases for externally supplied storage and hash functions."""

    def test_deterministic_hash_functions(self):
        storage = bytearray(2)
        bf = BloomFilter.from_initialized(storage, [identity_hash, triple_hash])

        self.assertEqual(bf.storage_size, 2)
        self.assertEqual(bf.hash_function_count, 2)

        bf.add(1)  # bits 1 and 3
        self.assertEqual(list(storage), [0x50, 0x00])
        self.assertFalse(bf.never_occurred(1))
        self.assertTrue(bf.never_occurred(2))  # bits 2 and 6

        bf.add(5)  # bits 5 and 15
        self.assertEqual(list(storage), [0x54, 0x01])

    def test_digest_reduced_modulo_bit_count(self):
        """Digests wrap at storage_size * 8 bits, not at storage_size bytes."""
        storage = bytearray(2)
        bf = BloomFilter.from_initialized(storage, [identity_hash])

        bf.add(16 + 9)
        self.assertEqual(list(storage), [0x00, 0x40])
        bf.add(2**64 + 3)
        self.assertEqual(list(storage), [0x10, 0x40])

    def test_storage_types(self):
        buffers = [
            bytearray(4),
            array.array("B", bytes(4)),
            memoryview(bytearray(4)),
        ]
        for buffer in buffers:
            bf = BloomFilter.from_initialized(buffer, [identity_hash])
            bf.add(0)
            self.assertEqual(buffer[0], 0x80, type(buffer).__name__)
            self.assertFalse(bf.never_occurred(0))

    def test_prefilled_storage(self):
        bf = BloomFilter.from_initialized(bytearray([0xFF]), [identity_hash])
        self.assertFalse(bf.is_empty())
        self.assertTrue(all(not bf.never_occurred(i) for i in range(8)))

    def test_invalid_storage(self):
        with self.assertRaises(ValueError):
            BloomFilter.from_initialized(bytearray(), [identity_hash])
        with self.assertRaises(TypeError):
            BloomFilter.from_initialized(bytes(4), [identity_hash])
        with self.assertRaises(TypeError):
            BloomFilter.from_initialized(array.array("b", bytes(4)), [identity_hash])
        with self.assertRaises(TypeError):
            BloomFilter.from_initialized([0, 0, 0, 0], [identity_hash])

    def test_invalid_hash_functions(self):
        with self.assertRaises(ValueError):
            BloomFilter.from_initialized(bytearray(4), [])
        with self.assertRaises(TypeError):
            BloomFilter.from_initialized(bytearray(4), [identity_hash, 42])


class TestBloomFilterMaskStrategy(unittest.TestCase):
    """The per-bit probe must agree with combining a full mask buffer via AND/OR."""

    def _mask_for(self, bf, item):
        mask = bytearray(bf.storage_size)
        apply_bits(mask, bf._get_bit_positions(item))
        return mask

    def test_add_matches_or_of_masks(self):
        rng = random.Random(17)
        for capacity, hashes in [(1, 1), (4, 4), (16, 3), (64, 7)]:
            bf = BloomFilter(capacity_bytes=capacity, hash_count=hashes, seed=capacity)
            expected = bytearray(capacity)

            for _ in range(40):
                item = rng.randrange(10**6)
                bf.add(item)
                for i, byte in enumerate(self._mask_for(bf, item)):
                    expected[i] |= byte

            self.assertEqual(bytes(bf._data), bytes(expected))

    def test_never_occurred_matches_and_of_masks(self):
        rng = random.Random(23)
        for capacity, hashes in [(2, 2), (4, 4), (16, 5)]:
            bf = BloomFilter(capacity_bytes=capacity, hash_count=hashes, seed=hashes)
            for _ in range(capacity * 2):
                bf.add(rng.random())

            for _ in range(300):
                item = rng.randrange(10**6)
                mask = self._mask_for(bf, item)
                by_mask = any(
                    stored & m != m for stored, m in zip(bf._data, mask)
                )
                self.assertEqual(bf.never_occurred(item), by_mask, item)


class TestBloomFilterEstimates(unittest.TestCase):
    """Test cases for false positive and cardinality estimates."""

    def test_false_positive_probability_formula(self):
        bf = BloomFilter.from_initialized(
            bytearray([0xF0, 0x00]), [identity_hash, triple_hash]
        )
        self.assertAlmostEqual(bf.fill_ratio(), 0.25)
        self.assertAlmostEqual(bf.false_positive_probability(), 0.0625)

        full = BloomFilter.from_initialized(bytearray([0xFF]), [identity_hash])
        self.assertEqual(full.false_positive_probability(), 1.0)

        empty = BloomFilter(capacity_bytes=8, hash_count=3)
        self.assertEqual(empty.false_positive_probability(), 0.0)

    def test_false_positive_probability_is_monotonic(self):
        bf = BloomFilter(capacity_bytes=64, hash_count=3, seed=5)
        previous = bf.false_positive_probability()

        for i in range(300):
            bf.add(f"item-{i}")
            current = bf.false_positive_probability()
            self.assertGreaterEqual(current, previous)
            previous = current

        self.assertGreater(previous, 0.0)

    def test_false_positive_probability_near_target(self):
        n = 1000
        target_fpp = 0.01
        bf = BloomFilter.for_expected_items(n, target_fpp, seed=8)

        for i in range(200):
            bf.add(f"item-{i}")
        partial = bf.false_positive_probability()
        self.assertGreater(partial, 0)
        self.assertLess(partial, target_fpp)

        for i in range(200, n):
            bf.add(f"item-{i}")
        filled = bf.false_positive_probability()
        self.assertGreater(filled, partial)
        self.assertAlmostEqual(filled, target_fpp, delta=target_fpp * 0.5)

    def test_observed_false_positives(self):
        """The fill-ratio estimate should track the observed false positive rate."""
        bf = BloomFilter.for_expected_items(1000, 0.1, seed=3)
        for i in range(1000):
            bf.add(f"item-{i}")

        n_tests = 10000
        false_positives = sum(
            1 for i in range(n_tests) if not bf.never_occurred(f"other-{i}")
        )
        observed = false_positives / n_tests
        self.assertAlmostEqual(observed, bf.false_positive_probability(), delta=0.03)

    def test_for_expected_items(self):
        bf = BloomFilter.for_expected_items(1000, 0.01)
        # m = -(n * ln(p)) / (ln(2)^2) ≈ 9585.06 bits -> 1199 bytes, k ≈ 6.65 -> 7
        self.assertEqual(bf.storage_size, 1199)
        self.assertEqual(bf.hash_function_count, 7)

        with self.assertRaises(ValueError):
            BloomFilter.for_expected_items(0)
        with self.assertRaises(ValueError):
            BloomFilter.for_expected_items(100, 0)
        with self.assertRaises(ValueError):
            BloomFilter.for_expected_items(100, 1.0)
        with self.assertRaises(TypeError):
            BloomFilter.for_expected_items(100.5)

    def test_estimate_cardinality(self):
        bf = BloomFilter.for_expected_items(1000, 0.01, seed=4)
        self.assertEqual(bf.estimate_cardinality(), 0)

        for i in range(500):
            bf.add(f"item-{i}")
        self.assertAlmostEqual(bf.estimate_cardinality(), 500, delta=500 * 0.15)

        saturated = BloomFilter.from_initialized(bytearray(1), [identity_hash])
        for i in range(8):
            saturated.add(i)
        saturated.add(0)
        self.assertEqual(saturated.estimate_cardinality(), 9)

    def test_get_stats(self):
        bf = BloomFilter.from_initialized(bytearray(2), [identity_hash, triple_hash])
        bf.add(1)
        stats = bf.get_stats()

        self.assertEqual(stats["type"], "BloomFilter")
        self.assertEqual(stats["storage_bytes"], 2)
        self.assertEqual(stats["bit_size"], 16)
        self.assertEqual(stats["hash_count"], 2)
        self.assertEqual(stats["items_added"], 1)
        self.assertEqual(stats["set_bits"], 2)
        self.assertAlmostEqual(stats["fill_ratio"], 0.125)
        self.assertAlmostEqual(stats["current_fpp"], math.pow(0.125, 2))


class TestBloomFilterRendering(unittest.TestCase):
    """Test cases for the debugging bit-string."""

    def test_binary_string(self):
        bf = BloomFilter.from_initialized(bytearray([0x80, 0x01]), [identity_hash])
        self.assertEqual(bf.to_binary_string(), "1000000000000001")
        self.assertEqual(format(bf, "b"), "BloomFilter binary { 1000000000000001 }")
        self.assertEqual(f"{bf:b}", "BloomFilter binary { 1000000000000001 }")

    def test_default_format(self):
        bf = BloomFilter(capacity_bytes=1, hash_count=1)
        self.assertEqual(format(bf), repr(bf))


if __name__ == "__main__":
    unittest.main()
