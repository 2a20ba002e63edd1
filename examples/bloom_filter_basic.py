"""
Basic Bloom Filter Demo for TinyDS.

This example demonstrates how to use the Bloom Filter for space-efficient
set membership testing. It highlights its probabilistic nature (false
positives) and its guarantee of no false negatives.
"""

import logging

from tiny_ds.algorithms.bloom.base import BloomFilter


def demonstrate_basic_usage():
    """Demonstrate Bloom Filter initialization, adding, and checking."""
    print("\n=== Basic Bloom Filter Demo ===")

    # 16 bytes (128 bits) of storage, 4 bits set per item, reproducible hashing
    bf = BloomFilter(capacity_bytes=16, hash_count=4, seed=42)

    print("Bloom Filter parameters:")
    print(f"  Storage: {bf.storage_size} bytes ({bf.bit_size} bits)")
    print(f"  Hash functions: {bf.hash_function_count}")

    items_to_add = ["apple", "banana", "cherry", "date", "fig"]
    print("\nAdding items to the filter...")
    for item in items_to_add:
        bf.add(item)
        print(f"  Added '{item}'")

    print("\nChecking membership:")
    print("  (Note: 'never occurred' means DEFINITELY NOT added)")
    for item in items_to_add + ["orange", "pear", "plum"]:
        verdict = "never occurred" if bf.never_occurred(item) else "possibly added"
        print(f"  '{item}': {verdict}")

    print(f"\n{bf:b}")
    print(f"Estimated false positive probability: {bf.false_positive_probability():.4%}")


def demonstrate_saturation():
    """Show how the false positive estimate grows as the bitmap fills up."""
    print("\n=== Saturation Demo ===")

    bf = BloomFilter(capacity_bytes=32, hash_count=3, seed=7)
    for batch in range(5):
        for i in range(batch * 20, (batch + 1) * 20):
            bf.add(f"user-{i}")
        print(
            f"  {bf.items_added:3d} items: fill ratio {bf.fill_ratio():.2f}, "
            f"FPP {bf.false_positive_probability():.4f}, "
            f"estimated unique items {bf.estimate_cardinality()}"
        )


def demonstrate_sizing():
    """Size a filter for an expected load and target error rate."""
    print("\n=== Sizing Demo ===")

    bf = BloomFilter.for_expected_items(10000, 0.01, seed=1)
    print(
        f"  10,000 items at 1% FPP -> {bf.storage_size:,} bytes, "
        f"{bf.hash_function_count} hash functions"
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    demonstrate_basic_usage()
    demonstrate_saturation()
    demonstrate_sizing()
