"""
Bit-index utilities for TinyDS.

Bits are addressed linearly across a byte buffer, most-significant bit first
within each byte: bit 0 is the 0x80 bit of byte 0, bit 7 is the 0x01 bit of
byte 0 and bit 8 is the 0x80 bit of byte 1.

The helpers accept any buffer that can be indexed per byte and yields ints,
such as bytes, bytearray, array.array("B") or a memoryview of format "B".
Writing helpers additionally require the buffer to be mutable.
"""

from typing import Iterable, MutableSequence, Sequence, Tuple

BITS_PER_BYTE = 8


def single_bit_mask(bit_index: int) -> Tuple[int, int]:
    """
    Translate a linear bit offset into a byte index and a single-bit mask.

    Args:
        bit_index: Global bit offset (0-indexed, MSB first within each byte).

    Returns:
        A tuple (byte_index, mask) where mask has exactly one bit set.

    Raises:
        ValueError: If bit_index is negative.
    """
    if bit_index < 0:
        raise ValueError(f"Bit index must be non-negative, got {bit_index}")

    byte_index = bit_index // BITS_PER_BYTE
    offset = bit_index - byte_index * BITS_PER_BYTE
    assert 0 <= offset < BITS_PER_BYTE

    return byte_index, 0x80 >> offset


def _checked_mask(bit_index: int, length: int) -> Tuple[int, int]:
    byte_index, mask = single_bit_mask(bit_index)
    if byte_index >= length:
        raise IndexError(
            f"Bit {bit_index} is outside a buffer of {length} bytes "
            f"({length * BITS_PER_BYTE} bits)"
        )
    return byte_index, mask


def apply_bits(buffer: MutableSequence[int], bit_indices: Iterable[int]) -> None:
    """
    Set every bit named in bit_indices within buffer.

    Args:
        buffer: Mutable byte buffer to update in place.
        bit_indices: Linear bit offsets to set.

    Raises:
        IndexError: If a bit offset falls outside the buffer. This signals
                    a hash value inconsistent with the buffer's bit length.
    """
    length = len(buffer)
    for bit_index in bit_indices:
        byte_index, mask = _checked_mask(bit_index, length)
        buffer[byte_index] |= mask


def all_bits_set(buffer: Sequence[int], bit_indices: Iterable[int]) -> bool:
    """
    Check whether every bit named in bit_indices is set in buffer.

    Stops at the first unset bit.

    Raises:
        IndexError: If a bit offset falls outside the buffer.
    """
    length = len(buffer)
    for bit_index in bit_indices:
        byte_index, mask = _checked_mask(bit_index, length)
        if buffer[byte_index] & mask != mask:
            return False
    return True


def count_set_bits(buffer: Iterable[int]) -> int:
    """Count the bits set to 1 in a byte buffer."""
    return sum(bin(byte).count("1") for byte in buffer)


def render_bits(buffer: Iterable[int]) -> str:
    """
    Render a byte buffer as a string of '0' and '1' characters.

    Each byte contributes eight characters, most-significant bit first, so
    character i of the result corresponds to bit offset i.
    """
    return "".join(format(byte, "08b") for byte in buffer)
