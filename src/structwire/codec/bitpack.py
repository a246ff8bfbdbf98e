"""Presence bitmap packing.

The tuple scheme prefixes every record with one bit per field. Bits are
packed most significant first: bit i lives in byte i // 8 at position
7 - i % 8, and the final byte is padded with zero bits.
"""

from __future__ import annotations

from typing import Iterable, List

from ..exceptions import DecodeError


def bitmap_size(num_bits: int) -> int:
    """Number of bytes needed for num_bits bits."""
    return (num_bits + 7) // 8


class BitPacker:
    """Packs booleans into an MSB-first byte string.

    Example:
        >>> packer = BitPacker()
        >>> packer.write_bool(False)
        >>> packer.write_bool(True)
        >>> packer.to_bytes()
        b'@'
    """

    def __init__(self) -> None:
        self._bits: List[bool] = []

    def write_bool(self, value: bool) -> None:
        self._bits.append(bool(value))

    def extend(self, values: Iterable[bool]) -> None:
        for value in values:
            self.write_bool(value)

    def bit_length(self) -> int:
        return len(self._bits)

    def to_bytes(self) -> bytes:
        """Convert the bits to bytes, zero-padding the last byte on the LSB side."""
        result = bytearray(bitmap_size(len(self._bits)))
        for index, bit in enumerate(self._bits):
            if bit:
                result[index // 8] |= 0x80 >> (index % 8)
        return bytes(result)


class BitUnpacker:
    """Reads booleans back out of an MSB-first byte string.

    Args:
        data: Packed bitmap bytes
        num_bits: Number of meaningful bits; must fit exactly in data
    """

    def __init__(self, data: bytes, num_bits: int) -> None:
        if len(data) != bitmap_size(num_bits):
            raise DecodeError(
                f"Bitmap size mismatch: {num_bits} bits need {bitmap_size(num_bits)} bytes, "
                f"got {len(data)}"
            )
        self._data = data
        self._num_bits = num_bits
        self._position = 0

    def read_bool(self) -> bool:
        """Read the next bit.

        Raises:
            IndexError: If all meaningful bits have been read
        """
        if self._position >= self._num_bits:
            raise IndexError("Attempted to read past end of bitmap")
        index = self._position
        self._position += 1
        return bool(self._data[index // 8] & (0x80 >> (index % 8)))

    def read_all(self) -> List[bool]:
        """Read every remaining meaningful bit."""
        return [self.read_bool() for _ in range(self._num_bits - self._position)]

    def check_padding(self) -> None:
        """Verify the padding bits after the last meaningful bit are zero.

        Raises:
            DecodeError: If any padding bit is set
        """
        for index in range(self._num_bits, len(self._data) * 8):
            if self._data[index // 8] & (0x80 >> (index % 8)):
                raise DecodeError(
                    f"Bitmap size mismatch: padding bit {index} is set "
                    f"but the struct has only {self._num_bits} fields"
                )
