"""Encoded size calculation utilities.

This module provides functions to calculate the encoded size of records
without actually encoding them.
"""

from __future__ import annotations

from typing import Dict

from ..codec.bitpack import bitmap_size
from ..codec.schema import StructDescriptor
from ..models.record import Record

# Type byte plus int16 field id
FIELD_HEADER_SIZE = 3
STOP_SIZE = 1


def encoded_size(record: Record, scheme: str = "standard") -> int:
    """Calculate the number of bytes encode(record, scheme) would produce.

    Args:
        record: Record to measure
        scheme: "standard" or "tuple"

    Returns:
        Size in bytes

    Raises:
        ValueError: If scheme is unknown

    Example:
        >>> bonk = Bonk(count=7)
        >>> encoded_size(bonk)
        8  # 3-byte header + 4-byte value + stop byte
        >>> encoded_size(bonk, scheme="tuple")
        5  # 1-byte bitmap + 4-byte value
    """
    sizes = field_sizes(record)
    values = sum(sizes.values())

    if scheme == "standard":
        return values + FIELD_HEADER_SIZE * len(sizes) + STOP_SIZE
    if scheme == "tuple":
        return bitmap_size(len(record.descriptor.fields)) + values

    raise ValueError(f"Invalid scheme: {scheme!r}. Must be 'standard' or 'tuple'")


def field_sizes(record: Record) -> Dict[str, int]:
    """Get the encoded value size in bytes of each set field.

    Field headers and the bitmap are not included.

    Example:
        >>> field_sizes(Bonk(message="hello", count=7))
        {'message': 9, 'count': 4}
    """
    return {field.name: field.rule.encoded_size(value) for field, value in record.set_fields()}


def tuple_overhead(descriptor: StructDescriptor) -> int:
    """Bytes the tuple scheme spends on the presence bitmap."""
    return bitmap_size(len(descriptor.fields))


def standard_overhead(descriptor: StructDescriptor, set_fields: int) -> int:
    """Bytes the standard scheme spends on headers and the stop byte."""
    if not 0 <= set_fields <= len(descriptor.fields):
        raise ValueError(
            f"set_fields must be 0-{len(descriptor.fields)} for {descriptor.name}, got {set_fields}"
        )
    return FIELD_HEADER_SIZE * set_fields + STOP_SIZE
