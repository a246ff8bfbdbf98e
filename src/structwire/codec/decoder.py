"""Record decoder.

This module provides the decode() function that turns bytes (or a binary
stream) back into a Record of a given shape.
"""

from __future__ import annotations

from typing import BinaryIO, Type, TypeVar, Union, overload

from ..exceptions import DecodeError
from ..models.record import Record
from .encoder import Scheme, SchemeName, get_scheme
from .schema import StructDescriptor
from .stream import ByteSource, BytesLike

R = TypeVar("R", bound=Record)

DecodeInput = Union[BytesLike, BinaryIO, ByteSource]


@overload
def decode(
    target: Type[R], data: DecodeInput, scheme: Union[SchemeName, Scheme] = ...
) -> R: ...


@overload
def decode(
    target: StructDescriptor, data: DecodeInput, scheme: Union[SchemeName, Scheme] = ...
) -> Record: ...


def decode(
    target: Union[StructDescriptor, Type[Record]],
    data: DecodeInput,
    scheme: Union[SchemeName, Scheme] = "standard",
) -> Record:
    """Decode one record.

    Args:
        target: StructDescriptor, or a Record subclass declaring struct_descriptor
        data: Complete encoded buffer, a binary file object, or a ByteSource
        scheme: "standard" or "tuple"; must match the scheme used to encode

    Returns:
        Decoded record with set flags reflecting what was on the wire

    Raises:
        DecodeError: If data is truncated or malformed, or a complete buffer
            has bytes left over after the record
        ValidationError: If a REQUIRED field was absent

    Examples:
        ```python
        data = encode(bonk)
        decoded = decode(Bonk, data)

        # Descriptor-only shapes
        decoded = decode(bonk_descriptor, data)

        # Several records back to back on one stream
        with open("records.bin", "rb") as fh:
            first = decode(Bonk, fh)
            second = decode(Bonk, fh)
        ```
    """
    if isinstance(target, StructDescriptor):
        record = Record(target)
    elif isinstance(target, type) and issubclass(target, Record):
        record = target()
    else:
        raise TypeError(
            f"decode() target must be a StructDescriptor or Record subclass, "
            f"got {target!r}"
        )

    whole_buffer = isinstance(data, (bytes, bytearray, memoryview))
    source = data if isinstance(data, ByteSource) else ByteSource(data)

    get_scheme(scheme).read(source, record)

    if whole_buffer:
        leftover = source.remaining()
        if leftover:
            raise DecodeError(
                f"{leftover} trailing bytes after {record.descriptor.name} record "
                f"at offset {source.position}"
            )

    return record
