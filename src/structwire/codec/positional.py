"""Positional ("tuple") scheme.

A presence bitmap with one bit per declared field, followed by the values of
the set fields in declaration order. No ids or type bytes are written, so
both ends must share the identical StructDescriptor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .bitpack import BitPacker, BitUnpacker, bitmap_size
from .stream import ByteSink, ByteSource

if TYPE_CHECKING:
    from ..models.record import Record


class TupleScheme:
    """Dense, schema-coupled encoding."""

    name = "tuple"

    def write(self, record: Record, sink: ByteSink) -> None:
        """Validate record, then write the bitmap and the set values.

        Raises:
            ValidationError: If a REQUIRED field is unset
        """
        record.validate()

        packer = BitPacker()
        packer.extend(record.is_set(field) for field in record.descriptor.fields)
        sink.write_bytes(packer.to_bytes())

        for field, value in record.set_fields():
            field.rule.write(sink, value)

    def read(self, source: ByteSource, record: Record) -> None:
        """Replace record's contents with the bitmap-selected values from source.

        Raises:
            DecodeError: If the data is truncated or the bitmap padding is set
            ValidationError: If a REQUIRED field's bit is clear
        """
        record.clear()
        fields = record.descriptor.fields

        unpacker = BitUnpacker(source.read_bytes(bitmap_size(len(fields))), len(fields))
        present = unpacker.read_all()
        unpacker.check_padding()

        for field, is_present in zip(fields, present):
            if is_present:
                record.set(field, field.rule.read(source))

        record.validate()
