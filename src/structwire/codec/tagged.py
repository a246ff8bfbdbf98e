"""Tagged ("standard") scheme.

Every set field is written as a header of one type byte and a big-endian
int16 field id, followed by its value. A single 0x00 byte ends the struct.
Readers skip fields they do not know, or whose wire type differs from the
descriptor, so structs can gain, lose, or retype fields across versions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import DecodeError
from .stream import ByteSink, ByteSource
from .ttypes import TypeTag, is_scalar, rule_for, tag_from_code

if TYPE_CHECKING:
    from ..models.record import Record

logger = logging.getLogger(__name__)

MAX_SKIP_DEPTH = 64


class StandardScheme:
    """Self-describing field-header encoding.

    Example:
        >>> sink = ByteSink()
        >>> StandardScheme().write(record, sink)
        >>> data = sink.getvalue()
    """

    name = "standard"

    def write(self, record: Record, sink: ByteSink) -> None:
        """Validate record and write its set fields in declaration order.

        Raises:
            ValidationError: If a REQUIRED field is unset
        """
        record.validate()

        # Struct begin and end have no bytes of their own in this framing
        for field, value in record.set_fields():
            sink.write_byte(int(field.type))
            sink.write_i16(field.id)
            field.rule.write(sink, value)
        sink.write_byte(int(TypeTag.STOP))

    def read(self, source: ByteSource, record: Record) -> None:
        """Replace record's contents with fields read up to the stop byte.

        Raises:
            DecodeError: If the data is truncated or malformed
            ValidationError: If a REQUIRED field was not on the wire
        """
        record.clear()
        descriptor = record.descriptor

        while True:
            wire_type = tag_from_code(source.read_byte())
            if wire_type is TypeTag.STOP:
                break

            field_id = source.read_i16()
            field = descriptor.field_for_id(field_id)
            if field is None or field.type != wire_type:
                logger.debug(
                    "%s: skipping field id %d of wire type %s at offset %d",
                    descriptor.name,
                    field_id,
                    wire_type.name,
                    source.position,
                )
                skip(source, wire_type)
                continue

            record.set(field, field.rule.read(source))

        record.validate()


def skip(source: ByteSource, wire_type: TypeTag, depth: int = 0) -> None:
    """Consume exactly one value of the given wire type.

    Handles every wire type, including structs and containers, so unknown
    fields of any shape can be stepped over.

    Raises:
        DecodeError: If the value is truncated, malformed, or nested too deeply
    """
    if depth > MAX_SKIP_DEPTH:
        raise DecodeError(f"Nesting deeper than {MAX_SKIP_DEPTH} levels while skipping")

    if is_scalar(wire_type):
        rule = rule_for(wire_type)
        if rule.fixed_size is not None:
            source.skip_bytes(rule.fixed_size)
        else:
            source.skip_bytes(_read_size(source, "string length"))
        return

    if wire_type is TypeTag.STRUCT:
        while True:
            inner = tag_from_code(source.read_byte())
            if inner is TypeTag.STOP:
                return
            source.read_i16()
            skip(source, inner, depth + 1)

    if wire_type is TypeTag.MAP:
        key_type = tag_from_code(source.read_byte())
        value_type = tag_from_code(source.read_byte())
        size = _read_size(source, "map size")
        for _ in range(size):
            skip(source, key_type, depth + 1)
            skip(source, value_type, depth + 1)
        return

    if wire_type in (TypeTag.LIST, TypeTag.SET):
        element_type = tag_from_code(source.read_byte())
        size = _read_size(source, f"{wire_type.name.lower()} size")
        for _ in range(size):
            skip(source, element_type, depth + 1)
        return

    raise DecodeError(f"Cannot skip a value of wire type {wire_type.name}")


def _read_size(source: ByteSource, what: str) -> int:
    size = source.read_i32()
    if size < 0:
        raise DecodeError(f"Negative {what}: {size}")
    return size
