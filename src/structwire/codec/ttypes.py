"""Wire type tags and their binary rules.

Every field carries a TypeTag. The tag's byte code appears in tagged field
headers, and the tag's WireRule says how the value is checked in memory,
written, read, and ordered. The tables here are built at import time and never
mutated.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from ..exceptions import DecodeError, SchemaError
from .stream import ByteSink, ByteSource


class TypeTag(enum.IntEnum):
    """Wire type codes (binary protocol numbering)."""

    STOP = 0
    VOID = 1
    BOOL = 2
    BYTE = 3
    DOUBLE = 4
    I16 = 6
    I32 = 8
    I64 = 10
    STRING = 11
    STRUCT = 12
    MAP = 13
    SET = 14
    LIST = 15

    @classmethod
    def parse(cls, value: Any) -> TypeTag:
        """Resolve a tag from a member, a wire code, or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown type tag name: {value!r}") from None
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise ValueError(f"Cannot interpret {value!r} as a type tag")


@dataclass(frozen=True)
class WireRule:
    """Binary and in-memory rule for one scalar tag.

    Attributes:
        tag: Type tag this rule belongs to
        python_type: Name of the accepted Python type (for error messages)
        zero: Value reported for an unset field
        fixed_size: Encoded size in bytes, or None for variable-length values
        coerce: Checks and normalizes a value, raising TypeError/ValueError
        write: Writes a value to a sink
        read: Reads a value from a source
        sort_key: Maps a value to a key with the tag's natural order
    """

    tag: TypeTag
    python_type: str
    zero: Any
    fixed_size: Optional[int]
    coerce: Callable[[Any], Any]
    write: Callable[[ByteSink, Any], None]
    read: Callable[[ByteSource], Any]
    sort_key: Callable[[Any], Any]

    def encoded_size(self, value: Any) -> int:
        """Number of bytes value occupies on the wire."""
        if self.fixed_size is not None:
            return self.fixed_size
        return 4 + len(value.encode("utf-8"))

    def compare(self, left: Any, right: Any) -> int:
        """Three-way comparison in the tag's natural order."""
        a = self.sort_key(left)
        b = self.sort_key(right)
        return (a > b) - (a < b)


def _integer_coercer(bits: int) -> Callable[[Any], int]:
    low = -(1 << (bits - 1))
    high = (1 << (bits - 1)) - 1

    def coerce(value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected int, got {type(value).__name__}")
        if value < low or value > high:
            raise ValueError(f"value {value} out of range for {bits}-bit integer [{low}, {high}]")
        return int(value)

    return coerce


def _coerce_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected bool, got {type(value).__name__}")
    return value


def _coerce_double(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected float, got {type(value).__name__}")
    try:
        return float(value)
    except OverflowError:
        raise ValueError(f"value {value} out of range for double") from None


def _coerce_string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected str, got {type(value).__name__}")
    return str(value)


def _double_key(value: float) -> Tuple[int, float]:
    # NaN sorts above every number and equal to itself
    if math.isnan(value):
        return (1, 0.0)
    return (0, value)


def _identity(value: Any) -> Any:
    return value


_RULES: Dict[TypeTag, WireRule] = {
    rule.tag: rule
    for rule in (
        WireRule(TypeTag.BOOL, "bool", False, 1, _coerce_bool,
                 ByteSink.write_bool, ByteSource.read_bool, _identity),
        WireRule(TypeTag.BYTE, "int", 0, 1, _integer_coercer(8),
                 ByteSink.write_i8, ByteSource.read_i8, _identity),
        WireRule(TypeTag.I16, "int", 0, 2, _integer_coercer(16),
                 ByteSink.write_i16, ByteSource.read_i16, _identity),
        WireRule(TypeTag.I32, "int", 0, 4, _integer_coercer(32),
                 ByteSink.write_i32, ByteSource.read_i32, _identity),
        WireRule(TypeTag.I64, "int", 0, 8, _integer_coercer(64),
                 ByteSink.write_i64, ByteSource.read_i64, _identity),
        WireRule(TypeTag.DOUBLE, "float", 0.0, 8, _coerce_double,
                 ByteSink.write_double, ByteSource.read_double, _double_key),
        WireRule(TypeTag.STRING, "str", "", None, _coerce_string,
                 ByteSink.write_string, ByteSource.read_string, _identity),
    )
}

SCALAR_TAGS = frozenset(_RULES)

# Wire codes that may appear in a tagged stream, STOP included
_KNOWN_CODES = frozenset(int(tag) for tag in TypeTag)


def is_scalar(tag: TypeTag) -> bool:
    """Return True if tag can be used as a field type."""
    return tag in _RULES


def rule_for(tag: TypeTag) -> WireRule:
    """Return the binary rule for a scalar tag.

    Raises:
        SchemaError: If tag is not a scalar type
    """
    try:
        return _RULES[tag]
    except KeyError:
        raise SchemaError(
            f"{TypeTag(tag).name} is not a supported field type "
            f"(supported: {', '.join(t.name for t in _RULES)})"
        ) from None


def tag_from_code(code: int) -> TypeTag:
    """Map a wire byte to its tag.

    Raises:
        DecodeError: If code is not a known type code
    """
    if code not in _KNOWN_CODES:
        raise DecodeError(f"Unknown wire type code {code}")
    return TypeTag(code)
