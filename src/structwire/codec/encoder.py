"""Record encoder and scheme registry.

This module provides the encode() function and the table of wire schemes
shared by encode(), decode() and Record.read()/Record.write().
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Literal, Protocol, Union

from .positional import TupleScheme
from .stream import ByteSink, ByteSource
from .tagged import StandardScheme

if TYPE_CHECKING:
    from ..models.record import Record

SchemeName = Literal["standard", "tuple"]


class Scheme(Protocol):
    """A wire representation of records."""

    name: str

    def write(self, record: Record, sink: ByteSink) -> None: ...

    def read(self, source: ByteSource, record: Record) -> None: ...


SCHEMES: Dict[str, Scheme] = {
    StandardScheme.name: StandardScheme(),
    TupleScheme.name: TupleScheme(),
}


def get_scheme(scheme: Union[str, Scheme]) -> Scheme:
    """Resolve a scheme name to its implementation.

    Scheme objects are passed through unchanged.

    Raises:
        ValueError: If the name is not registered
    """
    if isinstance(scheme, str):
        try:
            return SCHEMES[scheme]
        except KeyError:
            raise ValueError(
                f"Invalid scheme: {scheme!r}. Must be one of {', '.join(map(repr, SCHEMES))}"
            ) from None
    return scheme


def encode(record: Record, scheme: Union[SchemeName, Scheme] = "standard") -> bytes:
    """Encode a record to bytes.

    Args:
        record: Record to encode
        scheme: "standard" for the tagged encoding, "tuple" for the positional one

    Returns:
        Encoded bytes

    Raises:
        ValidationError: If a REQUIRED field is unset
        EncodeError: If a value cannot be written

    Example:
        >>> data = encode(bonk)
        >>> dense = encode(bonk, scheme="tuple")
    """
    sink = ByteSink()
    get_scheme(scheme).write(record, sink)
    return sink.getvalue()
