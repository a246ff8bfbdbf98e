"""structwire: presence-aware struct records with two binary wire schemes.

Records are described by an immutable StructDescriptor (ordered fields, each
with a wire id, a type and a requirement). A record can be written with the
tagged "standard" scheme, which is self-describing and tolerates schema
evolution, or with the positional "tuple" scheme, which replaces per-field
headers with a presence bitmap.

Key Features:
- Pydantic-validated struct descriptors, loadable from JSON
- Explicit per-field presence, independent of the value
- Forward/backward compatible tagged decoding
- Dense positional encoding for peers sharing a descriptor
- Structural equality, total ordering and hashing

Quick Start:
    >>> from structwire import Record, Struct, OptionalField, DefaultField, encode, decode
    >>>
    >>> class Bonk(Record):
    ...     struct_descriptor = Struct(
    ...         "Bonk",
    ...         OptionalField(1, "message", "string"),
    ...         DefaultField(2, "count", "i32"),
    ...     )
    >>>
    >>> bonk = Bonk(count=7)
    >>> data = encode(bonk)
    >>> decoded = decode(Bonk, data)
    >>> decoded == bonk
    True
"""

from __future__ import annotations

from .codec import (
    SCHEMES,
    ByteSink,
    ByteSource,
    FieldDescriptor,
    Requirement,
    StandardScheme,
    StructDescriptor,
    TupleScheme,
    TypeTag,
    decode,
    encode,
    get_scheme,
    load_descriptor,
    load_descriptors,
)
from .exceptions import (
    DecodeError,
    EncodeError,
    SchemaError,
    StructwireError,
    ValidationError,
)
from .models import DefaultField, OptionalField, Record, RequiredField, Struct
from .utils import encoded_size, field_sizes

__version__ = "0.1.0"

__all__ = [
    # Core API
    "Record",
    "encode",
    "decode",
    # Descriptors
    "TypeTag",
    "Requirement",
    "FieldDescriptor",
    "StructDescriptor",
    "load_descriptor",
    "load_descriptors",
    # Field helpers
    "RequiredField",
    "OptionalField",
    "DefaultField",
    "Struct",
    # Schemes and streams
    "SCHEMES",
    "get_scheme",
    "StandardScheme",
    "TupleScheme",
    "ByteSink",
    "ByteSource",
    # Exceptions
    "StructwireError",
    "SchemaError",
    "ValidationError",
    "EncodeError",
    "DecodeError",
    # Sizing
    "encoded_size",
    "field_sizes",
    # Version
    "__version__",
]
