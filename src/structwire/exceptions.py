"""Exception hierarchy for structwire.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from StructwireError for easy catching of any structwire-specific error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .codec.schema import FieldDescriptor


class StructwireError(Exception):
    """Base exception for all structwire errors."""

    pass


class SchemaError(StructwireError):
    """Raised when a struct descriptor is invalid or unusable.

    Examples:
        - Descriptor data loaded from configuration fails validation
        - Container or struct type used as a field type
        - Record created without any descriptor
    """

    pass


class ValidationError(StructwireError):
    """Raised when a record fails validation.

    A REQUIRED field is unset. Raised by Record.validate() and therefore by
    both schemes before writing and after reading.

    Attributes:
        struct_name: Name of the struct being validated
        field: Descriptor of the first REQUIRED field found unset
    """

    def __init__(self, struct_name: str, field: Optional[FieldDescriptor] = None) -> None:
        self.struct_name = struct_name
        self.field = field
        if field is not None:
            message = f"Required field '{field.name}' (id {field.id}) is unset in {struct_name}"
        else:
            message = f"{struct_name} failed validation"
        super().__init__(message)


class EncodeError(StructwireError):
    """Raised when writing a record fails.

    Examples:
        - String value too long for the 4-byte length prefix
    """

    pass


class DecodeError(StructwireError):
    """Raised when decoding binary data fails.

    Examples:
        - Truncated data (insufficient bytes)
        - Unknown wire type code
        - Presence bitmap padding bits set
        - Invalid UTF-8 in a string value
        - Trailing bytes after a complete record
    """

    pass
