"""Field descriptor helpers.

Shorthand constructors for FieldDescriptor, one per requirement class, for
hand-written struct registration.

Example:
    >>> bonk = Struct(
    ...     "Bonk",
    ...     OptionalField(1, "message", "string"),
    ...     DefaultField(2, "count", "i32"),
    ... )
"""

from __future__ import annotations

from typing import Union

from ..codec.schema import FieldDescriptor, Requirement, StructDescriptor
from ..codec.ttypes import TypeTag

TypeSpec = Union[TypeTag, str, int]


def RequiredField(field_id: int, name: str, type: TypeSpec) -> FieldDescriptor:
    """Create a field that must be set before encoding or after decoding."""
    return FieldDescriptor(id=field_id, name=name, type=type, requirement=Requirement.REQUIRED)


def OptionalField(field_id: int, name: str, type: TypeSpec) -> FieldDescriptor:
    """Create a field that may be absent."""
    return FieldDescriptor(id=field_id, name=name, type=type, requirement=Requirement.OPTIONAL)


def DefaultField(field_id: int, name: str, type: TypeSpec) -> FieldDescriptor:
    """Create a field with default requiredness (may be absent)."""
    return FieldDescriptor(id=field_id, name=name, type=type, requirement=Requirement.DEFAULT)


def Struct(name: str, *fields: FieldDescriptor) -> StructDescriptor:
    """Create a StructDescriptor from fields in declaration order."""
    return StructDescriptor(name=name, fields=fields)
