"""Presence-aware record container.

A Record holds one value slot per field of its StructDescriptor and an inline
bitmask of which fields are set. Reading an unset field returns the type's
zero value; codecs, equality and ordering look at the set flags only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Dict, Iterator, List, Optional, Tuple, Union

from ..codec.schema import FieldDescriptor, FieldRef, StructDescriptor
from ..exceptions import SchemaError, ValidationError

if TYPE_CHECKING:
    from ..codec.encoder import Scheme
    from ..codec.stream import ByteSink, ByteSource


class Record:
    """Mutable value container for one struct shape.

    A record is either built from an explicit descriptor or from a subclass
    that declares ``struct_descriptor``:

    Example:
        >>> class Bonk(Record):
        ...     struct_descriptor = StructDescriptor(name="Bonk", fields=[...])
        >>> bonk = Bonk(count=7)
        >>> bonk.is_set("message")
        False
        >>> bonk.count
        7

    Fields can be addressed by FieldDescriptor, name, or wire id. Attribute
    access by field name is also supported; assigning None unsets the field.
    A field whose name is also a Record attribute (``clear``, ``get``, ...)
    is reachable only through get() and set(); assigning it raises
    AttributeError.
    Records are not thread-safe; use deep_copy() to hand one to another thread.
    """

    __slots__ = ("_descriptor", "_values", "_isset")

    struct_descriptor: ClassVar[Optional[StructDescriptor]] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        descriptor = cls.__dict__.get("struct_descriptor")
        if descriptor is not None and not isinstance(descriptor, StructDescriptor):
            raise SchemaError(
                f"{cls.__name__}.struct_descriptor must be a StructDescriptor, "
                f"got {type(descriptor).__name__}"
            )

    def __init__(self, descriptor: Optional[StructDescriptor] = None, /, **values: Any) -> None:
        if descriptor is None:
            descriptor = type(self).struct_descriptor
        if descriptor is None:
            raise SchemaError(f"{type(self).__name__} has no struct descriptor")
        if not isinstance(descriptor, StructDescriptor):
            raise TypeError(f"expected StructDescriptor, got {type(descriptor).__name__}")

        object.__setattr__(self, "_descriptor", descriptor)
        object.__setattr__(self, "_values", [field.rule.zero for field in descriptor.fields])
        object.__setattr__(self, "_isset", 0)

        for name, value in values.items():
            if descriptor.field_for_name(name) is None:
                raise TypeError(f"{descriptor.name} has no field {name!r}")
            if value is not None:
                self.set(name, value)

    @property
    def descriptor(self) -> StructDescriptor:
        return self._descriptor

    # Field access

    def get(self, field: FieldRef) -> Any:
        """Return the field's value, or its type's zero value if unset."""
        return self._values[self._index(field)]

    def set(self, field: FieldRef, value: Any) -> None:
        """Store a value and mark the field set.

        Raises:
            TypeError: If value does not match the field's type
            ValueError: If an integer does not fit the field's width
        """
        index = self._index(field)
        descriptor = self._descriptor.fields[index]
        try:
            coerced = descriptor.rule.coerce(value)
        except TypeError as e:
            raise TypeError(f"Field {descriptor.name} ({descriptor.type.name}): {e}") from None
        except ValueError as e:
            raise ValueError(f"Field {descriptor.name} ({descriptor.type.name}): {e}") from None
        self._values[index] = coerced
        self._isset |= 1 << index

    def unset(self, field: FieldRef) -> None:
        """Clear the field's set flag and reset it to the zero value."""
        index = self._index(field)
        self._values[index] = self._descriptor.fields[index].rule.zero
        self._isset &= ~(1 << index)

    def is_set(self, field: FieldRef) -> bool:
        return bool(self._isset & (1 << self._index(field)))

    def clear(self) -> None:
        """Unset every field."""
        self._values[:] = [field.rule.zero for field in self._descriptor.fields]
        self._isset = 0

    def field_for_id(self, field_id: int) -> Optional[FieldDescriptor]:
        return self._descriptor.field_for_id(field_id)

    def set_fields(self) -> Iterator[Tuple[FieldDescriptor, Any]]:
        """Yield (field, value) for every set field in declaration order."""
        for index, field in enumerate(self._descriptor.fields):
            if self._isset & (1 << index):
                yield field, self._values[index]

    def to_dict(self) -> Dict[str, Any]:
        """Return the set fields as a name -> value mapping."""
        return {field.name: value for field, value in self.set_fields()}

    def validate(self) -> None:
        """Check that every REQUIRED field is set.

        Raises:
            ValidationError: Naming the first unset REQUIRED field
        """
        for index, field in enumerate(self._descriptor.fields):
            if field.required and not self._isset & (1 << index):
                raise ValidationError(self._descriptor.name, field)

    def deep_copy(self) -> Record:
        """Return an independent record with the same set flags and values."""
        cls = type(self)
        copied = cls.__new__(cls)
        object.__setattr__(copied, "_descriptor", self._descriptor)
        object.__setattr__(copied, "_values", list(self._values))
        object.__setattr__(copied, "_isset", self._isset)
        return copied

    def __copy__(self) -> Record:
        return self.deep_copy()

    def __deepcopy__(self, memo: Dict[int, Any]) -> Record:
        return self.deep_copy()

    # Wire entry points

    def write(self, sink: ByteSink, scheme: Union[str, Scheme] = "standard") -> None:
        """Write this record to sink using the named scheme."""
        from ..codec.encoder import get_scheme

        get_scheme(scheme).write(self, sink)

    def read(self, source: ByteSource, scheme: Union[str, Scheme] = "standard") -> None:
        """Replace this record's contents with one read from source."""
        from ..codec.encoder import get_scheme

        get_scheme(scheme).read(source, self)

    # Equality, ordering, hashing

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        if not self._same_shape(other):
            return False
        if self._isset != other._isset:
            return False
        # Values match by sort key so NaN equals NaN, as in compare_to
        for index, field in enumerate(self._descriptor.fields):
            if not self._isset & (1 << index):
                continue
            key = field.rule.sort_key
            if key(self._values[index]) != key(other._values[index]):
                return False
        return True

    def __hash__(self) -> int:
        return hash(
            (
                self._descriptor.name,
                tuple((field.id, field.rule.sort_key(value)) for field, value in self.set_fields()),
            )
        )

    def compare_to(self, other: Record) -> int:
        """Three-way comparison.

        Fields are compared in declaration order: an unset field sorts before a
        set one, and two set fields compare by value. Records of different
        shapes compare by struct name.

        Returns:
            Negative, zero or positive integer

        Raises:
            TypeError: If other is not a Record, or has a different shape with
                the same struct name
        """
        if not isinstance(other, Record):
            raise TypeError(f"Cannot compare Record with {type(other).__name__}")
        if not self._same_shape(other):
            mine, theirs = self._descriptor.name, other._descriptor.name
            if mine == theirs:
                raise TypeError(f"Cannot order two different shapes both named {mine}")
            return (mine > theirs) - (mine < theirs)

        for index, field in enumerate(self._descriptor.fields):
            mask = 1 << index
            mine_set = bool(self._isset & mask)
            theirs_set = bool(other._isset & mask)
            if mine_set != theirs_set:
                return 1 if mine_set else -1
            if mine_set:
                result = field.rule.compare(self._values[index], other._values[index])
                if result:
                    return result
        return 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self.compare_to(other) >= 0

    # Attribute access by field name

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        field = self._descriptor.field_for_name(name)
        if field is None:
            raise AttributeError(f"{self._descriptor.name} has no field {name!r}")
        return self.get(field)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        self._check_not_shadowed(name)
        field = self._descriptor.field_for_name(name)
        if field is None:
            raise AttributeError(f"{self._descriptor.name} has no field {name!r}")
        if value is None:
            self.unset(field)
        else:
            self.set(field, value)

    def __delattr__(self, name: str) -> None:
        if name.startswith("_"):
            object.__delattr__(self, name)
            return
        self._check_not_shadowed(name)
        field = self._descriptor.field_for_name(name)
        if field is None:
            raise AttributeError(f"{self._descriptor.name} has no field {name!r}")
        self.unset(field)

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | {field.name for field in self._descriptor.fields})

    def __repr__(self) -> str:
        body = ", ".join(f"{field.name}={value!r}" for field, value in self.set_fields())
        return f"{self._descriptor.name}({body})"

    # Pickling

    def __getstate__(self) -> Tuple[StructDescriptor, List[Any], int]:
        return (self._descriptor, list(self._values), self._isset)

    def __setstate__(self, state: Tuple[StructDescriptor, List[Any], int]) -> None:
        descriptor, values, isset = state
        object.__setattr__(self, "_descriptor", descriptor)
        object.__setattr__(self, "_values", list(values))
        object.__setattr__(self, "_isset", isset)

    def _check_not_shadowed(self, name: str) -> None:
        if hasattr(type(self), name):
            raise AttributeError(
                f"{name!r} is a {type(self).__name__} attribute; "
                f"use get({name!r}) and set({name!r}, value) for that field"
            )

    def _same_shape(self, other: Record) -> bool:
        return self._descriptor is other._descriptor or self._descriptor == other._descriptor

    def _index(self, field: FieldRef) -> int:
        return self._descriptor.index_of(field)
