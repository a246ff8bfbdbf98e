"""Struct and field descriptors.

A StructDescriptor is the shared, immutable description of a record shape:
its name and its ordered fields. Descriptors are pydantic models so they can be
built in code or validated from configuration data (dicts, JSON files).

Example:
    >>> bonk = StructDescriptor(
    ...     name="Bonk",
    ...     fields=[
    ...         FieldDescriptor(id=1, name="message", type="string", requirement="optional"),
    ...         FieldDescriptor(id=2, name="count", type=TypeTag.I32),
    ...     ],
    ... )
    >>> bonk.field_for_id(2).name
    'count'
"""

from __future__ import annotations

import enum
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import SchemaError
from .ttypes import TypeTag, WireRule, is_scalar, rule_for

if TYPE_CHECKING:
    from ..models.record import Record

FieldRef = Union["FieldDescriptor", str, int]

MAX_FIELD_ID = 0x7FFF


class Requirement(str, enum.Enum):
    """How a field participates in validation."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    DEFAULT = "default"

    @classmethod
    def parse(cls, value: Any) -> Requirement:
        """Resolve a requirement from a member, value, or name (any case)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                raise ValueError(f"Unknown requirement: {value!r}") from None
        raise ValueError(f"Cannot interpret {value!r} as a requirement")


class FieldDescriptor(BaseModel):
    """Description of a single field.

    Attributes:
        id: Wire identifier, unique within the struct (1-32767)
        name: Field name, unique within the struct
        type: Scalar wire type
        requirement: REQUIRED, OPTIONAL or DEFAULT
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int = Field(gt=0, le=MAX_FIELD_ID)
    name: str = Field(min_length=1)
    type: TypeTag
    requirement: Requirement = Requirement.DEFAULT

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, value: Any) -> TypeTag:
        tag = TypeTag.parse(value)
        if not is_scalar(tag):
            raise ValueError(f"{tag.name} is not a supported field type")
        return tag

    @field_validator("requirement", mode="before")
    @classmethod
    def parse_requirement(cls, value: Any) -> Requirement:
        return Requirement.parse(value)

    @property
    def rule(self) -> WireRule:
        """Binary rule for this field's type."""
        return rule_for(self.type)

    @property
    def required(self) -> bool:
        return self.requirement is Requirement.REQUIRED


class StructDescriptor(BaseModel):
    """Immutable description of a record shape.

    Declaration order of ``fields`` is significant: it is the positional
    order of the tuple scheme and the comparison order of records.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    fields: Tuple[FieldDescriptor, ...] = ()

    _by_id: Dict[int, int] = PrivateAttr(default_factory=dict)
    _by_name: Dict[str, int] = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def check_unique_fields(self) -> StructDescriptor:
        seen_ids: set[int] = set()
        seen_names: set[str] = set()
        for field in self.fields:
            if field.id in seen_ids:
                raise ValueError(f"Struct {self.name}: duplicate field id {field.id}")
            if field.name in seen_names:
                raise ValueError(f"Struct {self.name}: duplicate field name {field.name!r}")
            seen_ids.add(field.id)
            seen_names.add(field.name)
        return self

    def model_post_init(self, __context: Any) -> None:
        self._by_id = {field.id: index for index, field in enumerate(self.fields)}
        self._by_name = {field.name: index for index, field in enumerate(self.fields)}

    def field_for_id(self, field_id: int) -> Optional[FieldDescriptor]:
        """Return the field with this wire id, or None."""
        index = self._by_id.get(field_id)
        return None if index is None else self.fields[index]

    def field_for_name(self, name: str) -> Optional[FieldDescriptor]:
        """Return the field with this name, or None."""
        index = self._by_name.get(name)
        return None if index is None else self.fields[index]

    def index_of(self, ref: FieldRef) -> int:
        """Return the declaration index of a field.

        Args:
            ref: FieldDescriptor, field name or field id

        Raises:
            KeyError: If the field does not belong to this struct
        """
        if isinstance(ref, FieldDescriptor):
            index = self._by_id.get(ref.id)
            if index is None or self.fields[index] != ref:
                raise KeyError(f"Field {ref.name!r} does not belong to struct {self.name}")
            return index
        if isinstance(ref, str):
            index = self._by_name.get(ref)
        elif isinstance(ref, int) and not isinstance(ref, bool):
            index = self._by_id.get(ref)
        else:
            raise KeyError(f"Invalid field reference: {ref!r}")
        if index is None:
            raise KeyError(f"Struct {self.name} has no field {ref!r}")
        return index

    @property
    def required_fields(self) -> List[FieldDescriptor]:
        return [field for field in self.fields if field.required]

    def new_record(self, **values: Any) -> Record:
        """Create a Record of this shape with the given fields set."""
        from ..models.record import Record

        return Record(self, **values)


def load_descriptor(data: Dict[str, Any]) -> StructDescriptor:
    """Validate a descriptor from plain configuration data.

    Args:
        data: Mapping with ``name`` and ``fields`` keys

    Returns:
        StructDescriptor

    Raises:
        SchemaError: If the data does not describe a valid struct
    """
    try:
        return StructDescriptor.model_validate(data)
    except PydanticValidationError as e:
        raise SchemaError(f"Invalid struct descriptor: {e}") from e


def load_descriptors(path: Union[str, Path]) -> List[StructDescriptor]:
    """Load descriptors from a JSON file holding one struct object or a list of them.

    Raises:
        SchemaError: If the file is not valid JSON or a descriptor is invalid
    """
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise SchemaError(f"{path}: not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise SchemaError(f"{path}: invalid JSON: {e}") from e

    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list):
        raise SchemaError(f"{path}: expected an object or a list of objects")

    return [load_descriptor(item) for item in payload]
