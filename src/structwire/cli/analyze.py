"""Descriptor analysis and hex decoding CLI commands."""

from __future__ import annotations

import importlib.util
import inspect
import sys
from pathlib import Path
from typing import List

from ..codec.bitpack import bitmap_size
from ..codec.decoder import decode
from ..codec.schema import StructDescriptor, load_descriptors
from ..exceptions import SchemaError
from ..models.record import Record
from ..utils.sizing import standard_overhead


def load_schema_file(file_path: Path) -> List[StructDescriptor]:
    """Collect struct descriptors from a JSON file or a Python module.

    JSON files hold one descriptor object or a list of them. Python modules
    contribute every module-level StructDescriptor and the struct_descriptor
    of every Record subclass defined in them.

    Raises:
        SchemaError: If the file yields no descriptors or cannot be loaded
    """
    if file_path.suffix.lower() == ".json":
        descriptors = load_descriptors(file_path)
    else:
        descriptors = _descriptors_from_module(file_path)

    if not descriptors:
        raise SchemaError(f"No struct descriptors found in {file_path}")
    return descriptors


def _descriptors_from_module(file_path: Path) -> List[StructDescriptor]:
    spec = importlib.util.spec_from_file_location("structwire_user_module", file_path)
    if spec is None or spec.loader is None:
        raise SchemaError(f"Could not load module from {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules["structwire_user_module"] = module
    spec.loader.exec_module(module)

    found: List[StructDescriptor] = []
    for _name, obj in inspect.getmembers(module):
        if isinstance(obj, StructDescriptor):
            candidate = obj
        elif (
            inspect.isclass(obj)
            and issubclass(obj, Record)
            and obj.__module__ == "structwire_user_module"
            and obj.struct_descriptor is not None
        ):
            candidate = obj.struct_descriptor
        else:
            continue
        if all(candidate != known for known in found):
            found.append(candidate)
    return found


def select_descriptor(descriptors: List[StructDescriptor], name: str | None) -> StructDescriptor:
    """Pick a descriptor by struct name, or the only one when name is None."""
    if name is None:
        if len(descriptors) != 1:
            names = ", ".join(d.name for d in descriptors)
            raise SchemaError(f"Several structs available ({names}); pick one with --struct")
        return descriptors[0]
    for descriptor in descriptors:
        if descriptor.name == name:
            return descriptor
    raise SchemaError(f"No struct named {name!r}")


def analyze_file(file_path: Path) -> None:
    """Print the layout of every struct found in a schema file."""
    descriptors = load_schema_file(file_path)

    print("|" * 7, "structwire: struct layout", "|" * 7)
    print(f"{len(descriptors)} struct{'s' if len(descriptors) != 1 else ''} loaded.")
    print("Sizes are in bytes.")
    print()

    for descriptor in descriptors:
        analyze_descriptor(descriptor)


def analyze_descriptor(descriptor: StructDescriptor) -> None:
    """Print field table and per-scheme overhead of a single struct."""
    fields = descriptor.fields
    required = len(descriptor.required_fields)

    print(f"{'=' * 19} {descriptor.name} {'=' * 19}")
    print(f"{len(fields)} field{'s' if len(fields) != 1 else ''}, {required} required")
    print(f"        tuple bitmap{'.' * 26}{bitmap_size(len(fields))}")
    print(f"        standard headers, all set{'.' * 9}{standard_overhead(descriptor, len(fields))}")
    print(f"        standard headers, required only{'.' * 3}{standard_overhead(descriptor, required)}")
    print()

    print(f"{'-' * 28} Fields {'-' * 28}")
    for position, field in enumerate(fields, 1):
        rule = field.rule
        size = str(rule.fixed_size) if rule.fixed_size is not None else "4+n"
        field_desc = f"{position}. {field.name} (id {field.id})"
        info = f"{field.type.name} {field.requirement.value}"
        dots = "." * max(1, 54 - len(field_desc) - len(info) - len(size) - 1)
        print(f"        {field_desc}{dots}{info} {size}")
    print()


def decode_hex(hex_data: str, schema_file: Path, struct_name: str | None, scheme: str) -> Record:
    """Decode a hex string against a struct from schema_file and print it."""
    descriptor = select_descriptor(load_schema_file(schema_file), struct_name)
    try:
        data = bytes.fromhex(hex_data.replace(":", " "))
    except ValueError as e:
        raise ValueError(f"Invalid hex input: {e}") from e

    record = decode(descriptor, data, scheme=scheme)  # type: ignore[arg-type]

    print(f"{descriptor.name} ({scheme} scheme, {len(data)} bytes)")
    for field in descriptor.fields:
        if record.is_set(field):
            print(f"        {field.id}: {field.name} = {record.get(field)!r}")
        else:
            print(f"        {field.id}: {field.name} (unset)")
    return record
