"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from structwire import DefaultField, OptionalField, RequiredField, Struct, StructDescriptor


@pytest.fixture
def bonk_descriptor() -> StructDescriptor:
    """Two-field struct: optional string, default-requiredness i32."""
    return Struct(
        "Bonk",
        OptionalField(1, "message", "string"),
        DefaultField(2, "count", "i32"),
    )


@pytest.fixture
def everything_descriptor() -> StructDescriptor:
    """Struct with one field of every scalar type and one required field."""
    return Struct(
        "Everything",
        RequiredField(1, "flag", "bool"),
        DefaultField(2, "tiny", "byte"),
        DefaultField(3, "short", "i16"),
        DefaultField(4, "count", "i32"),
        OptionalField(5, "big", "i64"),
        OptionalField(6, "ratio", "double"),
        OptionalField(7, "label", "string"),
    )
