"""Record modeling for structwire.

This module provides the Record container and helpers for declaring
struct descriptors by hand.
"""

from __future__ import annotations

from .fields import DefaultField, OptionalField, RequiredField, Struct
from .record import Record

__all__ = [
    "Record",
    "RequiredField",
    "OptionalField",
    "DefaultField",
    "Struct",
]
