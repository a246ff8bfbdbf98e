"""Binary codecs for structwire.

This module provides the type registry, the struct descriptors, and the two
wire schemes: the tagged "standard" scheme and the positional "tuple" scheme.
"""

from __future__ import annotations

from .schema import FieldDescriptor, Requirement, StructDescriptor, load_descriptor, load_descriptors
from .ttypes import TypeTag, WireRule, rule_for
from .stream import ByteSink, ByteSource
from .encoder import SCHEMES, Scheme, encode, get_scheme
from .positional import TupleScheme
from .tagged import StandardScheme, skip
from .decoder import decode

__all__ = [
    "encode",
    "decode",
    "get_scheme",
    "SCHEMES",
    "Scheme",
    "StandardScheme",
    "TupleScheme",
    "skip",
    "ByteSink",
    "ByteSource",
    "TypeTag",
    "WireRule",
    "rule_for",
    "Requirement",
    "FieldDescriptor",
    "StructDescriptor",
    "load_descriptor",
    "load_descriptors",
]
