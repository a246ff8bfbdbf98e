"""Utility functions for structwire.

This module provides encoded size calculation.
"""

from __future__ import annotations

from .sizing import encoded_size, field_sizes, standard_overhead, tuple_overhead

__all__ = [
    "encoded_size",
    "field_sizes",
    "standard_overhead",
    "tuple_overhead",
]
