#!/usr/bin/env python3
"""Basic usage example for structwire.

This example demonstrates:
1. Declaring a struct with required, optional and default fields
2. Encoding with the tagged and positional schemes
3. Decoding back to a record
4. Reading a record written by a newer revision of the struct
"""

from __future__ import annotations

from structwire import (
    DefaultField,
    OptionalField,
    Record,
    RequiredField,
    Struct,
    decode,
    encode,
    encoded_size,
    field_sizes,
)


class StatusReport(Record):
    """Vehicle status report."""

    struct_descriptor = Struct(
        "StatusReport",
        RequiredField(1, "vehicle_id", "byte"),
        DefaultField(2, "depth_cm", "i32"),
        DefaultField(3, "battery_pct", "i16"),
        OptionalField(4, "note", "string"),
    )


class StatusReportV2(Record):
    """Newer revision with a heading field."""

    struct_descriptor = Struct(
        "StatusReport",
        RequiredField(1, "vehicle_id", "byte"),
        DefaultField(2, "depth_cm", "i32"),
        DefaultField(3, "battery_pct", "i16"),
        OptionalField(4, "note", "string"),
        OptionalField(5, "heading_deg", "double"),
    )


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("structwire Basic Usage Example")
    print("=" * 60)
    print()

    print("1. Creating a status report...")
    report = StatusReport(vehicle_id=42, depth_cm=2500, battery_pct=87)
    print(f"   {report!r}")
    print(f"   note set: {report.is_set('note')}")
    print()

    print("2. Analyzing field sizes...")
    for field_name, size in field_sizes(report).items():
        print(f"   {field_name}: {size} bytes")
    print()

    print("3. Encoding...")
    for scheme in ("standard", "tuple"):
        data = encode(report, scheme=scheme)
        assert len(data) == encoded_size(report, scheme=scheme)
        print(f"   {scheme:<8} {len(data):2d} bytes: {data.hex()}")
    print()

    print("4. Decoding...")
    decoded = decode(StatusReport, encode(report))
    print(f"   {decoded!r}")
    print(f"   Round trip equal: {decoded == report}")
    print()

    print("5. Reading a newer revision...")
    newer = StatusReportV2(vehicle_id=7, heading_deg=271.5)
    older = decode(StatusReport, encode(newer))
    print(f"   Written: {newer!r}")
    print(f"   Read:    {older!r}")
    print()


if __name__ == "__main__":
    main()
