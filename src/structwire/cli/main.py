"""Main CLI entry point for structwire."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .. import __version__
from .analyze import analyze_file, decode_hex


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the structwire CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        prog="structwire",
        description="structwire: tagged and positional struct codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  structwire --analyze schema.json                       Show struct layouts
  structwire --decode 0800020000000700 --schema bonk.py  Decode a tagged record
  structwire --decode 4000000007 --schema bonk.py --scheme tuple
        """,
    )

    parser.add_argument(
        "--analyze",
        metavar="FILE",
        type=str,
        help="Analyze struct descriptors (JSON file or Python module)",
    )
    parser.add_argument(
        "--decode",
        metavar="HEX",
        type=str,
        help="Decode a hex-encoded record (requires --schema)",
    )
    parser.add_argument(
        "--schema",
        metavar="FILE",
        type=str,
        help="Schema file used by --decode",
    )
    parser.add_argument(
        "--struct",
        metavar="NAME",
        type=str,
        help="Struct to decode when the schema file defines several",
    )
    parser.add_argument(
        "--scheme",
        choices=["standard", "tuple"],
        default="standard",
        help="Wire scheme used by --decode (default: standard)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"structwire {__version__}",
    )

    args = parser.parse_args(argv)

    if args.analyze:
        file_path = Path(args.analyze)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            analyze_file(file_path)
            return 0
        except Exception as e:
            print(f"Error analyzing file: {e}", file=sys.stderr)
            return 1

    if args.decode is not None:
        if not args.schema:
            print("Error: --decode requires --schema", file=sys.stderr)
            return 1
        schema_path = Path(args.schema)
        if not schema_path.exists():
            print(f"Error: File not found: {schema_path}", file=sys.stderr)
            return 1

        try:
            decode_hex(args.decode, schema_path, args.struct, args.scheme)
            return 0
        except Exception as e:
            print(f"Error decoding data: {e}", file=sys.stderr)
            return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
