"""Main CLI entry point for tlvwire."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..cli.analyze import analyze_file
from ..exceptions import TlvError
from ..utils.dump import dump_entries


def main() -> int:
    """Main entry point for the tlvwire CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="tlvwire: Schema-driven TLV Codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tlvwire --analyze records.py          Show record field tables
  tlvwire --dump 01012a0203666f6f        List the entries of a TLV stream
  tlvwire --version                     Show version
        """,
    )

    parser.add_argument(
        "--analyze",
        metavar="FILE",
        type=str,
        help="Analyze record schemas and show field tags and kinds",
    )

    parser.add_argument(
        "--dump",
        metavar="HEX",
        type=str,
        help="Split a hex-encoded TLV stream into its top-level entries",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"tlvwire {__version__}",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

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

    if args.dump is not None:
        try:
            data = bytes.fromhex(args.dump)
        except ValueError as e:
            print(f"Error: invalid hex input: {e}", file=sys.stderr)
            return 1

        try:
            for line in dump_entries(data):
                print(line)
            return 0
        except TlvError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
