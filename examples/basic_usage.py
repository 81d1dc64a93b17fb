#!/usr/bin/env python3
"""Basic usage example for tlvwire.

This example demonstrates:
1. Defining a record with TlvField tags
2. Encoding to TLV bytes
3. Inspecting the wire entries
4. Decoding back to a Pydantic model
"""

from __future__ import annotations

from typing import ClassVar, Optional

from tlvwire import (
    BaseRecord,
    TlvField,
    Uint64,
    decode,
    dump_entries,
    encode,
    encoded_size,
    field_sizes,
)


class StatusReport(BaseRecord):
    """Vehicle status report.

    The callsign is optional and disappears from the wire while empty.
    """

    vehicle_id: Uint64 = TlvField(tag=1, description="Vehicle ID")
    callsign: str = TlvField(tag=2, optional=True, description="Radio callsign")
    depths_cm: list[Uint64] = TlvField(tag=3, description="Recent depth samples")
    active: bool = TlvField(tag=4, description="Vehicle active flag")

    tlv_max_bytes: ClassVar[Optional[int]] = 64


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("tlvwire Basic Usage Example")
    print("=" * 60)
    print()

    print("1. Creating a status report...")
    msg = StatusReport(vehicle_id=42, depths_cm=[250, 1500, 70000], active=True)
    print(f"   {msg!r}")
    print()

    print("2. Field sizes...")
    for field_name, size in field_sizes(msg).items():
        print(f"   {field_name}: {size} bytes")
    print(f"   Total: {encoded_size(msg)} bytes")
    print()

    print("3. Encoding...")
    data = encode(msg)
    print(f"   {data.hex()}")
    for line in dump_entries(data):
        print(f"   {line}")
    print()

    print("4. Decoding...")
    decoded = decode(StatusReport, data)
    print(f"   {decoded!r}")
    print(f"   Round-trip OK: {decoded == msg}")


if __name__ == "__main__":
    main()
