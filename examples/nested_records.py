#!/usr/bin/env python3
"""Nested and streamed records with tlvwire.

This example demonstrates:
1. Records nested inside records (length-prefixed bodies)
2. Writing several tagged records to one stream
3. Reading them back with the lookahead Reader
"""

from __future__ import annotations

import io

from tlvwire import BaseRecord, Reader, TlvField, Uint64, copy, encode


class Position(BaseRecord):
    """Position in local grid coordinates."""

    x_cm: Uint64 = TlvField(tag=1)
    y_cm: Uint64 = TlvField(tag=2)
    depth_cm: Uint64 = TlvField(tag=3, optional=True)


class Waypoint(BaseRecord):
    """A named waypoint."""

    name: str = TlvField(tag=1)
    position: Position = TlvField(tag=2)
    hold_s: Uint64 = TlvField(tag=3, optional=True)


class Mission(BaseRecord):
    """A mission plan."""

    mission_id: Uint64 = TlvField(tag=1)
    waypoints: list[Waypoint] = TlvField(tag=2)
    checksum: bytes = TlvField(tag=3, optional=True)
    abort_on_fault: bool = TlvField(tag=4, optional=True)


def main() -> None:
    """Run the nested records example."""
    mission = Mission(
        mission_id=7,
        waypoints=[
            Waypoint(name="start", position=Position(x_cm=0, y_cm=0)),
            Waypoint(name="survey", position=Position(x_cm=5000, y_cm=1200, depth_cm=800), hold_s=60),
        ],
        abort_on_fault=True,
    )

    data = encode(mission)
    print(f"Mission encodes to {len(data)} bytes: {data.hex()}")

    clone = copy(Mission, mission)
    print(f"Copied through a Reader: {clone == mission}")

    # Several records on one stream, each under tag 100
    stream = io.BytesIO()
    for i in range(3):
        Position(x_cm=i * 100, y_cm=i * 200).write_to(stream, tag=100)
    stream.seek(0)

    reader = Reader(stream)
    while reader.peek() == 100:
        print(f"  {Position.read_from(reader, tag=100)!r}")


if __name__ == "__main__":
    main()
