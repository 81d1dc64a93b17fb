"""Variable-width integer framings.

Two related big-endian encodings are used on the wire:

- Compact Width, for the Type and Length fields of every entry. Values up to
  0xFC are a single literal byte; larger values are an escape byte (0xFD, 0xFE
  or 0xFF) followed by a 2, 4 or 8 byte integer.
- Minimal Fixed Width, for unsigned integer payloads. The value is written in
  the smallest of 1, 2, 4 or 8 bytes that holds it, preceded by that width as a
  Compact Width Length.
"""

from __future__ import annotations

import struct
from typing import BinaryIO, Optional

from ..exceptions import EncodeError, MalformedStreamError

UINT64_MAX = 0xFFFF_FFFF_FFFF_FFFF

# Largest value stored as a literal single byte
COMPACT_LITERAL_MAX = 0xFC

_ESCAPE_U16 = 0xFD
_ESCAPE_U32 = 0xFE
_ESCAPE_U64 = 0xFF

_ESCAPE_FORMATS = {
    _ESCAPE_U16: struct.Struct(">H"),
    _ESCAPE_U32: struct.Struct(">I"),
    _ESCAPE_U64: struct.Struct(">Q"),
}

_UINT_FORMATS = {
    1: struct.Struct(">B"),
    2: struct.Struct(">H"),
    4: struct.Struct(">I"),
    8: struct.Struct(">Q"),
}


def _check_uint64(value: int) -> None:
    if value < 0 or value > UINT64_MAX:
        raise EncodeError(f"value {value} out of unsigned 64-bit range")


def compact_size(value: int) -> int:
    """Return the number of bytes write_compact() produces for value.

    Args:
        value: Unsigned 64-bit integer

    Returns:
        1, 3, 5 or 9
    """
    _check_uint64(value)
    if value <= COMPACT_LITERAL_MAX:
        return 1
    if value <= 0xFFFF:
        return 3
    if value <= 0xFFFF_FFFF:
        return 5
    return 9


def write_compact(value: int) -> bytes:
    """Encode a Type or Length field in Compact Width.

    Args:
        value: Unsigned 64-bit integer

    Returns:
        Encoded bytes

    Raises:
        EncodeError: If value is outside the unsigned 64-bit range

    Example:
        >>> write_compact(252)
        b'\\xfc'
        >>> write_compact(253)
        b'\\xfd\\x00\\xfd'
    """
    _check_uint64(value)
    if value <= COMPACT_LITERAL_MAX:
        return bytes((value,))
    if value <= 0xFFFF:
        escape = _ESCAPE_U16
    elif value <= 0xFFFF_FFFF:
        escape = _ESCAPE_U32
    else:
        escape = _ESCAPE_U64
    return bytes((escape,)) + _ESCAPE_FORMATS[escape].pack(value)


def read_compact(stream: BinaryIO) -> Optional[int]:
    """Decode a Compact Width field from a binary stream.

    Args:
        stream: Binary file-like object positioned at the field

    Returns:
        Decoded value, or None if the stream is exhausted before the first byte

    Raises:
        MalformedStreamError: If an escape byte is not followed by enough data
    """
    first = stream.read(1)
    if not first:
        return None

    fmt = _ESCAPE_FORMATS.get(first[0])
    if fmt is None:
        return first[0]

    data = stream.read(fmt.size)
    if len(data) != fmt.size:
        raise MalformedStreamError(
            f"truncated escape sequence 0x{first[0]:02X}: need {fmt.size} bytes, "
            f"got {len(data)}"
        )
    value: int = fmt.unpack(data)[0]
    return value


def uint_width(value: int) -> int:
    """Return the Minimal Fixed Width for an unsigned integer payload.

    Args:
        value: Unsigned 64-bit integer

    Returns:
        1, 2, 4 or 8
    """
    _check_uint64(value)
    if value <= 0xFF:
        return 1
    if value <= 0xFFFF:
        return 2
    if value <= 0xFFFF_FFFF:
        return 4
    return 8


def write_uint(value: int) -> bytes:
    """Encode the Length and Value of an unsigned integer entry.

    Args:
        value: Unsigned 64-bit integer

    Returns:
        Compact Width length followed by the big-endian value

    Example:
        >>> write_uint(256)
        b'\\x02\\x01\\x00'
    """
    width = uint_width(value)
    return write_compact(width) + _UINT_FORMATS[width].pack(value)


def read_uint(value: bytes) -> int:
    """Decode the Value bytes of an unsigned integer entry.

    Args:
        value: Raw Value bytes of the entry

    Returns:
        Decoded integer

    Raises:
        MalformedStreamError: If the width is not 1, 2, 4 or 8 bytes
    """
    fmt = _UINT_FORMATS.get(len(value))
    if fmt is None:
        raise MalformedStreamError(
            f"invalid unsigned integer width {len(value)} (expected 1, 2, 4 or 8)"
        )
    result: int = fmt.unpack(value)[0]
    return result
