"""Exception hierarchy for tlvwire.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from TlvError for easy catching of any tlvwire-specific error.

Transport failures raised by the underlying stream (``OSError``) are not wrapped
and propagate unchanged.
"""

from __future__ import annotations


class TlvError(Exception):
    """Base exception for all tlvwire errors."""

    pass


class SchemaError(TlvError):
    """Raised when a record schema is invalid or cannot be read.

    Examples:
        - Field declared without TlvField() metadata
        - Tag is not an unsigned 64-bit integer
        - Unsupported field annotation (float, dict, Union, ...)
    """

    pass


class EncodeError(TlvError):
    """Raised when encoding a record fails.

    Examples:
        - Integer value outside the unsigned 64-bit range
        - Encoded record exceeds tlv_max_bytes
    """

    pass


class UnsupportedKindError(EncodeError):
    """Raised when a value's kind has no wire representation.

    Supported kinds are bool, unsigned int, bytes, str, nested record and
    lists of those.
    """

    def __init__(self, kind: str) -> None:
        super().__init__(f"invalid type: {kind}")
        self.kind = kind


class DecodeError(TlvError):
    """Raised when decoding binary data fails.

    The more specific MalformedStreamError and SchemaMismatchError are raised
    for framing and tag-order problems respectively.
    """

    pass


class MalformedStreamError(DecodeError):
    """Raised when the byte stream itself is corrupt.

    Examples:
        - Truncated escape sequence in a Type or Length field
        - Length exceeding the remaining input
        - Unsigned integer value with a width other than 1, 2, 4 or 8
        - Text value that is not valid UTF-8
    """

    pass


class SchemaMismatchError(DecodeError):
    """Raised when the decoded tag sequence does not fit the record schema.

    Examples:
        - Non-optional field missing or out of order
        - Outer entry carries an unexpected tag
        - Trailing entries left over after the last field
    """

    pass
