"""TLV codec for tlvwire.

This module provides the encode/decode walkers, the entry reader, and the
variable-width integer framings they share.
"""

from __future__ import annotations

from .decoder import decode, read_record
from .encoder import encode, encode_value, write_record
from .readwriter import Decodable, Encodable, Entry, Reader, Writer, copy
from .schema import FieldKind, FieldSchema, RecordSchema

__all__ = [
    "encode",
    "decode",
    "encode_value",
    "write_record",
    "read_record",
    "Reader",
    "Writer",
    "Entry",
    "Encodable",
    "Decodable",
    "copy",
    "RecordSchema",
    "FieldSchema",
    "FieldKind",
]
