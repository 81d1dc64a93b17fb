"""tlvwire: Schema-driven Type-Length-Value codec

A Python library that maps typed, ordered records to and from compact,
self-delimiting TLV byte streams. Fields may be optional, repeated or nested.

Wire format:
    stream = entry*
    entry  = CompactWidth(Type) CompactWidth(Length) Value[Length]

Key Features:
- Pydantic-based record modeling
- Optional fields omitted at their zero value
- Repeated fields as consecutive entries sharing one tag
- Nested records as length-prefixed bodies
- Single-entry lookahead Reader for streaming decode

Quick Start:
    >>> from tlvwire import BaseRecord, TlvField, Uint64, encode, decode
    >>>
    >>> class Status(BaseRecord):
    ...     vehicle_id: Uint64 = TlvField(tag=1)
    ...     callsign: str = TlvField(tag=2, optional=True)
    ...     depths: list[Uint64] = TlvField(tag=3)
    ...     active: bool = TlvField(tag=4)
    >>>
    >>> msg = Status(vehicle_id=42, depths=[10, 20, 30], active=True)
    >>> data = encode(msg)
    >>> decoded = decode(Status, data)
"""

from __future__ import annotations

from .codec import (
    Decodable,
    Encodable,
    Entry,
    FieldKind,
    FieldSchema,
    Reader,
    RecordSchema,
    Writer,
    copy,
    decode,
    encode,
    encode_value,
)
from .exceptions import (
    DecodeError,
    EncodeError,
    MalformedStreamError,
    SchemaError,
    SchemaMismatchError,
    TlvError,
    UnsupportedKindError,
)
from .models import BaseRecord, TlvField, Uint64
from .utils import dump_entries, encoded_size, field_sizes, iter_entries

__version__ = "0.1.0"

__all__ = [
    # Core API
    "BaseRecord",
    "encode",
    "decode",
    "encode_value",
    "copy",
    # Field helpers
    "TlvField",
    "Uint64",
    # Streams
    "Reader",
    "Writer",
    "Entry",
    "Encodable",
    "Decodable",
    # Schema
    "RecordSchema",
    "FieldSchema",
    "FieldKind",
    # Exceptions
    "TlvError",
    "SchemaError",
    "EncodeError",
    "UnsupportedKindError",
    "DecodeError",
    "MalformedStreamError",
    "SchemaMismatchError",
    # Utilities
    "encoded_size",
    "field_sizes",
    "iter_entries",
    "dump_entries",
    # Version
    "__version__",
]
