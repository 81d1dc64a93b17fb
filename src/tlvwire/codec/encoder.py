"""TLV encoder for Pydantic records.

This module provides the encode() function that serializes a record's fields,
in declaration order, into nested Type-Length-Value entries. Optional fields at
their zero value are omitted from the wire.
"""

from __future__ import annotations

import io
import logging
from typing import Any, Optional

from pydantic import BaseModel

from ..exceptions import EncodeError, UnsupportedKindError
from .readwriter import Writer
from .schema import RecordSchema
from .varwidth import write_compact, write_uint

log = logging.getLogger(__name__)


def encode(record: BaseModel, tag: Optional[int] = None) -> bytes:
    """Encode a record to TLV bytes.

    Args:
        record: Record instance to encode
        tag: If given, wrap the body in a single entry with this tag

    Returns:
        Encoded bytes

    Raises:
        SchemaError: If the record schema is invalid
        EncodeError: If a value cannot be encoded or the result exceeds
            the record's tlv_max_bytes

    Examples:
        ```python
        from tlvwire import BaseRecord, TlvField, Uint64, encode

        class Status(BaseRecord):
            vehicle_id: Uint64 = TlvField(tag=1)
            name: str = TlvField(tag=2, optional=True)

        data = encode(Status(vehicle_id=42))
        assert data == b"\\x01\\x01\\x2a"
        ```
    """
    buf = io.BytesIO()
    write_record(record, buf, tag)
    encoded = buf.getvalue()

    max_bytes = getattr(type(record), "tlv_max_bytes", None)
    if max_bytes is not None and len(encoded) > max_bytes:
        raise EncodeError(
            f"Encoded record size ({len(encoded)} bytes) exceeds tlv_max_bytes={max_bytes}"
        )

    return encoded


def write_record(record: BaseModel, writer: Writer, tag: Optional[int] = None) -> None:
    """Encode a record and write it to a byte sink.

    Args:
        record: Record instance to encode
        writer: Destination with a write(bytes) method
        tag: If given, wrap the body in a single entry with this tag

    Raises:
        OSError: Propagated unchanged from the writer
    """
    body = _encode_body(record)
    if tag is None:
        writer.write(body)
    else:
        writer.write(write_compact(tag) + write_compact(len(body)) + body)


def _encode_body(record: BaseModel) -> bytes:
    schema = RecordSchema.from_model(type(record))
    buf = bytearray()
    for field_schema in schema.fields:
        value = getattr(record, field_schema.name)
        if field_schema.optional and field_schema.is_zero(value):
            log.debug(
                "omitting zero optional field %s.%s (tag %d)",
                schema.model_class.__name__,
                field_schema.name,
                field_schema.tag,
            )
            continue
        buf += encode_value(value, field_schema.tag)
    return bytes(buf)


def encode_value(value: Any, tag: int) -> bytes:
    """Encode a single value under a tag, dispatching on its kind.

    Args:
        value: bool, int, bytes, str, record, or a list of those
        tag: Wire tag for the entry (shared by every element of a list)

    Returns:
        Encoded entries (empty for False and for empty lists)

    Raises:
        UnsupportedKindError: If value has no wire representation
        EncodeError: If an integer is outside the unsigned 64-bit range
    """
    # Raw bytes are the one list kind written as a single entry
    if isinstance(value, (bytes, bytearray)):
        return write_compact(tag) + write_compact(len(value)) + bytes(value)

    if isinstance(value, (list, tuple)):
        return b"".join(encode_value(element, tag) for element in value)

    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        # Presence means True; False has no wire form
        if not value:
            return b""
        return write_compact(tag) + write_compact(0)

    if isinstance(value, int):
        return write_compact(tag) + write_uint(value)

    if isinstance(value, str):
        raw = value.encode("utf-8")
        return write_compact(tag) + write_compact(len(raw)) + raw

    if isinstance(value, BaseModel):
        buf = io.BytesIO()
        write_to = getattr(value, "write_to", None)
        if write_to is not None:
            write_to(buf, tag)
        else:
            write_record(value, buf, tag)
        return buf.getvalue()

    raise UnsupportedKindError(type(value).__name__)
