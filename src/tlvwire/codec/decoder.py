"""TLV decoder for Pydantic records.

This module provides the decode() function that converts TLV bytes back to a
record instance. Entries are consumed in schema declaration order; one entry of
lookahead decides whether an optional field is present and where a repeated
field ends.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, NoReturn, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..exceptions import DecodeError, MalformedStreamError, SchemaMismatchError
from .readwriter import Reader
from .schema import FieldKind, FieldSchema, RecordSchema
from .varwidth import read_uint

log = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

ExtraPolicy = Literal["forbid", "ignore"]


def decode(
    record_class: type[T],
    data: bytes,
    tag: Optional[int] = None,
    extra: Optional[ExtraPolicy] = None,
) -> T:
    """Decode TLV bytes to a record.

    Args:
        record_class: Record class to decode to
        data: Binary data to decode
        tag: If given, expect the body wrapped in a single entry with this tag
        extra: Policy for entries left after the last field ("forbid" or
            "ignore"); defaults to the record class's tlv_extra

    Returns:
        Decoded record instance

    Raises:
        SchemaError: If the record schema is invalid
        MalformedStreamError: If the data is truncated or corrupt
        SchemaMismatchError: If the entries do not match the schema
        DecodeError: If the decoded values fail record validation

    Examples:
        ```python
        data = encode(status)
        decoded = decode(Status, data)

        # Wrapped in an outer entry
        data = encode(status, tag=1)
        decoded = decode(Status, data, tag=1)
        ```
    """
    reader = Reader.from_bytes(data)
    record = read_record(record_class, reader, tag, extra)
    if tag is not None:
        _finish(reader, record_class, extra)
    return record


def read_record(
    record_class: type[T],
    reader: Reader,
    tag: Optional[int] = None,
    extra: Optional[ExtraPolicy] = None,
) -> T:
    """Decode one record from a Reader.

    With tag=None the reader is expected to hold exactly the record body. With a
    tag, a single entry carrying that tag is consumed and its Value is decoded
    as a bounded body; the reader may hold further entries afterwards.

    Args:
        record_class: Record class to decode to
        reader: Entry reader
        tag: Outer tag of the record, or None for a bare body
        extra: Trailing-entry policy for this record (nested records use
            their own tlv_extra)

    Returns:
        Decoded record instance
    """
    schema = RecordSchema.from_model(record_class)

    if tag is not None:
        found = reader.peek()
        if found != tag:
            _mismatch(reader, f"{record_class.__name__}: expected tag {tag}", found)
        entry = reader.read()
        return read_record(record_class, Reader.from_bytes(entry.value), None, extra)

    values: dict[str, Any] = {}
    for field_schema in schema.fields:
        values[field_schema.name] = _decode_field(reader, schema, field_schema)

    _finish(reader, record_class, extra)

    try:
        return record_class(**values)
    except ValidationError as e:
        raise DecodeError(f"Failed to construct {record_class.__name__}: {e}") from e


def _decode_field(reader: Reader, schema: RecordSchema, field_schema: FieldSchema) -> Any:
    if field_schema.repeated:
        items = []
        while reader.peek() == field_schema.tag:
            items.append(_decode_value(reader, field_schema))
        return items

    found = reader.peek()
    if found == field_schema.tag:
        return _decode_value(reader, field_schema)

    # Absent bool decodes as False even when non-optional
    if field_schema.optional or field_schema.kind is FieldKind.BOOL:
        log.debug(
            "field %s.%s (tag %d) absent, using zero value",
            schema.model_class.__name__,
            field_schema.name,
            field_schema.tag,
        )
        return field_schema.zero_value()

    _mismatch(
        reader,
        f"{schema.model_class.__name__}.{field_schema.name}: expected tag {field_schema.tag}",
        found,
    )


def _decode_value(reader: Reader, field_schema: FieldSchema) -> Any:
    if field_schema.kind is FieldKind.RECORD:
        record_type = field_schema.nested_type()
        read_from = getattr(record_type, "read_from", None)
        if read_from is not None:
            return read_from(reader, field_schema.tag)
        return read_record(record_type, reader, field_schema.tag)

    entry = reader.read()

    if field_schema.kind is FieldKind.BOOL:
        if entry.value:
            raise MalformedStreamError(
                f"Field {field_schema.name}: bool entry must have length 0, "
                f"got {len(entry.value)}"
            )
        return True

    if field_schema.kind is FieldKind.UINT:
        return read_uint(entry.value)

    if field_schema.kind is FieldKind.STR:
        try:
            return entry.value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedStreamError(
                f"Field {field_schema.name}: invalid UTF-8 encoding: {e}"
            ) from e

    return entry.value


def _finish(reader: Reader, record_class: Type[BaseModel], extra: Optional[ExtraPolicy]) -> None:
    """Handle entries left after the last field of a record."""
    policy = extra if extra is not None else getattr(record_class, "tlv_extra", "forbid")
    if policy not in ("forbid", "ignore"):
        raise ValueError(f"extra must be 'forbid' or 'ignore', got {policy!r}")

    while True:
        found = reader.peek()
        if found is None:
            break
        if policy == "forbid":
            raise SchemaMismatchError(
                f"{record_class.__name__}: unexpected trailing entry with tag {found}"
            )
        entry = reader.read()
        log.debug(
            "%s: ignoring trailing entry tag %d (%d bytes)",
            record_class.__name__,
            entry.tag,
            len(entry.value),
        )

    if reader.failure is not None:
        raise reader.failure


def _mismatch(reader: Reader, expected: str, found: Optional[int]) -> NoReturn:
    if found is None:
        if reader.failure is not None:
            raise reader.failure
        raise SchemaMismatchError(f"{expected}, found end of stream")
    raise SchemaMismatchError(f"{expected}, found tag {found}")
