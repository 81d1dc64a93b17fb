"""Record size calculation utilities.

This module provides functions to report how many bytes a record, and each of
its fields, occupies on the wire.
"""

from __future__ import annotations

from pydantic import BaseModel

from ..codec.encoder import encode, encode_value
from ..codec.schema import RecordSchema


def _instance(record_or_class: BaseModel | type[BaseModel]) -> BaseModel:
    # A class stands for its all-zero instance
    if isinstance(record_or_class, BaseModel):
        return record_or_class
    return record_or_class()


def encoded_size(record_or_class: BaseModel | type[BaseModel]) -> int:
    """Calculate the encoded size of a record in bytes.

    Unlike a fixed-layout codec, TLV sizes depend on the values: integers pick a
    width, strings and bytes carry their length, and zero optional fields vanish.
    Passing a class measures its all-zero instance.

    Args:
        record_or_class: Record instance or class

    Returns:
        Size in bytes of the bare record body

    Example:
        >>> class Status(BaseRecord):
        ...     vehicle_id: Uint64 = TlvField(tag=1)
        ...     note: str = TlvField(tag=2, optional=True)
        >>> encoded_size(Status(vehicle_id=42))
        3  # tag + length + 1 value byte; note omitted
    """
    return len(encode(_instance(record_or_class)))


def field_sizes(record_or_class: BaseModel | type[BaseModel]) -> dict[str, int]:
    """Get the encoded size in bytes of each field in a record.

    Omitted fields (zero optional fields, False booleans, empty lists) report 0.

    Args:
        record_or_class: Record instance or class

    Returns:
        Dictionary mapping field names to their size in bytes

    Example:
        >>> field_sizes(Status(vehicle_id=300))
        {'vehicle_id': 4, 'note': 0}
    """
    record = _instance(record_or_class)
    schema = RecordSchema.from_model(type(record))

    sizes: dict[str, int] = {}
    for field in schema.fields:
        value = getattr(record, field.name)
        if field.optional and field.is_zero(value):
            sizes[field.name] = 0
        else:
            sizes[field.name] = len(encode_value(value, field.tag))
    return sizes
