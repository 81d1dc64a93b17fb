"""Base record class and tlvwire-specific Pydantic configuration.

This module provides the BaseRecord class that all tlvwire records should inherit from.
"""

from __future__ import annotations

from typing import Any, ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator
from typing_extensions import Self

from ..codec.decoder import read_record
from ..codec.encoder import write_record
from ..codec.readwriter import Reader, Writer
from ..codec.schema import RecordSchema


class BaseRecord(BaseModel):
    """Base class for all tlvwire records.

    Records declare their fields with TlvField(), giving each one a wire tag and
    an optionality flag. Fields that are not passed to the constructor start at
    their zero value (False, 0, b"", "", empty list, or an all-zero nested record).

    Every kind round-trips through encode() and decode() except list[bool]:
    False has no wire form, so False elements of a bool list are lost.

    tlvwire-specific options can be configured as ClassVar attributes:

    Example:
        >>> from typing import ClassVar
        >>> class Status(BaseRecord):
        ...     vehicle_id: Uint64 = TlvField(tag=1)
        ...     callsign: str = TlvField(tag=2, optional=True)
        ...     readings: list[Uint64] = TlvField(tag=3)
        ...
        ...     tlv_max_bytes: ClassVar[Optional[int]] = 64
        ...     tlv_extra: ClassVar[str] = "ignore"

    Attributes:
        tlv_max_bytes: Maximum encoded size in bytes (optional, checked by encode())
        tlv_extra: What decoding does with entries left after the last field:
            "forbid" raises SchemaMismatchError, "ignore" skips them
    """

    model_config = ConfigDict(
        strict=False,
        validate_assignment=True,
        extra="forbid",
    )

    tlv_max_bytes: ClassVar[Optional[int]] = None
    tlv_extra: ClassVar[Literal["forbid", "ignore"]] = "forbid"

    @model_validator(mode="before")
    @classmethod
    def _fill_zero_values(cls, data: Any) -> Any:
        """Start every field not given by the caller at its zero value."""
        if not isinstance(data, dict):
            return data
        filled = RecordSchema.from_model(cls).zero_values()
        filled.update(data)
        return filled

    def is_zero(self) -> bool:
        """Check whether every field is (recursively) at its zero value."""
        return RecordSchema.from_model(type(self)).is_zero(self)

    def write_to(self, writer: Writer, tag: Optional[int] = None) -> None:
        """Encode this record to a byte sink.

        Args:
            writer: Destination with a write(bytes) method
            tag: Outer tag when nested inside a parent, or None for a bare body
        """
        write_record(self, writer, tag)

    @classmethod
    def read_from(cls, reader: Reader, tag: Optional[int] = None) -> Self:
        """Decode an instance of this record from a Reader.

        Args:
            reader: Entry reader
            tag: Outer tag when nested inside a parent, or None for a bare body
        """
        return read_record(cls, reader, tag)
