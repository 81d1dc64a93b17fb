"""Field declaration helpers.

This module provides TlvField(), which attaches the wire tag and optionality of a
record field, and the Uint64 annotation for unsigned integer fields.
"""

from __future__ import annotations

from typing import Annotated, Any, cast

from pydantic import Field
from pydantic.fields import FieldInfo

from ..codec.schema import OPTIONAL_KEY, TAG_KEY
from ..codec.varwidth import UINT64_MAX

Uint64 = Annotated[int, Field(ge=0, le=UINT64_MAX)]
"""Unsigned 64-bit integer, the range every integer field is encoded in."""


def TlvField(*, tag: int, optional: bool = False, **kwargs: Any) -> FieldInfo:
    """Declare a record field with its wire tag.

    A bool is written as an empty entry when True and not at all when False.
    For list[bool] fields this means False elements are dropped on the wire:
    [True, False, True] decodes as [True, True].

    Args:
        tag: Wire tag (unsigned 64-bit), unique among the record's fields
        optional: If True, the field is left off the wire while at its zero
            value, and decoding tolerates its absence
        **kwargs: Additional Field() arguments (description, default, etc.)

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class Status(BaseRecord):
        ...     vehicle_id: Uint64 = TlvField(tag=1)
        ...     callsign: str = TlvField(tag=2, optional=True)
        ...     history: list[Uint64] = TlvField(tag=3, optional=True)
    """
    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    extra[TAG_KEY] = tag
    extra[OPTIONAL_KEY] = optional
    return cast(FieldInfo, Field(json_schema_extra=extra, **kwargs))
