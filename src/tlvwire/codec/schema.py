"""Schema extraction for Pydantic record models.

This module turns a Pydantic model declared with TlvField() metadata into an
explicit field table: one FieldSchema per field, in declaration order, carrying
the wire tag, value kind, optionality and repetition. The encoder and decoder
walk this table; they never look for tags on the values themselves.
"""

from __future__ import annotations

import enum
import types
from dataclasses import dataclass
from typing import Annotated, Any, Dict, List, Optional, Type, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import SchemaError
from .varwidth import UINT64_MAX

# Keys stored in FieldInfo.json_schema_extra by TlvField()
TAG_KEY = "tlv_tag"
OPTIONAL_KEY = "tlv_optional"


class FieldKind(enum.Enum):
    """Wire kind of a field's value (or of each element of a repeated field)."""

    BOOL = "bool"
    UINT = "uint"
    BYTES = "bytes"
    STR = "str"
    RECORD = "record"


_SCALAR_KINDS: Dict[Any, FieldKind] = {
    bool: FieldKind.BOOL,
    int: FieldKind.UINT,
    bytes: FieldKind.BYTES,
    str: FieldKind.STR,
}

_ZERO_SCALARS: Dict[FieldKind, Any] = {
    FieldKind.BOOL: False,
    FieldKind.UINT: 0,
    FieldKind.BYTES: b"",
    FieldKind.STR: "",
}


@dataclass(frozen=True)
class FieldSchema:
    """Schema information for a single field.

    Attributes:
        name: Field name
        tag: Wire tag (unsigned 64-bit)
        kind: Kind of the value, or of each element when repeated
        optional: Whether a zero value is omitted from the wire
        repeated: Whether the field is a list encoded as one entry per element
        record_type: Nested record class when kind is RECORD
    """

    name: str
    tag: int
    kind: FieldKind
    optional: bool
    repeated: bool
    record_type: Optional[Type[BaseModel]] = None

    def zero_value(self) -> Any:
        """Return a fresh zero value for this field."""
        if self.repeated:
            return []
        if self.kind is FieldKind.RECORD:
            return self.nested_type()()
        return _ZERO_SCALARS[self.kind]

    def is_zero(self, value: Any) -> bool:
        """Check whether value is this field's zero value.

        Nested records are zero only when every one of their fields is zero,
        recursively.
        """
        if value is None:
            return True
        if self.repeated or self.kind is not FieldKind.RECORD:
            return not value
        return RecordSchema.from_model(type(value)).is_zero(value)

    def describe(self) -> str:
        """Human-readable kind, e.g. ``list[uint]`` or ``record Inner``."""
        if self.kind is FieldKind.RECORD:
            kind = f"record {self.nested_type().__name__}"
        else:
            kind = self.kind.value
        return f"list[{kind}]" if self.repeated else kind

    def nested_type(self) -> Type[BaseModel]:
        """Return the nested record class of a RECORD field."""
        if self.record_type is None:
            raise SchemaError(f"field {self.name}: record kind without a record type")
        return self.record_type


_SCHEMA_CACHE: Dict[Type[BaseModel], "RecordSchema"] = {}


class RecordSchema:
    """Field table for a record model.

    Example:
        >>> schema = RecordSchema.from_model(Status)
        >>> for field in schema.fields:
        ...     print(f"{field.name}: tag {field.tag} ({field.describe()})")
    """

    def __init__(self, model_class: Type[BaseModel]) -> None:
        """Initialize schema from a Pydantic model.

        Args:
            model_class: Pydantic model class to read field metadata from
        """
        self.model_class = model_class
        self.fields: List[FieldSchema] = []
        self._introspect()

    @classmethod
    def from_model(cls, model_class: Type[BaseModel]) -> RecordSchema:
        """Return the (cached) schema of a Pydantic model.

        Args:
            model_class: Pydantic model class

        Returns:
            RecordSchema instance
        """
        schema = _SCHEMA_CACHE.get(model_class)
        if schema is None:
            schema = cls(model_class)
            _SCHEMA_CACHE[model_class] = schema
        return schema

    def _introspect(self) -> None:
        for field_name, field_info in self.model_class.model_fields.items():
            self.fields.append(self._extract_field_schema(field_name, field_info))

    def _extract_field_schema(self, name: str, field_info: FieldInfo) -> FieldSchema:
        owner = self.model_class.__name__
        extra = field_info.json_schema_extra
        if not isinstance(extra, dict) or TAG_KEY not in extra:
            raise SchemaError(f"type not found: {owner} {name} (declare it with TlvField)")

        tag = _parse_tag(owner, name, extra[TAG_KEY])
        optional = bool(extra.get(OPTIONAL_KEY, False))

        annotation = field_info.annotation
        if annotation is None:
            raise SchemaError(f"Field {owner}.{name} has no type annotation")

        kind, repeated, record_type = _resolve_kind(owner, name, annotation)
        return FieldSchema(
            name=name,
            tag=tag,
            kind=kind,
            optional=optional,
            repeated=repeated,
            record_type=record_type,
        )

    def field(self, name: str) -> FieldSchema:
        """Look up a field by name."""
        for field_schema in self.fields:
            if field_schema.name == name:
                return field_schema
        raise KeyError(name)

    def zero_values(self) -> Dict[str, Any]:
        """Return a mapping of every field name to a fresh zero value."""
        return {field.name: field.zero_value() for field in self.fields}

    def is_zero(self, record: BaseModel) -> bool:
        """Check whether every field of record is (recursively) zero."""
        return all(field.is_zero(getattr(record, field.name)) for field in self.fields)


def _parse_tag(owner: str, name: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise SchemaError(f"Field {owner}.{name}: tag must be an integer, got {raw!r}")
    try:
        tag = int(raw)
    except (TypeError, ValueError) as err:
        raise SchemaError(f"Field {owner}.{name}: unparseable tag {raw!r}") from err
    if tag < 0 or tag > UINT64_MAX:
        raise SchemaError(f"Field {owner}.{name}: tag {tag} out of unsigned 64-bit range")
    return tag


def _strip_annotated(annotation: Any) -> Any:
    while get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    return annotation


def _resolve_kind(
    owner: str, name: str, annotation: Any
) -> tuple[FieldKind, bool, Optional[Type[BaseModel]]]:
    annotation = _strip_annotated(annotation)
    repeated = False

    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        raise SchemaError(
            f"Field {owner}.{name}: Union types not supported; "
            f"use TlvField(optional=True) for optional fields"
        )

    if origin is list:
        args = get_args(annotation)
        if not args:
            raise SchemaError(f"Field {owner}.{name}: list needs an element type")
        repeated = True
        annotation = _strip_annotated(args[0])
        if get_origin(annotation) is not None:
            raise SchemaError(
                f"Field {owner}.{name}: unsupported element type {annotation}"
            )

    kind = _SCALAR_KINDS.get(annotation)
    if kind is not None:
        return kind, repeated, None

    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return FieldKind.RECORD, repeated, annotation

    raise SchemaError(
        f"Field {owner}.{name}: unsupported type {annotation}. "
        f"Supported: bool, int, bytes, str, nested record, list of those."
    )
