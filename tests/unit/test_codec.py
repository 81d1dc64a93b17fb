"""Unit tests for encoding/decoding."""

from __future__ import annotations

import logging
import struct
from typing import ClassVar, Literal, Optional

import pytest

from tlvwire import (
    BaseRecord,
    DecodeError,
    EncodeError,
    MalformedStreamError,
    Reader,
    SchemaMismatchError,
    TlvField,
    Uint64,
    UnsupportedKindError,
    Writer,
    decode,
    encode,
    encode_value,
)


class SimpleRecord(BaseRecord):
    """Two non-optional scalar fields."""

    number: Uint64 = TlvField(tag=1)
    text: str = TlvField(tag=2)


class WithOptional(BaseRecord):
    """Record with an optional trailing field."""

    number: Uint64 = TlvField(tag=1)
    note: str = TlvField(tag=2, optional=True)


class WithoutOptional(BaseRecord):
    """Same as WithOptional with the optional field removed."""

    number: Uint64 = TlvField(tag=1)


class NumberList(BaseRecord):
    """Repeated unsigned integers."""

    values: list[Uint64] = TlvField(tag=9)


class Blob(BaseRecord):
    """Raw bytes field."""

    payload: bytes = TlvField(tag=7)


class Flags(BaseRecord):
    """Presence-only booleans."""

    a: bool = TlvField(tag=1)
    b: bool = TlvField(tag=2, optional=True)


class FlagList(BaseRecord):
    """Repeated presence-only booleans."""

    flags: list[bool] = TlvField(tag=1)


class Inner(BaseRecord):
    """Innermost nested record."""

    x: Uint64 = TlvField(tag=1)
    label: str = TlvField(tag=2, optional=True)


class Outer(BaseRecord):
    """One level of nesting."""

    inner: Inner = TlvField(tag=5)
    spare: Inner = TlvField(tag=6, optional=True)


class Middle(BaseRecord):
    """Optional nested record holding optional fields."""

    inner: Inner = TlvField(tag=1, optional=True)
    count: Uint64 = TlvField(tag=2, optional=True)


class Top(BaseRecord):
    """Two levels of nesting."""

    middle: Middle = TlvField(tag=3, optional=True)
    ident: Uint64 = TlvField(tag=4)


class PlainInt(BaseRecord):
    """Unbounded int annotation, range-checked by the encoder."""

    n: int = TlvField(tag=1)


class Lenient(SimpleRecord):
    """SimpleRecord that skips unknown trailing entries."""

    tlv_extra: ClassVar[Literal["forbid", "ignore"]] = "ignore"


class Limited(BaseRecord):
    """Record with an encoded size limit."""

    text: str = TlvField(tag=1)

    tlv_max_bytes: ClassVar[Optional[int]] = 8


class PackedPoint(BaseRecord):
    """Record with a hand-written wire format: two u32 in one entry."""

    x: Uint64 = TlvField(tag=1)
    y: Uint64 = TlvField(tag=2)

    def write_to(self, writer: Writer, tag: Optional[int] = None) -> None:
        body = struct.pack(">II", self.x, self.y)
        if tag is None:
            writer.write(body)
        else:
            writer.write(bytes((tag, len(body))) + body)

    @classmethod
    def read_from(cls, reader: Reader, tag: Optional[int] = None) -> PackedPoint:
        entry = reader.read()
        x, y = struct.unpack(">II", entry.value)
        return cls(x=x, y=y)


class Track(BaseRecord):
    """List of hand-encoded nested records."""

    points: list[PackedPoint] = TlvField(tag=3)


class TestEncode:
    """Test the wire layout produced by the encoder."""

    def test_simple_record(self, sample_stream: bytes) -> None:
        """Test field order and entry layout."""
        assert encode(SimpleRecord(number=42, text="hi")) == sample_stream

    def test_non_optional_zero_is_emitted(self) -> None:
        """Test that non-optional fields are written even at zero."""
        assert encode(SimpleRecord()) == b"\x01\x01\x00\x02\x00"

    def test_optional_zero_is_omitted(self) -> None:
        """Test that a zero optional field matches a structurally absent one."""
        with_optional = encode(WithOptional(number=5))
        assert with_optional == encode(WithoutOptional(number=5))
        assert with_optional == b"\x01\x01\x05"

    def test_optional_non_zero_is_emitted(self) -> None:
        """Test that a set optional field is written."""
        assert encode(WithOptional(number=5, note="x")) == b"\x01\x01\x05\x02\x01x"

    def test_list_repetition(self) -> None:
        """Test that each list element is its own entry with the shared tag."""
        data = encode(NumberList(values=[10, 20, 30]))
        assert data == b"\x09\x01\x0a\x09\x01\x14\x09\x01\x1e"

    def test_empty_list(self) -> None:
        """Test that an empty list writes nothing."""
        assert encode(NumberList()) == b""

    def test_raw_bytes_single_entry(self) -> None:
        """Test that raw bytes are one Length+bytes entry."""
        assert encode(Blob(payload=b"\x01\x02\x03")) == b"\x07\x03\x01\x02\x03"

    def test_bool_presence(self) -> None:
        """Test that True is tag + zero length and False is absent."""
        assert encode(Flags(a=True)) == b"\x01\x00"
        assert encode(Flags(a=False)) == b""
        assert encode(Flags(a=True, b=True)) == b"\x01\x00\x02\x00"

    def test_nested_record(self) -> None:
        """Test that a nested record is length-prefixed under the field tag."""
        assert encode(Outer(inner=Inner(x=1))) == b"\x05\x03\x01\x01\x01"

    def test_recursively_zero_nested_is_omitted(self) -> None:
        """Test that an all-zero nested optional record is left out."""
        record = Top(ident=1, middle=Middle(inner=Inner(x=0)))
        assert encode(record) == b"\x04\x01\x01"

    def test_text_is_utf8(self) -> None:
        """Test that text lengths count encoded bytes, not characters."""
        data = encode(SimpleRecord(number=0, text="é"))
        assert data.endswith(b"\x02\x02\xc3\xa9")

    def test_wrapped_in_outer_tag(self) -> None:
        """Test that a tag wraps the body in a single entry."""
        data = encode(SimpleRecord(number=1), tag=1)
        assert data == b"\x01\x05\x01\x01\x01\x02\x00"

    def test_long_body_uses_escaped_length(self) -> None:
        """Test that lengths above 252 use Compact Width escapes."""
        data = encode(Blob(payload=b"\xaa" * 300))
        assert data[:4] == b"\x07\xfd\x01\x2c"
        assert len(data) == 4 + 300

    def test_custom_write_to_is_used_for_nested(self) -> None:
        """Test that a record type's own write_to encodes its nested entries."""
        data = encode(Track(points=[PackedPoint(x=1, y=2)]))
        assert data == b"\x03\x08" + struct.pack(">II", 1, 2)


class TestEncodeValue:
    """Test the kind dispatch used for single values."""

    def test_list_of_strings(self) -> None:
        """Test that lists of text repeat the tag."""
        assert encode_value(["a", "bc"], 4) == b"\x04\x01a\x04\x02bc"

    def test_bytearray_is_raw_bytes(self) -> None:
        """Test that bytearray is treated like bytes."""
        assert encode_value(bytearray(b"\x00\x01"), 2) == b"\x02\x02\x00\x01"

    @pytest.mark.parametrize("value,kind", [(1.5, "float"), ({"a": 1}, "dict"), (None, "NoneType")])
    def test_unsupported_kind(self, value: object, kind: str) -> None:
        """Test that unsupported kinds are rejected by name."""
        with pytest.raises(UnsupportedKindError, match=kind) as exc_info:
            encode_value(value, 1)
        assert exc_info.value.kind == kind

    def test_integer_out_of_range(self) -> None:
        """Test error on integers that do not fit 64 bits."""
        with pytest.raises(EncodeError):
            encode(PlainInt(n=1 << 64))

    def test_max_bytes_enforced(self) -> None:
        """Test the tlv_max_bytes class limit."""
        assert encode(Limited(text="abcdef")) == b"\x01\x06abcdef"
        with pytest.raises(EncodeError, match="tlv_max_bytes=8"):
            encode(Limited(text="abcdefg"))


class TestDecode:
    """Test decoding back to records."""

    def test_simple_record(self, sample_stream: bytes) -> None:
        """Test basic decode."""
        decoded = decode(SimpleRecord, sample_stream)
        assert decoded.number == 42
        assert decoded.text == "hi"

    def test_optional_absent(self) -> None:
        """Test that a missing optional field decodes as zero."""
        decoded = decode(WithOptional, b"\x01\x01\x05")
        assert decoded == WithOptional(number=5, note="")

    def test_empty_list(self) -> None:
        """Test that no matching entries yield an empty list."""
        assert decode(NumberList, b"").values == []

    def test_list_slurp(self) -> None:
        """Test that consecutive entries with the list tag are collected."""
        data = encode(NumberList(values=[1, 300, 70000]))
        assert decode(NumberList, data).values == [1, 300, 70000]

    def test_bool_absent_is_false(self) -> None:
        """Test that a non-optional bool without an entry is False."""
        assert decode(Flags, b"") == Flags(a=False, b=False)
        assert decode(Flags, b"\x02\x00") == Flags(a=False, b=True)

    def test_bool_list_drops_false(self) -> None:
        """Test that False elements of a bool list have no wire form."""
        data = encode(FlagList(flags=[True, False, True]))
        assert data == b"\x01\x00\x01\x00"
        assert decode(FlagList, data).flags == [True, True]

    def test_nested_two_levels(self) -> None:
        """Test round-trip through two levels of nesting."""
        record = Top(ident=9, middle=Middle(inner=Inner(x=300, label="deep"), count=2))
        assert decode(Top, encode(record)) == record

    def test_nested_zero_round_trip(self) -> None:
        """Test that an omitted nested record comes back all-zero."""
        decoded = decode(Top, b"\x04\x01\x01")
        assert decoded.middle.is_zero()
        assert decoded.ident == 1

    def test_wrapped(self) -> None:
        """Test decoding a body wrapped in an outer tag."""
        record = SimpleRecord(number=1, text="a")
        assert decode(SimpleRecord, encode(record, tag=77), tag=77) == record

    def test_wrapped_wrong_tag(self) -> None:
        """Test error when the outer tag differs."""
        data = encode(SimpleRecord(), tag=1)
        with pytest.raises(SchemaMismatchError, match="expected tag 2, found tag 1"):
            decode(SimpleRecord, data, tag=2)

    def test_custom_read_from_is_used_for_nested(self) -> None:
        """Test that a record type's own read_from decodes its nested entries."""
        track = Track(points=[PackedPoint(x=1, y=2), PackedPoint(x=3, y=4)])
        assert decode(Track, encode(track)) == track


class TestDecodeErrors:
    """Test decode error handling."""

    def test_missing_required_field(self) -> None:
        """Test error when a non-optional field's tag is not next."""
        with pytest.raises(SchemaMismatchError, match="number: expected tag 1, found tag 2"):
            decode(SimpleRecord, b"\x02\x00")

    def test_required_field_at_end(self) -> None:
        """Test error when the stream ends before a non-optional field."""
        with pytest.raises(SchemaMismatchError, match="found end of stream"):
            decode(SimpleRecord, b"\x01\x01\x05")

    def test_trailing_entries_rejected(self) -> None:
        """Test that leftover entries are rejected by default."""
        data = encode(SimpleRecord()) + b"\x09\x00"
        with pytest.raises(SchemaMismatchError, match="trailing entry with tag 9"):
            decode(SimpleRecord, data)

    def test_trailing_entries_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test the ignore policy for leftover entries."""
        caplog.set_level(logging.DEBUG, logger="tlvwire.codec.decoder")
        data = encode(SimpleRecord()) + b"\x09\x01\x01"

        assert decode(SimpleRecord, data, extra="ignore") == SimpleRecord()
        assert "ignoring trailing entry tag 9" in caplog.text

    def test_class_level_extra_policy(self) -> None:
        """Test that tlv_extra on the class selects the policy."""
        data = encode(SimpleRecord(number=3)) + b"\x09\x00"
        assert decode(Lenient, data).number == 3

        with pytest.raises(SchemaMismatchError):
            decode(Lenient, data, extra="forbid")

    def test_invalid_extra_policy(self) -> None:
        """Test error on an unknown policy name."""
        with pytest.raises(ValueError, match="extra must be"):
            decode(SimpleRecord, encode(SimpleRecord()), extra="skip")  # type: ignore[arg-type]

    def test_trailing_entries_in_nested_body(self) -> None:
        """Test that a nested body must be fully consumed."""
        # Inner body carries an extra tag-9 entry after x
        data = b"\x05\x05\x01\x01\x01\x09\x00"
        with pytest.raises(SchemaMismatchError, match="Inner"):
            decode(Outer, data)

    def test_length_overruns_input(self) -> None:
        """Test error when Length exceeds the remaining bytes."""
        with pytest.raises(MalformedStreamError, match="exceeds remaining"):
            decode(SimpleRecord, b"\x01\x05\x01")

    def test_length_beyond_addressable_size(self) -> None:
        """Test error on an 8-byte Length larger than any buffer."""
        with pytest.raises(MalformedStreamError, match="exceeds remaining 0 bytes"):
            decode(SimpleRecord, b"\x02\xff" + b"\xff" * 8)

    def test_truncated_escape(self) -> None:
        """Test error on a truncated Compact Width escape."""
        with pytest.raises(MalformedStreamError, match="truncated"):
            decode(SimpleRecord, b"\xfd\x01")

    def test_missing_length(self) -> None:
        """Test error when the stream ends between Type and Length."""
        with pytest.raises(MalformedStreamError, match="after tag 1"):
            decode(SimpleRecord, b"\x01")

    def test_corrupt_optional_tail(self) -> None:
        """Test that corruption is reported even where a field is optional."""
        with pytest.raises(MalformedStreamError):
            decode(WithOptional, b"\x01\x01\x05\x02\x09ab")

    def test_invalid_uint_width(self) -> None:
        """Test error on an integer payload of width 3."""
        with pytest.raises(MalformedStreamError, match="width 3"):
            decode(SimpleRecord, b"\x01\x03\x00\x00\x01\x02\x00")

    def test_invalid_utf8(self) -> None:
        """Test error on text that is not UTF-8."""
        with pytest.raises(MalformedStreamError, match="UTF-8"):
            decode(SimpleRecord, b"\x01\x01\x00\x02\x01\xff")

    def test_bool_with_value(self) -> None:
        """Test error on a bool entry that carries value bytes."""
        with pytest.raises(MalformedStreamError, match="length 0"):
            decode(Flags, b"\x01\x01\x00")

    def test_errors_share_base(self) -> None:
        """Test that stream and schema errors are DecodeErrors."""
        assert issubclass(MalformedStreamError, DecodeError)
        assert issubclass(SchemaMismatchError, DecodeError)
