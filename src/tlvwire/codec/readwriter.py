"""Entry-level stream reader and writer contracts.

The Reader parses one (Type, Value) entry at a time from any binary file-like
object and supports a single entry of lookahead via peek(). The decoder uses
that lookahead to test whether an optional or repeated field is present
without consuming an entry that belongs to the next field.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional, Protocol, Type, TypeVar, runtime_checkable

from ..exceptions import MalformedStreamError
from .varwidth import read_compact

D = TypeVar("D", bound="Decodable")

# Value bytes are pulled in slices of at most this size
READ_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class Entry:
    """A single wire entry.

    Attributes:
        tag: Type field of the entry
        value: Raw Value bytes (Length is len(value))
    """

    tag: int
    value: bytes


class Writer(Protocol):
    """Append-only raw byte sink (io.BytesIO, open files, socket files...)."""

    def write(self, data: bytes) -> object: ...


@runtime_checkable
class Encodable(Protocol):
    """A value that can emit itself to a Writer.

    With tag=None only the record body is written; otherwise the body is wrapped
    in a single entry carrying that tag.
    """

    def write_to(self, writer: Writer, tag: Optional[int] = None) -> None: ...


@runtime_checkable
class Decodable(Protocol):
    """A type that can build an instance of itself from a Reader."""

    @classmethod
    def read_from(cls: Type[D], reader: Reader, tag: Optional[int] = None) -> D: ...


def read_entry(stream: BinaryIO) -> Optional[Entry]:
    """Parse one entry from a binary stream.

    Args:
        stream: Binary file-like object

    Returns:
        The parsed entry, or None if the stream ended cleanly before it

    Raises:
        MalformedStreamError: If the entry is truncated or its Length runs
            past the end of the stream
    """
    tag = read_compact(stream)
    if tag is None:
        return None

    length = read_compact(stream)
    if length is None:
        raise MalformedStreamError(f"unexpected end of stream after tag {tag}")

    value = _read_value(stream, length)
    if len(value) != length:
        raise MalformedStreamError(
            f"entry {tag}: length {length} exceeds remaining {len(value)} bytes"
        )
    return Entry(tag, value)


def _read_value(stream: BinaryIO, length: int) -> bytes:
    """Read up to length bytes without trusting length for the allocation."""
    chunks = []
    remaining = length
    while remaining:
        chunk = stream.read(min(remaining, READ_CHUNK_SIZE))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


class Reader:
    """Pull-style entry reader with one entry of lookahead.

    Example:
        >>> reader = Reader(io.BytesIO(data))
        >>> reader.peek()
        255
        >>> reader.peek()  # does not advance
        255
        >>> entry = reader.read()
        >>> entry.tag, entry.value
        (255, b'\\xff')
    """

    def __init__(self, stream: BinaryIO) -> None:
        """Initialize a reader over a binary stream.

        Args:
            stream: Binary file-like object providing read(n)
        """
        self._stream = stream
        self._pending: Optional[Entry] = None
        self._exhausted = False
        self.failure: Optional[MalformedStreamError] = None

    @classmethod
    def from_bytes(cls, data: bytes) -> Reader:
        """Create a reader over an in-memory buffer."""
        return cls(io.BytesIO(data))

    def _fill(self) -> None:
        if self._pending is not None or self._exhausted or self.failure is not None:
            return
        try:
            entry = read_entry(self._stream)
        except MalformedStreamError as err:
            self.failure = err
            return
        if entry is None:
            self._exhausted = True
        else:
            self._pending = entry

    def peek(self) -> Optional[int]:
        """Return the tag of the next entry without consuming it.

        The entry is parsed once and cached; repeated calls return the same tag.

        Returns:
            The next tag, or None at end of stream or after a parse failure
            (see the failure attribute)
        """
        self._fill()
        if self._pending is None:
            return None
        return self._pending.tag

    def read(self) -> Entry:
        """Consume and return the next entry.

        Raises:
            MalformedStreamError: If the entry is corrupt or the stream has ended
        """
        self._fill()
        if self.failure is not None:
            raise self.failure
        if self._pending is None:
            raise MalformedStreamError("unexpected end of stream")
        entry, self._pending = self._pending, None
        return entry

    def __iter__(self) -> Iterator[Entry]:
        while self.peek() is not None:
            yield self.read()
        if self.failure is not None:
            raise self.failure


def copy(dst: Type[D], src: Encodable, tag: Optional[int] = None) -> D:
    """Decode a new dst instance from the encoding of src.

    src is fully encoded into an in-memory buffer, which is then read back
    through a fresh Reader. This bridges push-style encoding and pull-style
    decoding when there is no live stream between two endpoints.

    Args:
        dst: Decodable type to build
        src: Encodable value to read from
        tag: Outer tag to wrap the record in, or None for a bare body

    Returns:
        The decoded dst instance

    Example:
        >>> clone = copy(Status, status)
        >>> clone == status
        True
    """
    buf = io.BytesIO()
    src.write_to(buf, tag)
    buf.seek(0)
    return dst.read_from(Reader(buf), tag)
