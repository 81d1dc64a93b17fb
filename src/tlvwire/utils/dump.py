"""Wire inspection helpers.

The format is not self-describing, so these helpers only split a stream into
its top-level entries; interpreting a Value needs the record schema.
"""

from __future__ import annotations

import io
from typing import Iterator

from ..codec.readwriter import Entry, read_entry


def iter_entries(data: bytes) -> Iterator[tuple[int, Entry]]:
    """Yield (offset, entry) for each top-level entry in data.

    Args:
        data: Encoded TLV stream

    Yields:
        Byte offset of the entry and the parsed Entry

    Raises:
        MalformedStreamError: If an entry is truncated
    """
    stream = io.BytesIO(data)
    while True:
        offset = stream.tell()
        entry = read_entry(stream)
        if entry is None:
            return
        yield offset, entry


def dump_entries(data: bytes, max_value_bytes: int = 16) -> list[str]:
    """Format each top-level entry as one line of text.

    Args:
        data: Encoded TLV stream
        max_value_bytes: Value bytes shown before truncating with "..."

    Returns:
        Lines of the form ``@offset tag=T len=L value=hex``

    Example:
        >>> dump_entries(bytes.fromhex("01012a"))
        ['@0000 tag=1 len=1 value=2a']
    """
    lines = []
    for offset, entry in iter_entries(data):
        shown = entry.value[:max_value_bytes].hex()
        if len(entry.value) > max_value_bytes:
            shown += "..."
        lines.append(f"@{offset:04d} tag={entry.tag} len={len(entry.value)} value={shown}")
    return lines
