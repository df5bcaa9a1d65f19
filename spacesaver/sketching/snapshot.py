"""Binary snapshot format for CounterTable.

Layout (big-endian):

    magic     4s   b"SSV1"
    capacity  I
    total     Q
    size      I
    size x {
        length  I
        element bytes[length]
        count   Q
        error   Q
    }

Counters are written in rank order, so restoring needs no sorting: the slot
order and the element index are rebuilt in one pass. The format is
versioned by its magic and is not promised to be readable across versions;
every field is validated on restore.

Elements are converted to bytes by an ElementCodec. The default JSON codec
handles str, int, float and bool keys and tuples of them; supply StringCodec for plain strings
or any object with ``encode``/``decode`` methods for other key types.
"""

from __future__ import annotations

import json
import logging
import struct
from typing import Any, Protocol

from spacesaver.errors import CorruptStateError, InvalidArgumentError
from spacesaver.sketching.counter_table import CounterTable

logger = logging.getLogger(__name__)

SNAPSHOT_MAGIC = b"SSV1"

_HEADER = struct.Struct(">4sIQI")
_LENGTH = struct.Struct(">I")
_COUNTS = struct.Struct(">QQ")

_MAX_U32 = 2**32 - 1
_MAX_U64 = 2**64 - 1


class ElementCodec(Protocol):
    """Converts table elements to and from bytes."""

    def encode(self, item: Any) -> bytes: ...

    def decode(self, data: bytes) -> Any: ...


def _freeze(value: Any) -> Any:
    """Turn JSON arrays back into tuples, recursively."""
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


class JsonCodec:
    """JSON-encodes elements as UTF-8.

    Works for str, int, float, bool and (nested) tuples of those; arrays are
    decoded as tuples so tuple keys stay hashable.
    """

    def encode(self, item: Any) -> bytes:
        return json.dumps(item, separators=(",", ":")).encode("utf-8")

    def decode(self, data: bytes) -> Any:
        return _freeze(json.loads(data.decode("utf-8")))


class StringCodec:
    """Stores str elements as raw UTF-8."""

    def encode(self, item: str) -> bytes:
        return item.encode("utf-8")

    def decode(self, data: bytes) -> str:
        return data.decode("utf-8")


DEFAULT_CODEC = JsonCodec()


def encode(table: CounterTable, codec: ElementCodec = DEFAULT_CODEC) -> bytes:
    """Serialize a table to bytes.

    Args:
        table: The table to snapshot.
        codec: Element codec (JSON by default).

    Returns:
        The snapshot bytes.

    Raises:
        InvalidArgumentError: If the capacity does not fit 32 bits or the
            total count does not fit 64 bits.
    """
    elements = table.elements()
    if table.capacity > _MAX_U32:
        raise InvalidArgumentError(f"capacity {table.capacity} does not fit the snapshot format")
    if table.total_count > _MAX_U64:
        raise InvalidArgumentError(f"total count {table.total_count} exceeds the 64-bit snapshot limit")

    out = bytearray(_HEADER.pack(SNAPSHOT_MAGIC, table.capacity, table.total_count, len(elements)))
    for estimate in elements:
        # error <= count <= total, so the total check bounds both.
        data = codec.encode(estimate.item)
        out += _LENGTH.pack(len(data))
        out += data
        out += _COUNTS.pack(estimate.count, estimate.error)

    logger.debug(
        "Encoded snapshot: capacity=%d size=%d total=%d bytes=%d",
        table.capacity,
        len(elements),
        table.total_count,
        len(out),
    )
    return bytes(out)


def decode(data: bytes, codec: ElementCodec = DEFAULT_CODEC) -> CounterTable:
    """Restore a table from snapshot bytes.

    Raises:
        CorruptStateError: If the header is malformed, the declared size
            exceeds the capacity, fewer counters are present than declared,
            bytes trail the last counter, or the counters do not form a
            valid ranking (duplicates, increasing counts, error > count)
            or sum to more than the declared total.
    """
    view = memoryview(data)
    try:
        magic, capacity, total_count, size = _HEADER.unpack_from(view, 0)
    except struct.error as exc:
        raise CorruptStateError(f"snapshot header truncated ({len(view)} bytes)") from exc

    if magic != SNAPSHOT_MAGIC:
        raise CorruptStateError(f"bad snapshot magic {magic!r}, expected {SNAPSHOT_MAGIC!r}")
    if capacity <= 0:
        raise CorruptStateError(f"snapshot capacity must be positive, got {capacity}")
    if size > capacity:
        raise CorruptStateError(f"snapshot size {size} exceeds capacity {capacity}")

    offset = _HEADER.size
    counters: list[tuple[Any, int, int]] = []
    seen: set[Any] = set()
    previous_count: int | None = None

    for i in range(size):
        try:
            (length,) = _LENGTH.unpack_from(view, offset)
            offset += _LENGTH.size
            raw = view[offset : offset + length].tobytes()
            if len(raw) != length:
                raise struct.error("element truncated")
            offset += length
            count, error = _COUNTS.unpack_from(view, offset)
            offset += _COUNTS.size
        except struct.error as exc:
            raise CorruptStateError(
                f"snapshot declares {size} counters but only {i} are present"
            ) from exc

        try:
            item = codec.decode(raw)
        except (ValueError, TypeError) as exc:
            raise CorruptStateError(f"cannot decode element of counter {i}") from exc

        try:
            if item is None or item in seen:
                raise CorruptStateError(f"duplicate or missing element {item!r} at counter {i}")
            seen.add(item)
        except TypeError as exc:
            raise CorruptStateError(f"element of counter {i} is not hashable") from exc

        if previous_count is not None and count > previous_count:
            raise CorruptStateError(
                f"counter {i} count {count} exceeds its predecessor's {previous_count}"
            )
        if error > count:
            raise CorruptStateError(f"counter {i} error {error} exceeds its count {count}")

        counters.append((item, count, error))
        previous_count = count

    if offset != len(view):
        raise CorruptStateError(f"{len(view) - offset} trailing bytes after last counter")
    counted = sum(count for _, count, _ in counters)
    if total_count < counted:
        raise CorruptStateError(f"total count {total_count} is less than the counters' sum {counted}")

    table = CounterTable._restore(capacity, total_count, counters)
    logger.debug("Decoded snapshot: capacity=%d size=%d total=%d", capacity, size, total_count)
    return table
