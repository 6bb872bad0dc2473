"""Hash table over join attribute values, and comparison of join attributes."""

from __future__ import annotations

import math
import struct
from typing import Union

from .records import RID, AttrDesc, Datatype

_INT = struct.Struct("<i")
_FLOAT = struct.Struct("<f")

JoinKey = Union[int, float, bytes]
BytesLike = Union[bytes, bytearray, memoryview]


def _wrap32(value: int) -> int:
    """Reduce an integer to a signed 32-bit value."""
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= (1 << 31) else value


def _c_string(data: bytes, offset: int, limit: int | None = None) -> bytes:
    """Bytes from offset up to the first NUL, at most limit bytes."""
    end = len(data) if limit is None else min(len(data), offset + limit)
    return data[offset:end].split(b"\0", 1)[0]


def _to_float32(value: float) -> float:
    return _FLOAT.unpack(_FLOAT.pack(value))[0]


class JoinHashTable:
    """Chained hash table mapping join attribute values to record identifiers.

    Tuples of the outer relation are inserted; values of the inner relation's
    join attribute are then looked up to find the matching outer records.
    """

    def __init__(self, size: int, attr: AttrDesc) -> None:
        if size < 1:
            raise ValueError("hash table size must be positive")
        self.size = size
        self.attr = attr
        self._chains: list[list[tuple[JoinKey, RID]]] = [[] for _ in range(size)]

    def __len__(self) -> int:
        return sum(len(chain) for chain in self._chains)

    def _key_from_bytes(self, raw: bytes) -> JoinKey:
        attr_type = self.attr.attr_type
        if attr_type == Datatype.STRING:
            return _c_string(raw, 0, self.attr.attr_len)
        fmt = _INT if attr_type == Datatype.INTEGER else _FLOAT
        if len(raw) < fmt.size:
            raise ValueError(
                f"join attribute needs {fmt.size} bytes, got {len(raw)}"
            )
        return fmt.unpack_from(raw)[0]

    def _coerce(self, value: BytesLike | int | float | str) -> JoinKey:
        if isinstance(value, (bytes, bytearray, memoryview)):
            return self._key_from_bytes(bytes(value))
        attr_type = self.attr.attr_type
        if attr_type == Datatype.INTEGER and isinstance(value, int):
            return _wrap32(value)
        if attr_type == Datatype.FLOAT and isinstance(value, (int, float)):
            return _to_float32(float(value))
        if attr_type == Datatype.STRING and isinstance(value, str):
            return _c_string(value.encode("utf-8"), 0, self.attr.attr_len)
        raise TypeError(
            f"value of type {type(value).__name__} does not match "
            f"attribute type {Datatype(attr_type).name}"
        )

    def _index(self, key: JoinKey) -> int:
        attr_type = self.attr.attr_type
        if attr_type == Datatype.INTEGER:
            value = _wrap32(int(key) * self.size * 31)
        elif attr_type == Datatype.FLOAT:
            scaled = float(key) * self.size * 31
            value = _wrap32(int(scaled)) if math.isfinite(scaled) else 0
        else:
            value = 0
            for byte in key:  # type: ignore[union-attr]
                value = _wrap32(31 * value + byte)
        return abs(value) % self.size

    def insert(self, rid: RID, tuple_data: BytesLike) -> None:
        """Add a tuple's join attribute value with the tuple's identifier."""
        data = bytes(tuple_data)
        offset = self.attr.attr_offset
        if offset < 0 or offset + self.attr.attr_len > len(data):
            raise ValueError("join attribute lies beyond the end of the tuple")
        key = self._key_from_bytes(data[offset : offset + self.attr.attr_len])
        self._chains[self._index(key)].insert(0, (key, rid))

    def lookup(self, value: BytesLike | int | float | str) -> list[RID]:
        """Return the identifiers of inserted tuples whose join value equals value."""
        key = self._coerce(value)
        return [rid for stored, rid in self._chains[self._index(key)] if stored == key]


def compare_join_values(
    outer: BytesLike, inner: BytesLike, attr1: AttrDesc, attr2: AttrDesc
) -> int:
    """Compare the join attribute of two records.

    The result is negative, zero or positive as the outer value is less than,
    equal to or greater than the inner one; floats compare by the truncated
    difference.
    """
    outer_data = bytes(outer)
    inner_data = bytes(inner)
    attr_type = attr1.attr_type
    if attr_type == Datatype.INTEGER:
        left = _INT.unpack_from(outer_data, attr1.attr_offset)[0]
        right = _INT.unpack_from(inner_data, attr2.attr_offset)[0]
        return left - right
    if attr_type == Datatype.FLOAT:
        left = _FLOAT.unpack_from(outer_data, attr1.attr_offset)[0]
        right = _FLOAT.unpack_from(inner_data, attr2.attr_offset)[0]
        return int(left - right)
    if attr_type == Datatype.STRING:
        left_s = _c_string(outer_data, attr1.attr_offset)
        right_s = _c_string(inner_data, attr2.attr_offset)
        return (left_s > right_s) - (left_s < right_s)
    return 0