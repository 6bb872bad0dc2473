"""Record identifiers, attribute types, scan operators and catalog tuples."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

from .errors import MinirelError, Status

RELCATNAME = "relcat"
ATTRCATNAME = "attrcat"
MAXNAME = 32
MAXSTRINGLEN = 255
MAXNAMESIZE = 50

_ENCODING = "utf-8"
_REL_FORMAT = struct.Struct(f"<{MAXNAME}si")
_ATTR_FORMAT = struct.Struct(f"<{MAXNAME}s{MAXNAME}siii")


class Datatype(IntEnum):
    """Attribute data types."""

    STRING = 0
    INTEGER = 1
    FLOAT = 2


class Operator(IntEnum):
    """Comparison operators used by scans and joins."""

    LT = 0
    LTE = 1
    EQ = 2
    GTE = 3
    GT = 4
    NE = 5


@dataclass(frozen=True, order=True)
class RID:
    """Record identifier: a page number and a slot on that page."""

    page_no: int
    slot_no: int


def _encode_name(name: str) -> bytes:
    raw = name.encode(_ENCODING)
    if len(raw) >= MAXNAME:
        raise MinirelError(Status.NAMETOOLONG)
    return raw


def _decode_name(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode(_ENCODING)


def _check_length(data: bytes, expected: int, what: str) -> None:
    if len(data) != expected:
        raise ValueError(f"{what} record must be {expected} bytes, got {len(data)}")


@dataclass
class RelDesc:
    """A tuple of the relation catalog."""

    rel_name: str
    attr_cnt: int

    def pack(self) -> bytes:
        """Serialize to the fixed-width catalog layout."""
        return _REL_FORMAT.pack(_encode_name(self.rel_name), self.attr_cnt)

    @classmethod
    def unpack(cls, data: bytes) -> RelDesc:
        """Build a descriptor from its catalog bytes."""
        _check_length(data, _REL_FORMAT.size, "relation catalog")
        name, count = _REL_FORMAT.unpack(data)
        return cls(_decode_name(name), count)


@dataclass
class AttrDesc:
    """A tuple of the attribute catalog."""

    rel_name: str
    attr_name: str
    attr_offset: int
    attr_type: Datatype
    attr_len: int

    def pack(self) -> bytes:
        """Serialize to the fixed-width catalog layout."""
        return _ATTR_FORMAT.pack(
            _encode_name(self.rel_name),
            _encode_name(self.attr_name),
            self.attr_offset,
            int(self.attr_type),
            self.attr_len,
        )

    @classmethod
    def unpack(cls, data: bytes) -> AttrDesc:
        """Build a descriptor from its catalog bytes."""
        _check_length(data, _ATTR_FORMAT.size, "attribute catalog")
        rel, attr, offset, type_code, length = _ATTR_FORMAT.unpack(data)
        return cls(
            _decode_name(rel),
            _decode_name(attr),
            offset,
            Datatype(type_code),
            length,
        )


@dataclass
class AttrInfo:
    """An attribute as given by a query: name, type, length and optional value."""

    rel_name: str
    attr_name: str
    attr_type: Datatype
    attr_len: int
    attr_value: bytes | None = None