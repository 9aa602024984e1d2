"""Field types and the 32-byte field descriptor."""
from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Optional

from dbfreader.dbf.constants import FIELD_DESCRIPTOR_SIZE, HEADER_TERMINATOR
from dbfreader.errors import MalformedFieldError, MalformedHeaderError, UnknownFieldTypeError


# Descriptor minus its first name byte, which is read separately to detect the terminator:
# name(10) + type(1) + reserved(4) + length(1) + decimals(1) + reserved/work area(13) + index flag(1)
_DESCRIPTOR_TAIL = struct.Struct("<10sc4xBb13xB")


class FieldType(Enum):
    """Column types understood by the decoder, keyed by their ASCII tag."""
    CHARACTER = "C"
    DATE = "D"
    FLOAT = "F"
    LOGICAL = "L"
    NUMERIC = "N"
    INTEGER = "I"
    MEMO = "M"

    @property
    def tag(self) -> str:
        return self.value

    @classmethod
    def from_tag(cls, tag: bytes, field_name: Optional[str] = None) -> FieldType:
        """Resolve a raw type byte, failing for tags outside the supported set."""
        try:
            return cls(tag.decode("ascii"))
        except (UnicodeDecodeError, ValueError):
            raise UnknownFieldTypeError(f"Unknown field type {tag!r}", field=field_name) from None


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """One column of a DBF table."""
    name: str
    type: FieldType
    length: int        # Declared byte width of the value in each record
    decimal_count: int  # Only meaningful for Numeric/Float
    index: int         # Ordinal position in the descriptor table
    index_flag: int = 0

    @classmethod
    def parse(cls, source: BinaryIO, index: int) -> Optional[FieldDescriptor]:
        """Read one descriptor, or return None when the table terminator is found.

        The first byte is inspected on its own: 0x0D in place of a name byte ends
        the table regardless of what the header length claims.
        """
        first = source.read(1)
        if not first:
            raise MalformedHeaderError(
                f"Field table ended without terminator after {index} field(s)"
            )
        if first[0] == HEADER_TERMINATOR:
            return None

        tail = source.read(_DESCRIPTOR_TAIL.size)
        if len(tail) < _DESCRIPTOR_TAIL.size:
            raise MalformedFieldError(
                f"Field descriptor {index} truncated: "
                f"{len(tail) + 1} of {FIELD_DESCRIPTOR_SIZE} bytes"
            )

        name_rest, type_tag, length, decimal_count, index_flag = _DESCRIPTOR_TAIL.unpack(tail)
        name = _decode_name(first + name_rest)
        if not name:
            raise MalformedFieldError(f"Field descriptor {index} has an empty name")

        return cls(
            name=name,
            type=FieldType.from_tag(type_tag, name),
            length=length,
            decimal_count=decimal_count,
            index=index,
            index_flag=index_flag,
        )

    @property
    def type_tag(self) -> str:
        return self.type.tag


def _decode_name(raw: bytes) -> str:
    """Decode a zero-padded 11-byte name, keeping the bytes before the first NUL."""
    end = raw.find(b"\x00")
    if end != -1:
        raw = raw[:end]
    return raw.decode("latin-1").rstrip()
