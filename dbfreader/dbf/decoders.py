"""Per-type value decoders for DBF record fields.

Each decoder takes the field descriptor and the raw bytes sliced from the
record at the field's declared width:

  C  Character  raw bytes, charset left to the caller
  D  Date       YYYYMMDD ASCII digits, None when blank or all zeroes
  F  Float      ASCII decimal, single precision, None when blank or '?'
  L  Logical    True for Y/y/T/t, False otherwise
  N  Numeric    ASCII decimal, double precision, None when blank or '?'
  I  Integer    little-endian signed 32-bit
  M  Memo       block number into the memo file: int32 (4 bytes) or ASCII (10 bytes)
"""
from __future__ import annotations

import math
import re
import struct
from datetime import date, timedelta
from typing import Callable, Optional, Union

from dbfreader.dbf.constants import (
    INTEGER_LENGTH,
    LOGICAL_TRUE,
    MEMO_BINARY_LENGTH,
    MEMO_TEXT_LENGTH,
    NUMERIC_UNSET_MARKER,
)
from dbfreader.dbf.fields import FieldDescriptor, FieldType
from dbfreader.errors import MalformedFieldError, NumberFormatError, UnknownMemoEncodingError


Value = Union[bytes, date, float, bool, int, None]

_INT32 = struct.Struct("<i")
_FLOAT32 = struct.Struct("<f")

_DECIMAL_RE = re.compile(rb"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_PAD = b" \t\r\n\x00"


def decode_value(field: FieldDescriptor, buf: bytes) -> Value:
    """Decode one field's raw bytes according to its type."""
    return _DECODERS[field.type](field, buf)


def decode_record(fields: tuple[FieldDescriptor, ...], data: bytes) -> list[Value]:
    """Decode all fields of a record body (deletion flag already stripped)."""
    values = []
    offset = 0
    for f in fields:
        values.append(decode_value(f, data[offset:offset + f.length]))
        offset += f.length
    return values


def decode_text(value: bytes, encoding: str) -> str:
    """Decode Character bytes, trimming the space and NUL padding on the right."""
    return bytes(value).decode(encoding, errors="replace").rstrip(" \x00")


# -- Shared numeric text handling --

def numeric_text(field: FieldDescriptor, buf: bytes) -> Optional[bytes]:
    """Trim padding and validate a decimal literal.

    Returns None for blank text or text carrying the '?' unset marker, the
    trimmed literal otherwise. Leading zeros are accepted.
    """
    text = buf.strip(_PAD)
    if not text or NUMERIC_UNSET_MARKER in text:
        return None
    if _DECIMAL_RE.fullmatch(text) is None:
        raise NumberFormatError(
            f"Invalid {field.type.name.lower()} literal {text!r}", field=field.name
        )
    return text


def _to_float32(value: float) -> float:
    """Round a double to the nearest single-precision value."""
    try:
        return _FLOAT32.unpack(_FLOAT32.pack(value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


# -- Decoders --

def _decode_character(field: FieldDescriptor, buf: bytes) -> bytes:
    return bytes(buf)


def _decode_date(field: FieldDescriptor, buf: bytes) -> Optional[date]:
    if not buf.strip(b" 0\x00"):
        return None
    year = _parse_digits(field, buf[0:4])
    month = _parse_digits(field, buf[4:6])
    day = _parse_digits(field, buf[6:8])
    return _lenient_date(field, year, month, day)


def _parse_digits(field: FieldDescriptor, part: bytes) -> int:
    """Parse an ASCII digit group; spaces are ignored and an empty group is 0."""
    digits = part.replace(b" ", b"")
    if not digits:
        return 0
    if not digits.isdigit():
        raise MalformedFieldError(f"Invalid date digits {part!r}", field=field.name)
    return int(digits)


def _lenient_date(field: FieldDescriptor, year: int, month: int, day: int) -> date:
    """Build a date, rolling out-of-range months and days into neighbouring ones.

    Month 0 is December of the previous year and day 0 is the last day of the
    previous month, so 20230230 becomes 2023-03-02.
    """
    month0 = month - 1
    year += month0 // 12
    month0 %= 12
    try:
        return date(year, month0 + 1, 1) + timedelta(days=day - 1)
    except (ValueError, OverflowError):
        raise MalformedFieldError(
            f"Date out of range: {year:04d}-{month0 + 1:02d}-{day:02d}", field=field.name
        ) from None


def _decode_float(field: FieldDescriptor, buf: bytes) -> Optional[float]:
    text = numeric_text(field, buf)
    if text is None:
        return None
    return _to_float32(float(text))


def _decode_numeric(field: FieldDescriptor, buf: bytes) -> Optional[float]:
    text = numeric_text(field, buf)
    if text is None:
        return None
    return float(text)


def _decode_logical(field: FieldDescriptor, buf: bytes) -> bool:
    return len(buf) > 0 and buf[0] in LOGICAL_TRUE


def _decode_integer(field: FieldDescriptor, buf: bytes) -> int:
    if len(buf) != INTEGER_LENGTH:
        raise MalformedFieldError(
            f"Integer field must be {INTEGER_LENGTH} bytes, got {len(buf)}", field=field.name
        )
    return _INT32.unpack(buf)[0]


def _decode_memo(field: FieldDescriptor, buf: bytes) -> Optional[int]:
    if field.length == MEMO_BINARY_LENGTH:
        if len(buf) != MEMO_BINARY_LENGTH:
            raise MalformedFieldError(
                f"Memo link truncated: {len(buf)} of {MEMO_BINARY_LENGTH} bytes", field=field.name
            )
        return _INT32.unpack(buf)[0]
    if field.length == MEMO_TEXT_LENGTH:
        text = numeric_text(field, buf)
        if text is None:
            return None
        if not text.isdigit():
            raise NumberFormatError(f"Invalid memo block number {text!r}", field=field.name)
        return int(text)
    raise UnknownMemoEncodingError(
        f"Memo field width must be {MEMO_BINARY_LENGTH} or {MEMO_TEXT_LENGTH}, got {field.length}",
        field=field.name,
    )


_DECODERS: dict[FieldType, Callable[[FieldDescriptor, bytes], Value]] = {
    FieldType.CHARACTER: _decode_character,
    FieldType.DATE: _decode_date,
    FieldType.FLOAT: _decode_float,
    FieldType.LOGICAL: _decode_logical,
    FieldType.NUMERIC: _decode_numeric,
    FieldType.INTEGER: _decode_integer,
    FieldType.MEMO: _decode_memo,
}
