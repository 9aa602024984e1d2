"""Exceptions raised while reading DBF files."""
from __future__ import annotations

from typing import Optional


class DbfError(Exception):
    """Base class for DBF errors.

    Carries the field name and zero-based record position when known, so a
    message is enough to locate the problem in the source file.
    """

    def __init__(self, message: str, *, field: Optional[str] = None, record: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.record = record

    def __str__(self) -> str:
        context = []
        if self.field is not None:
            context.append(f"field {self.field!r}")
        if self.record is not None:
            context.append(f"record {self.record}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class DbfIOError(DbfError):
    """Underlying read or seek failed."""


class MalformedHeaderError(DbfError):
    """Header preamble is truncated or the field table is never terminated."""


class MalformedFieldError(DbfError):
    """Field descriptor or field value is structurally invalid."""


class UnknownFieldTypeError(MalformedFieldError):
    """Field descriptor declares a type tag this reader does not decode."""


class NumberFormatError(DbfError, ValueError):
    """Float/Numeric text is not blank, not unset and not a decimal literal."""


class UnknownMemoEncodingError(DbfError):
    """Memo field width is neither 4 nor 10 bytes."""


class SeekUnsupportedError(DbfError):
    """Source cannot be positioned randomly."""


class IndexOutOfRangeError(DbfError, IndexError):
    """Record index outside [0, record_count)."""


class ClosedError(DbfError):
    """Operation attempted on a closed reader."""


class FieldNotFoundError(DbfError, LookupError):
    """Row lookup by an unknown column name."""
