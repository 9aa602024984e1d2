"""DBF header: fixed 32-byte preamble followed by the field descriptor table."""
from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from datetime import date
from functools import cached_property
from typing import BinaryIO, Optional

from dbfreader.dbf.constants import (
    DELETION_FLAG_SIZE,
    FIELD_DESCRIPTOR_SIZE,
    HEADER_PREAMBLE_SIZE,
    YEAR_BASE,
)
from dbfreader.dbf.fields import FieldDescriptor
from dbfreader.errors import MalformedHeaderError

logger = logging.getLogger(__name__)

# version(1) + year(1) + month(1) + day(1) + records(4) + header len(2) + record len(2) + reserved(20)
_PREAMBLE = struct.Struct("<BBBBIHH20x")


@dataclass(frozen=True)
class Header:
    """Parsed DBF header. Immutable once read."""
    version: int
    year: int           # Raw byte: years since 1900
    month: int
    day: int
    record_count: int
    header_length: int  # Declared offset of the first record
    record_length: int  # Includes the 1-byte deletion flag
    fields: tuple[FieldDescriptor, ...] = ()
    data_start: int = 0  # Offset just past the 0x0D terminator

    @classmethod
    def parse(cls, source: BinaryIO) -> Header:
        """Read the preamble and descriptor table, leaving source just past the terminator."""
        raw = source.read(HEADER_PREAMBLE_SIZE)
        if len(raw) < HEADER_PREAMBLE_SIZE:
            raise MalformedHeaderError(
                f"Header truncated: {len(raw)} of {HEADER_PREAMBLE_SIZE} bytes"
            )
        version, year, month, day, record_count, header_length, record_length = _PREAMBLE.unpack(raw)

        fields: list[FieldDescriptor] = []
        while True:
            descriptor = FieldDescriptor.parse(source, len(fields))
            if descriptor is None:
                break
            fields.append(descriptor)

        header = cls(
            version=version,
            year=year,
            month=month,
            day=day,
            record_count=record_count,
            header_length=header_length,
            record_length=record_length,
            fields=tuple(fields),
            data_start=HEADER_PREAMBLE_SIZE + FIELD_DESCRIPTOR_SIZE * len(fields) + 1,
        )
        header._check_layout()
        return header

    def _check_layout(self):
        """Log mismatches between declared lengths and the parsed table."""
        gap = self.header_length - self.data_start
        if gap < 0:
            logger.warning(
                "Declared header length %d is shorter than the field table (%d bytes); "
                "reading records from offset %d",
                self.header_length, self.data_start, self.data_start,
            )
        data_length = self.data_length
        if self.record_length - DELETION_FLAG_SIZE != data_length:
            logger.warning(
                "Declared record length %d does not match field widths %d + %d deletion flag",
                self.record_length, data_length, DELETION_FLAG_SIZE,
            )

    # -- Lookups --

    @property
    def field_count(self) -> int:
        return len(self.fields)

    def field(self, index: int) -> FieldDescriptor:
        """Get the field at a zero-based ordinal."""
        return self.fields[index]

    def field_index(self, name: str) -> Optional[int]:
        """Ordinal of a field by name, or None if the table has no such field."""
        return self._name_lookup.get(name)

    def field_by_name(self, name: str) -> Optional[FieldDescriptor]:
        """Get a field by name, or None if the table has no such field."""
        index = self.field_index(name)
        if index is None:
            return None
        return self.fields[index]

    @cached_property
    def _name_lookup(self) -> dict[str, int]:
        # First occurrence wins for duplicated names
        lookup: dict[str, int] = {}
        for f in self.fields:
            lookup.setdefault(f.name, f.index)
        return lookup

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    # -- Layout --

    @property
    def data_length(self) -> int:
        """Sum of the declared field widths (record length minus deletion flag, when consistent)."""
        return sum(f.length for f in self.fields)

    @property
    def padding_length(self) -> int:
        """Bytes between the terminator and the first record. Never negative."""
        return max(self.header_length - self.data_start, 0)

    @property
    def data_offset(self) -> int:
        """Offset of record 0: the declared header length, but never inside the field table."""
        return max(self.header_length, self.data_start)

    @property
    def record_stride(self) -> int:
        """Bytes per record on disk, flag included. Never shorter than the field widths plus the flag."""
        return max(self.record_length, self.data_length + DELETION_FLAG_SIZE)

    def record_offset(self, index: int) -> int:
        """Absolute byte offset of a record."""
        return self.data_offset + index * self.record_stride

    @property
    def last_update(self) -> Optional[date]:
        """Last update date, or None if the stored bytes do not form a valid date."""
        try:
            return date(YEAR_BASE + self.year, self.month, self.day)
        except ValueError:
            return None
