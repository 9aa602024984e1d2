"""Whole-file helpers built on DbfReader: mapping, processing, and the info report."""
from __future__ import annotations

from typing import Any, Callable, TypeVar

from dbfreader.dbf.constants import YEAR_BASE
from dbfreader.dbf.decoders import Value
from dbfreader.dbf.reader import DbfReader, Source

T = TypeVar("T")

RowMapper = Callable[[list[Value]], T]
RowProcessor = Callable[[list[Value]], Any]

_INDEX_WIDTH = 4
_NAME_WIDTH = 16
_TYPE_WIDTH = 8
_LENGTH_WIDTH = 8
_DECIMAL_WIDTH = 8


def load_data(source: Source, mapper: RowMapper[T]) -> list[T]:
    """Map every live record of a DBF file and return the results in file order."""
    with DbfReader(source) as reader:
        return [mapper(values) for values in reader]


def process_dbf(source: Source, processor: RowProcessor) -> int:
    """Call ``processor`` for every live record. Returns the number of records processed."""
    count = 0
    with DbfReader(source) as reader:
        for values in reader:
            processor(values)
            count += 1
    return count


def read_dbf_info(source: Source) -> str:
    """Build a text report of a DBF header: update date, counts, and the column table."""
    with DbfReader(source) as reader:
        header = reader.header

    lines = [
        f"Created at: {YEAR_BASE + header.year}-{header.month}-{header.day}",
        f"Total records: {header.record_count}",
        f"Header length: {header.header_length}",
        "Columns:",
        "  " + "#".ljust(_INDEX_WIDTH) + "Name".ljust(_NAME_WIDTH) + "Type".ljust(_TYPE_WIDTH)
        + "Length".ljust(_LENGTH_WIDTH) + "Decimal".ljust(_DECIMAL_WIDTH),
        "-" * (_INDEX_WIDTH + _NAME_WIDTH + _TYPE_WIDTH + _LENGTH_WIDTH + _DECIMAL_WIDTH + 2),
    ]
    for f in header.fields:
        lines.append(
            "  " + str(f.index).ljust(_INDEX_WIDTH) + f.name.ljust(_NAME_WIDTH)
            + f.type_tag.ljust(_TYPE_WIDTH) + str(f.length).ljust(_LENGTH_WIDTH)
            + str(f.decimal_count).ljust(_DECIMAL_WIDTH)
        )
    return "\n".join(lines)
