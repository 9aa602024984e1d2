"""Export records as fixed-width plain text."""
from __future__ import annotations

import io
from itertools import islice

from dbfreader.dbf.reader import DbfReader
from dbfreader.export.values import format_value


def export_txt(reader: DbfReader, limit: int | None = None) -> str:
    """Export remaining records as padded columns, one line per record.

    Each column is as wide as the larger of the field's declared length and
    its name; longer values are written in full.
    """
    fields = reader.header.fields
    widths = [max(f.length, len(f.name)) for f in fields]

    output = io.StringIO()
    output.write(" ".join(f.name.ljust(w) for f, w in zip(fields, widths)).rstrip())
    output.write("\n")

    for values in islice(reader, limit):
        cells = [format_value(v, reader.encoding).ljust(w) for v, w in zip(values, widths)]
        output.write(" ".join(cells).rstrip())
        output.write("\n")

    return output.getvalue()
