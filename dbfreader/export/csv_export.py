"""Export records as CSV."""
from __future__ import annotations

import csv
import io
from itertools import islice

from dbfreader.dbf.reader import DbfReader
from dbfreader.export.values import format_value


def export_csv(reader: DbfReader, limit: int | None = None) -> str:
    """Export the reader's remaining records as a CSV string with a header row."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(reader.header.field_names)

    for values in islice(reader, limit):
        writer.writerow([format_value(v, reader.encoding) for v in values])

    return output.getvalue()
