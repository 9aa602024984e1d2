"""Export records as JSON."""
from __future__ import annotations

import json
from itertools import islice

from dbfreader.dbf.reader import DbfReader
from dbfreader.export.values import json_value


def export_json(reader: DbfReader, limit: int | None = None) -> str:
    """Export the reader's remaining records as a JSON list of objects."""
    names = reader.header.field_names
    data = []
    for values in islice(reader, limit):
        data.append({
            name: json_value(value, reader.encoding)
            for name, value in zip(names, values)
        })

    return json.dumps(data, indent=2)
