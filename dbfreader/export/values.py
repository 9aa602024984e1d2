"""Value formatting shared by the exporters."""
from __future__ import annotations

import math
from datetime import date
from typing import Any

from dbfreader.dbf.decoders import Value, decode_text


def format_value(value: Value, encoding: str) -> str:
    """Render a decoded value as text. Unset values become empty strings."""
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return decode_text(value, encoding)
    if isinstance(value, bool):
        return "T" if value else "F"
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def json_value(value: Value, encoding: str) -> Any:
    """Convert a decoded value to a JSON-serializable one.

    Floats that overflowed to infinity have no JSON form and become null.
    """
    if isinstance(value, (bytes, bytearray)):
        return decode_text(value, encoding)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value
