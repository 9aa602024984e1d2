"""Named view over a decoded DBF record."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

from dbfreader.dbf.decoders import decode_text
from dbfreader.dbf.header import Header
from dbfreader.errors import FieldNotFoundError


class Row:
    """Typed accessors by column name over a decoded row.

    Unset numeric values read as 0, unset logicals as False, and unset
    text or dates as None. Character values are decoded with ``encoding``.
    """

    __slots__ = ("header", "values", "encoding")

    def __init__(self, header: Header, values: Sequence[Any], encoding: str = "cp1252"):
        self.header = header
        self.values = list(values)
        self.encoding = encoding

    def __repr__(self) -> str:
        return f"Row({self.as_dict(decode=False)!r})"

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, key: int | str) -> Any:
        if isinstance(key, int):
            return self.values[key]
        return self.get(key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self.header.field_names == other.header.field_names and self.values == other.values

    def _index(self, name: str) -> int:
        index = self.header.field_index(name)
        if index is None:
            raise FieldNotFoundError(f"No such column: {name!r}", field=name)
        return index

    def get(self, name: str) -> Any:
        """Raw decoded value for a column."""
        return self.values[self._index(name)]

    def get_bytes(self, name: str) -> Optional[bytes]:
        value = self.get(name)
        return None if value is None else bytes(value)

    def get_string(self, name: str, encoding: Optional[str] = None) -> Optional[str]:
        """Decode a Character column, trimming the space padding on the right."""
        value = self.get(name)
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray)):
            return decode_text(value, encoding or self.encoding)
        return str(value)

    def get_date(self, name: str) -> Optional[date]:
        return self.get(name)

    def get_bool(self, name: str) -> bool:
        return bool(self.get(name))

    def get_int(self, name: str) -> int:
        value = self.get(name)
        return 0 if value is None else int(value)

    def get_float(self, name: str) -> float:
        value = self.get(name)
        return 0.0 if value is None else float(value)

    def get_decimal(self, name: str) -> Optional[Decimal]:
        """Numeric value as a Decimal built from its shortest repr."""
        value = self.get(name)
        if value is None:
            return None
        if isinstance(value, Decimal):
            return value
        return Decimal(repr(value))

    def as_dict(self, decode: bool = True) -> dict[str, Any]:
        """Map column names to values, decoding Character bytes unless ``decode`` is False."""
        result = {}
        for f, value in zip(self.header.fields, self.values):
            if decode and isinstance(value, (bytes, bytearray)):
                value = decode_text(value, self.encoding)
            result[f.name] = value
        return result
