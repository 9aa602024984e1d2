"""Pytest configuration for dbfreader tests."""
from __future__ import annotations

import struct

import pytest

from dbf_builder import PEOPLE_FIELDS, PEOPLE_RECORDS, build_dbf


@pytest.fixture
def people_bytes():
    """Four records, the second one deleted."""
    return build_dbf(PEOPLE_FIELDS, PEOPLE_RECORDS, deleted={1})


@pytest.fixture
def people_path(tmp_path, people_bytes):
    path = tmp_path / "people.dbf"
    path.write_bytes(people_bytes)
    return path


@pytest.fixture
def memo_bytes():
    """39 fields with a 4-byte memo link at ordinal 25 and 263 bytes of header padding."""
    links = [8, 11, 17, 30, 32, 35, 38, 40, 45, 48, 51, 55, 55, 55, 55, 55, 218, 63, 185, 200]
    fields = [(f"F{i:02d}", "C", 3) for i in range(39)]
    fields[25] = ("NOTES", "M", 4)
    records = []
    for n, link in enumerate(links):
        values = [b"%03d" % n] * 39
        values[25] = struct.pack("<i", link)
        records.append(values)
    return build_dbf(fields, records, version=0x30, padding=263), links
