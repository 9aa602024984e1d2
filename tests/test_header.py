import io
import logging
from datetime import date

import pytest

from dbf_builder import PEOPLE_FIELDS, PEOPLE_RECORDS, build_dbf
from dbfreader.dbf.fields import FieldType
from dbfreader.dbf.header import Header
from dbfreader.errors import MalformedFieldError, MalformedHeaderError


def test_parse_preamble_and_fields(people_bytes):
    source = io.BytesIO(people_bytes)
    header = Header.parse(source)

    assert header.version == 0x03
    assert (header.year, header.month, header.day) == (123, 1, 15)
    assert header.last_update == date(2023, 1, 15)
    assert header.record_count == 4
    assert header.field_count == 6
    assert header.header_length == 32 + 6 * 32 + 1
    assert header.record_length == 1 + 10 + 8 + 10 + 8 + 1 + 4
    assert header.data_start == header.header_length
    assert header.padding_length == 0
    assert source.tell() == header.data_start


def test_lookups(people_bytes):
    header = Header.parse(io.BytesIO(people_bytes))

    assert header.field(2).name == "SALARY"
    assert header.field(2).decimal_count == 2
    assert header.field_by_name("ACTIVE").type is FieldType.LOGICAL
    assert header.field_index("AGE") == 5
    assert header.field_names == ["NAME", "BORN", "SALARY", "RATE", "ACTIVE", "AGE"]


def test_unknown_name_is_not_an_error(people_bytes):
    header = Header.parse(io.BytesIO(people_bytes))
    assert header.field_by_name("MISSING") is None
    assert header.field_index("MISSING") is None


def test_terminator_stops_at_known_count(memo_bytes):
    data, _ = memo_bytes
    source = io.BytesIO(data)
    header = Header.parse(source)

    assert header.field_count == 39
    assert header.field(25).type is FieldType.MEMO
    assert header.field(25).length == 4
    assert header.padding_length == 263
    assert source.tell() == 32 + 39 * 32 + 1


def test_record_offset(people_bytes):
    header = Header.parse(io.BytesIO(people_bytes))
    assert header.record_offset(0) == header.header_length
    assert header.record_offset(3) == header.header_length + 3 * header.record_length


def test_record_offset_never_points_into_the_field_table():
    data = build_dbf(PEOPLE_FIELDS, PEOPLE_RECORDS, header_length=100)
    header = Header.parse(io.BytesIO(data))
    assert header.data_offset == header.data_start
    assert header.record_offset(0) == header.data_start


def test_record_stride_covers_the_field_widths():
    data = build_dbf(PEOPLE_FIELDS, PEOPLE_RECORDS, record_length=20)
    header = Header.parse(io.BytesIO(data))
    assert header.record_stride == header.data_length + 1
    assert header.record_offset(3) == header.header_length + 3 * (header.data_length + 1)


def test_truncated_preamble():
    with pytest.raises(MalformedHeaderError, match="truncated"):
        Header.parse(io.BytesIO(b"\x03\x7b\x01\x0f"))


def test_missing_terminator():
    data = build_dbf(PEOPLE_FIELDS, [], end_marker=False)
    # Drop the 0x0D byte and everything after it
    data = data[:32 + 32 * len(PEOPLE_FIELDS)]
    with pytest.raises(MalformedHeaderError, match="without terminator"):
        Header.parse(io.BytesIO(data))


def test_truncated_descriptor():
    data = build_dbf(PEOPLE_FIELDS, [])[:32 + 40]
    with pytest.raises(MalformedFieldError):
        Header.parse(io.BytesIO(data))


def test_short_header_length_is_logged(caplog):
    data = build_dbf(PEOPLE_FIELDS, PEOPLE_RECORDS, header_length=100)
    with caplog.at_level(logging.WARNING, logger="dbfreader.dbf.header"):
        header = Header.parse(io.BytesIO(data))

    assert header.padding_length == 0
    assert "shorter than the field table" in caplog.text


def test_record_length_mismatch_is_logged(caplog):
    data = build_dbf(PEOPLE_FIELDS, [], record_length=50)
    with caplog.at_level(logging.WARNING, logger="dbfreader.dbf.header"):
        Header.parse(io.BytesIO(data))
    assert "does not match field widths" in caplog.text


def test_invalid_update_date():
    data = build_dbf(PEOPLE_FIELDS, [], updated=(123, 13, 40))
    assert Header.parse(io.BytesIO(data)).last_update is None
