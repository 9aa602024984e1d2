import struct
from datetime import date

import pytest

from dbfreader.dbf.decoders import decode_record, decode_text, decode_value, numeric_text
from dbfreader.dbf.fields import FieldDescriptor, FieldType
from dbfreader.errors import MalformedFieldError, NumberFormatError, UnknownMemoEncodingError


def _field(tag: str, length: int, decimals: int = 0, name: str = "VALUE") -> FieldDescriptor:
    return FieldDescriptor(name=name, type=FieldType(tag), length=length, decimal_count=decimals, index=0)


def test_character_returns_raw_bytes():
    assert decode_value(_field("C", 6), b"abc   ") == b"abc   "


def test_date_parses_yyyymmdd():
    assert decode_value(_field("D", 8), b"20230115") == date(2023, 1, 15)


@pytest.mark.parametrize("raw", [b"        ", b"00000000", b"\x00" * 8])
def test_blank_date_is_unset(raw):
    assert decode_value(_field("D", 8), raw) is None


def test_date_rolls_over_like_a_lenient_calendar():
    assert decode_value(_field("D", 8), b"20230230") == date(2023, 3, 2)
    assert decode_value(_field("D", 8), b"20231301") == date(2024, 1, 1)
    assert decode_value(_field("D", 8), b"20230100") == date(2022, 12, 31)


def test_date_with_garbage_digits_fails():
    with pytest.raises(MalformedFieldError, match="BORN"):
        decode_value(_field("D", 8, name="BORN"), b"2023AB15")


@pytest.mark.parametrize("raw, expected", [
    (b"Y", True), (b"y", True), (b"T", True), (b"t", True),
    (b"N", False), (b"n", False), (b"F", False), (b" ", False), (b"?", False),
])
def test_logical(raw, expected):
    assert decode_value(_field("L", 1), raw) is expected


def test_integer_little_endian():
    assert decode_value(_field("I", 4), bytes([0x01, 0x00, 0x00, 0x00])) == 1
    assert decode_value(_field("I", 4), struct.pack("<i", -123456)) == -123456


def test_integer_wrong_width_fails():
    with pytest.raises(MalformedFieldError, match="4 bytes"):
        decode_value(_field("I", 2), b"\x01\x00")


@pytest.mark.parametrize("raw, expected", [
    (b"   1200.50", 1200.5),
    (b"00000042.5", 42.5),
    (b"-7", -7.0),
    (b"  12  ", 12.0),
    (b"1.5e3", 1500.0),
    (b".25", 0.25),
])
def test_numeric(raw, expected):
    assert decode_value(_field("N", len(raw), 2), raw) == expected


@pytest.mark.parametrize("tag", ["N", "F"])
@pytest.mark.parametrize("raw", [b"          ", b"", b"       ???", b"  1?.0", b"\x00\x00\x00"])
def test_blank_or_marked_numbers_are_unset(tag, raw):
    assert decode_value(_field(tag, 10), raw) is None


@pytest.mark.parametrize("tag", ["N", "F"])
@pytest.mark.parametrize("raw", [b"12abc", b"1.2.3", b"- 5", b"inf", b"nan", b"1_000"])
def test_malformed_numbers_fail(tag, raw):
    with pytest.raises(NumberFormatError) as exc_info:
        decode_value(_field(tag, 10, name="PRICE"), raw)
    assert exc_info.value.field == "PRICE"


def test_float_has_single_precision():
    value = decode_value(_field("F", 8), b"   0.1")
    assert value == struct.unpack("<f", struct.pack("<f", 0.1))[0]
    assert value != 0.1


def test_float_overflow_becomes_infinity():
    assert decode_value(_field("F", 8), b"-1e300") == float("-inf")


def test_memo_binary_link():
    assert decode_value(_field("M", 4), struct.pack("<i", 218)) == 218


def test_memo_text_link():
    assert decode_value(_field("M", 10), b"       185") == 185
    assert decode_value(_field("M", 10), b"0000000012") == 12
    assert decode_value(_field("M", 10), b"          ") is None


def test_memo_text_link_with_garbage_fails():
    with pytest.raises(NumberFormatError):
        decode_value(_field("M", 10), b"   block 7")


@pytest.mark.parametrize("raw", [b"     1e400", b"       1.9", b"        -3"])
def test_memo_text_link_must_be_a_block_number(raw):
    with pytest.raises(NumberFormatError, match="memo block number") as exc_info:
        decode_value(_field("M", 10), raw)
    assert exc_info.value.field == "VALUE"


@pytest.mark.parametrize("length", [1, 8, 12])
def test_memo_unknown_width_fails(length):
    with pytest.raises(UnknownMemoEncodingError, match="4 or 10"):
        decode_value(_field("M", length), b"1" * length)


def test_numeric_text_trims_and_validates():
    f = _field("N", 8)
    assert numeric_text(f, b"  0012.50 ") == b"0012.50"
    assert numeric_text(f, b"        ") is None


def test_decode_record_slices_by_declared_width():
    fields = (
        FieldDescriptor("NAME", FieldType.CHARACTER, 4, 0, 0),
        FieldDescriptor("QTY", FieldType.NUMERIC, 3, 0, 1),
        FieldDescriptor("OK", FieldType.LOGICAL, 1, 0, 2),
    )
    assert decode_record(fields, b"pen  12T") == [b"pen ", 12.0, True]


def test_decode_text_trims_right_padding_only():
    assert decode_text(b"  Caf\xe9 \x00\x00", "cp1252") == "  Café"
