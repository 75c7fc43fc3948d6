from decimal import Decimal

import pytest

from cobcodec.codecs import packed
from cobcodec.codecs.signs import PackedSignTable
from cobcodec.errors import (
    InvalidDigitNibble,
    InvalidFieldSpec,
    InvalidNumericFormat,
    InvalidSignNibble,
    ValueExceedsCapacity,
)
from cobcodec.numeric.decimal_value import DecimalValue


def test_encode_decimal_with_scale():
    buffer = packed.encode(Decimal("123.45"), total_digits=5, scale=2)
    assert buffer == b"\x12\x34\x5c"
    assert packed.decode(buffer, 2) == DecimalValue.parse("123.45")


def test_encode_negative_uses_negative_sign_nibble():
    buffer = packed.encode(DecimalValue.parse("-1"), total_digits=5, scale=2)
    assert buffer[-1] & 0x0F in {0xB, 0xD}
    assert packed.to_hex(buffer) == "00100D"
    assert packed.decode(buffer, 2) == DecimalValue.parse("-1.00")


def test_even_digit_count_gets_leading_pad_nibble():
    buffer = packed.encode(DecimalValue.parse("1234"), total_digits=4, scale=0)
    assert len(buffer) == packed.packed_length(4) == 3
    assert packed.to_hex(buffer) == "01234C"


def test_unsigned_encoding_uses_f():
    buffer = packed.encode(DecimalValue.parse("-42"), total_digits=3, scale=0, signed=False)
    assert packed.to_hex(buffer) == "042F"


@pytest.mark.parametrize(
    ("text", "digits", "scale"),
    [
        ("0", 1, 0),
        ("-9", 1, 0),
        ("0.00", 5, 2),
        ("12345.67", 7, 2),
        ("-0.0001", 9, 4),
        ("9999999999999999999999999999999", 31, 0),
        ("-1234567890123456789012345678.901", 31, 3),
    ],
)
def test_round_trip(text, digits, scale):
    value = DecimalValue.parse(text)
    assert packed.decode(packed.encode(value, digits, scale), scale) == value


def test_encode_capacity_errors():
    with pytest.raises(ValueExceedsCapacity):
        packed.encode(DecimalValue.parse("123456"), total_digits=5, scale=0)
    with pytest.raises(ValueExceedsCapacity):
        packed.encode(DecimalValue.parse("1.005"), total_digits=5, scale=2)
    with pytest.raises(InvalidFieldSpec):
        packed.encode(DecimalValue.parse("1"), total_digits=0, scale=0)
    with pytest.raises(InvalidFieldSpec):
        packed.encode(DecimalValue.parse("1"), total_digits=3, scale=4)


def test_all_positive_and_negative_sign_codes_decode():
    for nibble in (0xA, 0xC, 0xE, 0xF):
        assert packed.decode(bytes([0x12, 0x30 | nibble]), 0) == DecimalValue(123, 0)
    for nibble in (0xB, 0xD):
        assert packed.decode(bytes([0x12, 0x30 | nibble]), 0) == DecimalValue(-123, 0)


def test_invalid_sign_nibble():
    with pytest.raises(InvalidSignNibble):
        packed.decode(b"\x12\x34", 0)


def test_invalid_digit_nibble():
    with pytest.raises(InvalidDigitNibble):
        packed.decode(b"\x1a\x3c", 0)
    # high nibble of the final byte is a digit, too
    with pytest.raises(InvalidDigitNibble):
        packed.decode(b"\x12\xfc", 0)
    with pytest.raises(InvalidDigitNibble):
        packed.decode(b"", 0)


def test_custom_sign_table():
    strict = PackedSignTable.from_codes(positive=["C", "F"], negative=["D"])
    with pytest.raises(InvalidSignNibble):
        packed.decode(b"\x12\x3a", 0, sign_table=strict)
    assert packed.decode(b"\x12\x3d", 0, sign_table=strict) == DecimalValue(-123, 0)


def test_sign_table_validation():
    with pytest.raises(InvalidFieldSpec):
        PackedSignTable.from_codes(positive=["C", "D"], negative=["D"])
    with pytest.raises(InvalidFieldSpec):
        PackedSignTable.from_codes(positive=["C", "5"], negative=["D"])


def test_hex_view():
    assert packed.from_hex("12 34 5C") == b"\x12\x34\x5c"
    assert packed.to_hex(b"\x00\x1d") == "001D"
    with pytest.raises(InvalidNumericFormat):
        packed.from_hex("12G")
