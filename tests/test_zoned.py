import pytest

from cobcodec.codecs import zoned
from cobcodec.errors import (
    InvalidFieldSpec,
    InvalidNumericFormat,
    InvalidOverpunchCharacter,
    ValueExceedsCapacity,
)
from cobcodec.numeric.decimal_value import DecimalValue


def test_overpunch_tables_are_closed_and_disjoint():
    assert "".join(zoned.OVERPUNCH_POSITIVE.values()) == "{ABCDEFGHI"
    assert "".join(zoned.OVERPUNCH_NEGATIVE.values()) == "}JKLMNOPQR"
    assert len(zoned.OVERPUNCH_LOOKUP) == 20


def test_decode_positive_and_negative_counterparts():
    positive = zoned.decode("12345" + zoned.positive_overpunch(0), scale=0)
    negative = zoned.decode("12345" + zoned.negative_overpunch(0), scale=0)
    assert positive == DecimalValue(123450, 0)
    assert negative == positive.negate()


def test_decode_applies_scale():
    assert zoned.decode("1234E", scale=2) == DecimalValue.parse("123.45")
    assert zoned.decode("0012N", scale=2) == DecimalValue.parse("-1.25")


def test_encode_overpunches_last_digit():
    assert zoned.encode(DecimalValue.parse("123.45"), 5) == "1234E"
    assert zoned.encode(DecimalValue.parse("-123.45"), 7) == "001234N"
    assert zoned.encode(0, 3) == "00{"
    assert zoned.encode("-1", 4, scale=2) == "010}"


@pytest.mark.parametrize("text", ["0", "-7", "1.23", "-98765.4321", "1000000"])
def test_round_trip(text):
    value = DecimalValue.parse(text)
    encoded = zoned.encode(value, 12)
    assert len(encoded) == 12
    assert zoned.decode(encoded, value.scale) == value


def test_invalid_trailing_character():
    with pytest.raises(InvalidOverpunchCharacter):
        zoned.decode("1234S", 0)
    with pytest.raises(InvalidOverpunchCharacter):
        zoned.decode("12345", 0)
    assert zoned.decode("12345", 0, allow_unsigned=True) == DecimalValue(12345, 0)


def test_sign_never_appears_before_the_last_position():
    with pytest.raises(InvalidNumericFormat):
        zoned.decode("12J4E", 0)
    with pytest.raises(InvalidNumericFormat):
        zoned.decode("", 0)


def test_encode_errors():
    with pytest.raises(ValueExceedsCapacity):
        zoned.encode(DecimalValue.parse("123456"), 5)
    with pytest.raises(InvalidFieldSpec):
        zoned.encode(DecimalValue.parse("1"), 0)


def test_ebcdic_bytes_are_true_zoned_bytes():
    data = zoned.encode_bytes(DecimalValue.parse("-123"), 3, codepage="cp037")
    assert data == b"\xf1\xf2\xd3"
    assert zoned.encode_bytes(DecimalValue.parse("120"), 3, codepage="cp037") == b"\xf1\xf2\xc0"
    assert zoned.decode_bytes(data, 0, codepage="cp037") == DecimalValue(-123, 0)
