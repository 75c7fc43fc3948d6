"""Zoned decimal codec with trailing overpunched sign.

One character per digit. The last character carries both the final digit and
the sign of the whole number:

    positive: { A B C D E F G H I  -> 0..9
    negative: } J K L M N O P Q R  -> 0..9

Under an EBCDIC codepage these glyphs are exactly the zoned bytes (``{`` is
0xC0, ``J`` is 0xD1), so ``encode_bytes``/``decode_bytes`` are plain
codepage conversions of the character form.
"""

from __future__ import annotations

from decimal import Decimal

from cobcodec.config.settings import get_settings
from cobcodec.errors import (
    InvalidFieldSpec,
    InvalidNumericFormat,
    InvalidOverpunchCharacter,
    ValueExceedsCapacity,
)
from cobcodec.numeric.decimal_value import DecimalValue

OVERPUNCH_POSITIVE = {
    "0": "{",
    "1": "A",
    "2": "B",
    "3": "C",
    "4": "D",
    "5": "E",
    "6": "F",
    "7": "G",
    "8": "H",
    "9": "I",
}
OVERPUNCH_NEGATIVE = {
    "0": "}",
    "1": "J",
    "2": "K",
    "3": "L",
    "4": "M",
    "5": "N",
    "6": "O",
    "7": "P",
    "8": "Q",
    "9": "R",
}
# overpunch glyph -> (digit, sign)
OVERPUNCH_LOOKUP: dict[str, tuple[str, int]] = {
    **{glyph: (digit, 1) for digit, glyph in OVERPUNCH_POSITIVE.items()},
    **{glyph: (digit, -1) for digit, glyph in OVERPUNCH_NEGATIVE.items()},
}
DIGITS = "0123456789"


def positive_overpunch(digit: int) -> str:
    return OVERPUNCH_POSITIVE[str(digit)]


def negative_overpunch(digit: int) -> str:
    return OVERPUNCH_NEGATIVE[str(digit)]


def encode(
    value: DecimalValue | Decimal | int | str,
    digit_count: int,
    scale: int | None = None,
) -> str:
    """Render ``value`` as ``digit_count`` zoned characters.

    The digits are the value's unscaled digits; pass ``scale`` to align the
    value to the field's implied decimal point first.
    """
    if digit_count < 1:
        raise InvalidFieldSpec(f"Zoned fields need at least one digit, got {digit_count}", digit_count)
    number = DecimalValue.parse(value)
    if scale is not None:
        number = number.rescale_exact(scale)
    digits = str(abs(number.unscaled))
    if len(digits) > digit_count:
        raise ValueExceedsCapacity(
            f"{number} needs {len(digits)} digits, field holds {digit_count}", number
        )
    digits = digits.rjust(digit_count, "0")
    table = OVERPUNCH_NEGATIVE if number.is_negative() else OVERPUNCH_POSITIVE
    return digits[:-1] + table[digits[-1]]


def decode(text: str, scale: int = 0, allow_unsigned: bool = False) -> DecimalValue:
    """Parse zoned text; the final character must be an overpunch glyph.

    With ``allow_unsigned`` a plain trailing digit is read as positive, which
    is how unsigned PIC 9 display fields are stored.
    """
    if scale < 0:
        raise InvalidFieldSpec(f"Scale cannot be negative: {scale}", scale)
    if not text:
        raise InvalidNumericFormat("Zoned field is empty", text)
    leading, last = text[:-1], text[-1]
    for position, ch in enumerate(leading):
        if ch not in DIGITS:
            raise InvalidNumericFormat(
                f"Character {ch!r} at position {position} is not a digit", text
            )
    if last in OVERPUNCH_LOOKUP:
        digit, sign = OVERPUNCH_LOOKUP[last]
    elif allow_unsigned and last in DIGITS:
        digit, sign = last, 1
    else:
        raise InvalidOverpunchCharacter(f"{last!r} is not an overpunch character", text)
    unscaled = int(leading + digit)
    return DecimalValue.parse(DecimalValue(sign * unscaled, scale))


def encode_bytes(
    value: DecimalValue | Decimal | int | str,
    digit_count: int,
    scale: int | None = None,
    codepage: str | None = None,
) -> bytes:
    return encode(value, digit_count, scale).encode(codepage or get_settings().codepage)


def decode_bytes(
    data: bytes,
    scale: int = 0,
    codepage: str | None = None,
    allow_unsigned: bool = False,
) -> DecimalValue:
    text = data.decode(codepage or get_settings().codepage, errors="replace")
    return decode(text, scale, allow_unsigned=allow_unsigned)
