"""Packed decimal (COMP-3) codec.

Each byte holds two decimal digits, except the last byte whose low nibble
holds the sign. A field of ``total_digits`` digits occupies
``total_digits // 2 + 1`` bytes; an even digit count gets one leading zero
nibble so the sign lands in the low nibble of the final byte.
"""

from __future__ import annotations

import binascii
from decimal import Decimal

from cobcodec.codecs.signs import PackedSignTable
from cobcodec.config.settings import get_settings
from cobcodec.errors import (
    InvalidDigitNibble,
    InvalidFieldSpec,
    InvalidNumericFormat,
    InvalidSignNibble,
    ValueExceedsCapacity,
)
from cobcodec.numeric.decimal_value import DecimalValue


def packed_length(total_digits: int) -> int:
    """Bytes needed for a COMP-3 field of ``total_digits`` digits."""
    return total_digits // 2 + 1


def _check_layout(total_digits: int, scale: int) -> None:
    precision = get_settings().decimal.precision
    if not 1 <= total_digits <= precision:
        raise InvalidFieldSpec(
            f"Packed fields hold 1-{precision} digits, got {total_digits}", total_digits
        )
    if not 0 <= scale <= total_digits:
        raise InvalidFieldSpec(f"Scale {scale} outside 0-{total_digits}", scale)


def encode(
    value: DecimalValue | Decimal | int | str,
    total_digits: int,
    scale: int,
    sign_table: PackedSignTable | None = None,
    signed: bool = True,
) -> bytes:
    """Encode ``value`` as COMP-3.

    The value must be exactly representable with ``scale`` fractional digits in
    ``total_digits`` digits; otherwise ``ValueExceedsCapacity`` is raised.
    With ``signed=False`` the unsigned sign code is written and the sign of the
    value is dropped, as a MOVE to an unsigned field does.
    """
    _check_layout(total_digits, scale)
    table = sign_table or get_settings().packed_signs
    scaled = DecimalValue.parse(value).rescale_exact(scale)
    digit_str = str(abs(scaled.unscaled))
    if len(digit_str) > total_digits:
        raise ValueExceedsCapacity(
            f"{value} needs {len(digit_str)} digits, field holds {total_digits}", value
        )
    if not signed:
        sign_nibble = table.preferred_unsigned
    elif scaled.is_negative():
        sign_nibble = table.preferred_negative
    else:
        sign_nibble = table.preferred_positive
    nibbles = [int(ch) for ch in digit_str.rjust(total_digits, "0")] + [sign_nibble]
    if len(nibbles) % 2:
        nibbles.insert(0, 0)
    packed = bytearray()
    for hi, lo in zip(nibbles[0::2], nibbles[1::2], strict=True):
        packed.append((hi << 4) | lo)
    return bytes(packed)


def decode(
    buffer: bytes | bytearray | memoryview,
    scale: int,
    sign_table: PackedSignTable | None = None,
) -> DecimalValue:
    """Decode a COMP-3 buffer into a value with ``scale`` fractional digits."""
    data = bytes(buffer)
    if not data:
        raise InvalidDigitNibble("Packed buffer is empty", data)
    if scale < 0:
        raise InvalidFieldSpec(f"Scale cannot be negative: {scale}", scale)
    table = sign_table or get_settings().packed_signs

    nibbles: list[int] = []
    for byte in data:
        nibbles.extend((byte >> 4, byte & 0x0F))
    *digit_nibbles, sign_nibble = nibbles
    for position, nibble in enumerate(digit_nibbles):
        if nibble > 9:
            raise InvalidDigitNibble(f"Nibble {position} is 0x{nibble:X}, not a decimal digit", data)

    sign = table.sign_of(sign_nibble)
    if sign is None:
        raise InvalidSignNibble(f"Sign nibble 0x{sign_nibble:X} is not a recognized sign", data)

    unscaled = int("".join(map(str, digit_nibbles)))
    result = DecimalValue(sign * unscaled, scale)
    return DecimalValue.parse(result)


def to_hex(buffer: bytes | bytearray | memoryview) -> str:
    """Uppercase hex view of a packed buffer, e.g. ``12345C``."""
    return bytes(buffer).hex().upper()


def from_hex(text: str) -> bytes:
    cleaned = "".join(text.split())
    try:
        return binascii.unhexlify(cleaned)
    except (binascii.Error, ValueError):
        raise InvalidNumericFormat(f"Not a hex byte string: {text!r}", text) from None

