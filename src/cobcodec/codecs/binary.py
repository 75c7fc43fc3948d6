"""Binary (COMP / COMP-4 / COMP-5) integer fields."""

from __future__ import annotations

from typing import Literal

from cobcodec.errors import InvalidFieldSpec, RecordTooShort, ValueExceedsCapacity
from cobcodec.numeric.decimal_value import DecimalValue


def binary_length(total_digits: int) -> int:
    """Storage size by digit count: 1-4 -> 2 bytes, 5-9 -> 4, 10-18 -> 8."""
    if 1 <= total_digits <= 4:
        return 2
    if 5 <= total_digits <= 9:
        return 4
    if 10 <= total_digits <= 18:
        return 8
    raise InvalidFieldSpec(f"Binary fields hold 1-18 digits, got {total_digits}", total_digits)


def encode(
    value: DecimalValue,
    total_digits: int,
    scale: int = 0,
    signed: bool = True,
    byteorder: Literal["big", "little"] = "big",
) -> bytes:
    length = binary_length(total_digits)
    scaled = value.rescale_exact(scale)
    unscaled = scaled.unscaled if signed else abs(scaled.unscaled)
    if len(str(abs(unscaled))) > total_digits:
        raise ValueExceedsCapacity(f"{value} does not fit {total_digits} digits", value)
    return unscaled.to_bytes(length, byteorder=byteorder, signed=signed)


def decode(
    data: bytes,
    scale: int = 0,
    signed: bool = True,
    byteorder: Literal["big", "little"] = "big",
) -> DecimalValue:
    if not data:
        raise RecordTooShort("Binary field is empty", data)
    unscaled = int.from_bytes(data, byteorder=byteorder, signed=signed)
    return DecimalValue.parse(DecimalValue(unscaled, scale))
