"""PIC field formatting and parsing.

Supported field families:
- PIC X(n): alphanumeric, space padded, silently truncated
- PIC 9(n): unsigned numeric, zero padded, truncated from the left
- PIC S9(n)V9(m): signed decimal rendered with an explicit point and sign
- PIC Z(n): zero-suppressed display

Truncation of X and 9 fields follows MOVE semantics and is never an error.
Signed decimals that do not fit raise ``ValueExceedsCapacity``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from cobcodec.errors import InvalidFieldSpec, InvalidNumericFormat, ValueExceedsCapacity
from cobcodec.numeric.decimal_value import DecimalValue

PICTURE_SYMBOL_RE = re.compile(r"([XS9VZ])(?:\((\d+)\))?")
DIGITS = "0123456789"

NumericInput = str | int | float | Decimal | DecimalValue


class PicKind(str, Enum):
    ALPHANUMERIC = "alphanumeric"
    UNSIGNED_NUMERIC = "unsigned_numeric"
    SIGNED_DECIMAL = "signed_decimal"


class PadSide(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class SignPlacement(str, Enum):
    TRAILING = "trailing"
    LEADING = "leading"
    SEPARATE = "separate"  # trailing '-' for negatives, space otherwise


@dataclass(frozen=True)
class PicFieldSpec:
    kind: PicKind
    total_length: int
    integer_digits: int = 0
    fractional_digits: int = 0
    signed: bool = True

    def __post_init__(self) -> None:
        if self.total_length < 1:
            raise InvalidFieldSpec(f"Field length must be at least 1, got {self.total_length}")
        if self.integer_digits < 0 or self.fractional_digits < 0:
            raise InvalidFieldSpec("Digit counts cannot be negative")
        if (
            self.kind is PicKind.SIGNED_DECIMAL
            and self.integer_digits + self.fractional_digits != self.total_length
        ):
            raise InvalidFieldSpec(
                f"integer_digits ({self.integer_digits}) + fractional_digits "
                f"({self.fractional_digits}) must equal total_length ({self.total_length})"
            )

    @staticmethod
    def alphanumeric(length: int) -> PicFieldSpec:
        return PicFieldSpec(PicKind.ALPHANUMERIC, length)

    @staticmethod
    def unsigned(length: int) -> PicFieldSpec:
        return PicFieldSpec(PicKind.UNSIGNED_NUMERIC, length, integer_digits=length, signed=False)

    @staticmethod
    def signed_decimal(integer_digits: int, fractional_digits: int = 0) -> PicFieldSpec:
        return PicFieldSpec(
            PicKind.SIGNED_DECIMAL,
            integer_digits + fractional_digits,
            integer_digits=integer_digits,
            fractional_digits=fractional_digits,
        )

    @staticmethod
    def from_picture(picture: str) -> PicFieldSpec:
        """Build a spec from a PIC string such as ``X(10)``, ``9(5)`` or ``S9(7)V99``."""
        pic = picture.strip().upper()
        pos = 0
        counts = {"X": 0, "9": 0, "Z": 0}
        signed = False
        fractional = False
        integer_digits = fractional_digits = 0
        for match in PICTURE_SYMBOL_RE.finditer(pic):
            if match.start() != pos:
                break
            pos = match.end()
            symbol = match.group(1)
            repeat = int(match.group(2)) if match.group(2) else 1
            if symbol == "S":
                if signed or integer_digits or fractional_digits:
                    raise InvalidFieldSpec(f"Sign must lead the picture: {picture!r}", picture)
                signed = True
            elif symbol == "V":
                if fractional:
                    raise InvalidFieldSpec(f"More than one V in {picture!r}", picture)
                fractional = True
            else:
                counts[symbol] += repeat
                if symbol == "9":
                    if fractional:
                        fractional_digits += repeat
                    else:
                        integer_digits += repeat
        if pos != len(pic) or not pic:
            raise InvalidFieldSpec(f"Unsupported picture {picture!r}", picture)
        if counts["X"]:
            if counts["9"] or counts["Z"] or signed or fractional:
                raise InvalidFieldSpec(f"Mixed alphanumeric picture {picture!r}", picture)
            return PicFieldSpec.alphanumeric(counts["X"])
        if counts["Z"]:
            raise InvalidFieldSpec(f"Z-edited pictures are display-only: {picture!r}", picture)
        if signed or fractional:
            return PicFieldSpec(
                PicKind.SIGNED_DECIMAL,
                integer_digits + fractional_digits,
                integer_digits=integer_digits,
                fractional_digits=fractional_digits,
                signed=signed,
            )
        return PicFieldSpec.unsigned(integer_digits)

    @property
    def display_width(self) -> int:
        """Characters produced by ``format_field`` for this spec."""
        if self.kind is not PicKind.SIGNED_DECIMAL:
            return self.total_length
        width = self.total_length + (1 if self.fractional_digits else 0)
        return width + 1 if self.signed else width


def _require_length(length: int) -> None:
    if length < 1:
        raise InvalidFieldSpec(f"Field length must be at least 1, got {length}", length)


def format_alphanumeric(value: str, length: int, pad: PadSide = PadSide.RIGHT) -> str:
    _require_length(length)
    text = str(value)
    if pad is PadSide.LEFT:
        # JUSTIFIED RIGHT: truncation drops the leftmost characters
        return text[-length:].rjust(length)
    return text[:length].ljust(length)


def _plain_text(value: NumericInput) -> str:
    """Text of ``value`` without exponent or trailing fractional zeros."""
    if isinstance(value, str):
        return value
    text = DecimalValue.parse(value).to_display_string()
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_unsigned_numeric(value: NumericInput, length: int) -> str:
    _require_length(length)
    text = _plain_text(value)
    digits = "".join(ch for ch in text if ch in DIGITS)
    return digits[-length:].rjust(length, "0")


def parse_unsigned_numeric(text: str, length: int | None = None) -> DecimalValue:
    if length is not None:
        _require_length(length)
        if len(text) != length:
            raise InvalidNumericFormat(f"Expected {length} digits, got {len(text)}", text)
    if not text or any(ch not in DIGITS for ch in text):
        raise InvalidNumericFormat(f"Unsigned numeric field must be all digits: {text!r}", text)
    return DecimalValue(int(text), 0)


def _check_digits(integer_digits: int, fractional_digits: int) -> None:
    if integer_digits < 0 or fractional_digits < 0 or integer_digits + fractional_digits < 1:
        raise InvalidFieldSpec(
            f"Invalid signed decimal layout {integer_digits}V{fractional_digits}",
            (integer_digits, fractional_digits),
        )


def _render_digits(value: DecimalValue, integer_digits: int, fractional_digits: int) -> str:
    scaled = value.rescale_exact(fractional_digits)
    whole = scaled.integer_digits().lstrip("0")
    if len(whole) > integer_digits:
        raise ValueExceedsCapacity(
            f"{value} needs {len(whole)} integer digits, field holds {integer_digits}", value
        )
    body = whole.rjust(integer_digits, "0")
    if fractional_digits:
        body += "." + scaled.fraction_digits()
    return body


def format_signed_decimal(
    value: NumericInput,
    integer_digits: int,
    fractional_digits: int,
    sign_placement: SignPlacement = SignPlacement.TRAILING,
) -> str:
    _check_digits(integer_digits, fractional_digits)
    number = DecimalValue.parse(value)
    body = _render_digits(number, integer_digits, fractional_digits)
    negative = number.is_negative()
    if sign_placement is SignPlacement.LEADING:
        return ("-" if negative else "+") + body
    if sign_placement is SignPlacement.SEPARATE:
        return body + ("-" if negative else " ")
    return body + ("-" if negative else "+")


def _split_sign(text: str, sign_placement: SignPlacement) -> tuple[bool, str]:
    if not text:
        return False, text
    if sign_placement is SignPlacement.LEADING:
        if text[0] in "+-":
            return text[0] == "-", text[1:]
        return False, text
    signs = "+- " if sign_placement is SignPlacement.SEPARATE else "+-"
    if text[-1] in signs:
        return text[-1] == "-", text[:-1]
    return False, text


def parse_signed_decimal(
    text: str,
    integer_digits: int,
    fractional_digits: int,
    sign_placement: SignPlacement = SignPlacement.TRAILING,
) -> DecimalValue:
    """Inverse of ``format_signed_decimal``.

    Accepts the explicit-point display form (``00123.45-``) and the implied
    point form (``0012345-``). A missing sign reads as positive.
    """
    _check_digits(integer_digits, fractional_digits)
    negative, body = _split_sign(text, sign_placement)
    if not body or body.count(".") > 1 or any(ch not in DIGITS + "." for ch in body):
        raise InvalidNumericFormat(f"Not a signed decimal field: {text!r}", text)
    if "." in body:
        whole, frac = body.split(".")
        if not whole and not frac:
            raise InvalidNumericFormat(f"No digits in {text!r}", text)
    else:
        split = max(len(body) - fractional_digits, 0)
        whole, frac = body[:split], body[split:].rjust(fractional_digits, "0")
    if len(whole.lstrip("0")) > integer_digits:
        raise ValueExceedsCapacity(
            f"Integer part of {text!r} does not fit {integer_digits} digits", text
        )
    unscaled = int((whole or "0") + frac)
    value = DecimalValue(-unscaled if negative else unscaled, len(frac))
    return value.rescale_exact(fractional_digits)


def format_zero_suppressed(value: NumericInput, length: int) -> str:
    """PIC Z(n): leading zeros become spaces; zero is all spaces."""
    _require_length(length)
    number = DecimalValue.parse(value)
    digits = format_unsigned_numeric(number.integer_digits(), length)
    return digits.lstrip("0").rjust(length)


def format_field(spec: PicFieldSpec, value: NumericInput) -> str:
    if spec.kind is PicKind.ALPHANUMERIC:
        return format_alphanumeric(str(value), spec.total_length)
    if spec.kind is PicKind.UNSIGNED_NUMERIC:
        return format_unsigned_numeric(value, spec.total_length)
    if spec.signed:
        return format_signed_decimal(value, spec.integer_digits, spec.fractional_digits)
    # unsigned decimal: MOVE drops the sign
    return _render_digits(DecimalValue.parse(value).abs(), spec.integer_digits, spec.fractional_digits)


def parse_field(spec: PicFieldSpec, text: str) -> str | DecimalValue:
    if spec.kind is PicKind.ALPHANUMERIC:
        return text
    if spec.kind is PicKind.UNSIGNED_NUMERIC:
        return parse_unsigned_numeric(text, spec.total_length)
    value = parse_signed_decimal(text, spec.integer_digits, spec.fractional_digits)
    if not spec.signed and value.is_negative():
        raise InvalidNumericFormat(f"Unsigned field carries a negative sign: {text!r}", text)
    return value
