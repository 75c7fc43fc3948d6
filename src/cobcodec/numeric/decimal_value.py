"""Exact fixed-scale decimal values.

A ``DecimalValue`` is an unscaled integer plus a scale, so every operation is
integer arithmetic and nothing ever passes through a float. Rounding happens
only where a caller asks for a smaller scale, and exceeding the configured
precision raises instead of rounding.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from cobcodec.config.settings import get_settings
from cobcodec.errors import InvalidFieldSpec, InvalidNumericFormat, ValueExceedsCapacity
from cobcodec.numeric.context import DecimalConfig, Rounding, round_quotient

NUMERIC_RE = re.compile(r"^([+-])?([0-9]*)(?:\.([0-9]*))?$")


class SignStyle(str, Enum):
    MINUS = "minus"
    PARENTHESES = "parentheses"
    PLUS = "plus"
    SUPPRESSED = "suppressed"


def _config(config: DecimalConfig | None) -> DecimalConfig:
    return config if config is not None else get_settings().decimal


def _check_precision(unscaled: int, scale: int, config: DecimalConfig | None) -> None:
    cfg = _config(config)
    digits = len(str(abs(unscaled)))
    if digits > cfg.precision:
        raise ValueExceedsCapacity(
            f"{digits} significant digits exceed the configured precision of {cfg.precision}",
            (unscaled, scale),
        )


@dataclass(frozen=True)
class DecimalValue:
    """Signed decimal number ``unscaled * 10**-scale``.

    Equality compares the (sign, digits, scale) triple: ``1.0`` and ``1.00``
    are different values, while ``-0`` and ``0`` are the same.
    """

    unscaled: int
    scale: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.unscaled, bool) or not isinstance(self.unscaled, int):
            raise InvalidNumericFormat("unscaled must be an int", self.unscaled)
        if self.scale < 0:
            raise InvalidFieldSpec(f"Scale cannot be negative: {self.scale}", self.scale)

    # construction -------------------------------------------------------

    @classmethod
    def parse(
        cls, value: str | int | float | Decimal | DecimalValue, config: DecimalConfig | None = None
    ) -> DecimalValue:
        if isinstance(value, DecimalValue):
            _check_precision(value.unscaled, value.scale, config)
            return value
        if isinstance(value, bool):
            raise InvalidNumericFormat("Booleans are not numeric values", value)
        if isinstance(value, int):
            result = cls(value, 0)
        elif isinstance(value, Decimal):
            result = cls._from_decimal(value)
        elif isinstance(value, float):
            # repr is the shortest round-trip text; it may use an exponent
            result = cls._from_decimal(Decimal(repr(value)))
        elif isinstance(value, str):
            result = cls._from_text(value)
        else:
            raise InvalidNumericFormat(f"Unsupported numeric input type {type(value).__name__}", value)
        _check_precision(result.unscaled, result.scale, config)
        return result

    @classmethod
    def _from_text(cls, text: str) -> DecimalValue:
        match = NUMERIC_RE.match(text.strip())
        if not match:
            raise InvalidNumericFormat(f"Not a decimal number: {text!r}", text)
        sign, whole, frac = match.group(1), match.group(2), match.group(3) or ""
        if not whole and not frac:
            raise InvalidNumericFormat(f"No digits in {text!r}", text)
        unscaled = int((whole or "0") + frac)
        return cls(-unscaled if sign == "-" else unscaled, len(frac))

    @classmethod
    def _from_decimal(cls, value: Decimal) -> DecimalValue:
        if not value.is_finite():
            raise InvalidNumericFormat(f"Not a finite decimal: {value}", value)
        sign, digits, exponent = value.as_tuple()
        unscaled = int("".join(map(str, digits)) or "0")
        exponent = int(exponent)
        if exponent > 0:
            unscaled *= 10**exponent
            exponent = 0
        return cls(-unscaled if sign else unscaled, -exponent)

    @classmethod
    def zero(cls, scale: int = 0) -> DecimalValue:
        return cls(0, scale)

    # inspection ---------------------------------------------------------

    @property
    def digits(self) -> int:
        """Number of significant digits (zero counts as one)."""
        return len(str(abs(self.unscaled)))

    def is_zero(self) -> bool:
        return self.unscaled == 0

    def is_negative(self) -> bool:
        return self.unscaled < 0

    def integer_digits(self) -> str:
        """Digits left of the decimal point, without sign or leading zeros."""
        return str(abs(self.unscaled) // 10**self.scale)

    def fraction_digits(self) -> str:
        if not self.scale:
            return ""
        return str(abs(self.unscaled) % 10**self.scale).rjust(self.scale, "0")

    def as_decimal(self) -> Decimal:
        # tuple construction is exact; scaleb would round to the context precision
        digits = tuple(int(ch) for ch in str(abs(self.unscaled)))
        return Decimal((int(self.unscaled < 0), digits, -self.scale))

    def compare(self, other: DecimalValue) -> int:
        scale = max(self.scale, other.scale)
        left = self.unscaled * 10 ** (scale - self.scale)
        right = other.unscaled * 10 ** (scale - other.scale)
        return (left > right) - (left < right)

    # transforms ---------------------------------------------------------

    def negate(self) -> DecimalValue:
        return DecimalValue(-self.unscaled, self.scale)

    def abs(self) -> DecimalValue:
        return DecimalValue(abs(self.unscaled), self.scale)

    def to_fixed_scale(
        self,
        scale: int,
        rounding: Rounding | None = None,
        config: DecimalConfig | None = None,
    ) -> DecimalValue:
        if scale < 0:
            raise InvalidFieldSpec(f"Scale cannot be negative: {scale}", scale)
        cfg = _config(config)
        if scale >= self.scale:
            unscaled = self.unscaled * 10 ** (scale - self.scale)
        else:
            unscaled = round_quotient(
                self.unscaled, 10 ** (self.scale - scale), rounding or cfg.rounding
            )
        _check_precision(unscaled, scale, cfg)
        return DecimalValue(unscaled, scale)

    def rescale_exact(self, scale: int, config: DecimalConfig | None = None) -> DecimalValue:
        """Change scale without rounding; raise if non-zero digits would be dropped."""
        if scale < self.scale and self.unscaled % 10 ** (self.scale - scale):
            raise ValueExceedsCapacity(
                f"{self.as_decimal()} has more than {scale} fractional digits", self
            )
        return self.to_fixed_scale(scale, Rounding.DOWN, config)

    # arithmetic ---------------------------------------------------------

    def _aligned(self, other: DecimalValue) -> tuple[int, int, int]:
        scale = max(self.scale, other.scale)
        return (
            self.unscaled * 10 ** (scale - self.scale),
            other.unscaled * 10 ** (scale - other.scale),
            scale,
        )

    def add(self, other: DecimalValue, config: DecimalConfig | None = None) -> DecimalValue:
        left, right, scale = self._aligned(other)
        _check_precision(left + right, scale, config)
        return DecimalValue(left + right, scale)

    def subtract(self, other: DecimalValue, config: DecimalConfig | None = None) -> DecimalValue:
        return self.add(other.negate(), config)

    def multiply(self, other: DecimalValue, config: DecimalConfig | None = None) -> DecimalValue:
        unscaled = self.unscaled * other.unscaled
        scale = self.scale + other.scale
        _check_precision(unscaled, scale, config)
        return DecimalValue(unscaled, scale)

    def divide(
        self,
        other: DecimalValue,
        scale: int,
        rounding: Rounding | None = None,
        config: DecimalConfig | None = None,
    ) -> DecimalValue:
        """Quotient rounded once to ``scale`` fractional digits."""
        if scale < 0:
            raise InvalidFieldSpec(f"Scale cannot be negative: {scale}", scale)
        cfg = _config(config)
        # self/other * 10**scale == self.u * 10**(other.s + scale) / (other.u * 10**self.s)
        numerator = self.unscaled * 10 ** (other.scale + scale)
        denominator = other.unscaled * 10**self.scale
        unscaled = round_quotient(numerator, denominator, rounding or cfg.rounding)
        _check_precision(unscaled, scale, cfg)
        return DecimalValue(unscaled, scale)

    # rendering ----------------------------------------------------------

    def to_display_string(
        self,
        thousands_separator: bool = False,
        sign_style: SignStyle = SignStyle.MINUS,
        currency_symbol: str = "",
        separator: str | None = None,
    ) -> str:
        if sign_style is SignStyle.SUPPRESSED and self.is_zero():
            return ""
        whole = self.integer_digits()
        if thousands_separator:
            sep = separator if separator is not None else get_settings().thousands_separator
            whole = f"{int(whole):,}".replace(",", sep)
        body = currency_symbol + whole
        if self.scale:
            body += "." + self.fraction_digits()
        if sign_style is SignStyle.SUPPRESSED:
            return body
        if self.is_negative():
            return f"({body})" if sign_style is SignStyle.PARENTHESES else f"-{body}"
        return f"+{body}" if sign_style is SignStyle.PLUS else body

    def __str__(self) -> str:
        return self.to_display_string()


def parse(value: str | int | float | Decimal | DecimalValue, config: DecimalConfig | None = None) -> DecimalValue:
    return DecimalValue.parse(value, config)


def to_fixed_scale(
    value: DecimalValue, scale: int, rounding: Rounding = Rounding.HALF_UP
) -> DecimalValue:
    return value.to_fixed_scale(scale, rounding)


def to_display_string(
    value: DecimalValue,
    thousands_separator: bool = False,
    sign_style: SignStyle = SignStyle.MINUS,
    currency_symbol: str = "",
) -> str:
    return value.to_display_string(thousands_separator, sign_style, currency_symbol)
