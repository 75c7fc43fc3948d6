"""Rounding modes and the immutable decimal configuration value."""

from __future__ import annotations

import decimal
from dataclasses import dataclass
from enum import Enum

from cobcodec.errors import InvalidFieldSpec

MIN_PRECISION = 31  # largest COMP-3 field in use is S9(31)


class Rounding(str, Enum):
    HALF_UP = decimal.ROUND_HALF_UP
    HALF_EVEN = decimal.ROUND_HALF_EVEN
    DOWN = decimal.ROUND_DOWN
    UP = decimal.ROUND_UP
    CEILING = decimal.ROUND_CEILING
    FLOOR = decimal.ROUND_FLOOR

    @classmethod
    def parse(cls, name: str) -> Rounding:
        key = name.strip().upper().replace("-", "_")
        if key.startswith("ROUND_"):
            key = key[len("ROUND_") :]
        try:
            return cls[key]
        except KeyError:
            raise InvalidFieldSpec(f"Unknown rounding mode '{name}'", name) from None


@dataclass(frozen=True)
class DecimalConfig:
    precision: int = MIN_PRECISION
    rounding: Rounding = Rounding.HALF_UP

    def __post_init__(self) -> None:
        if self.precision < MIN_PRECISION:
            raise InvalidFieldSpec(
                f"Precision must be at least {MIN_PRECISION} digits, got {self.precision}",
                self.precision,
            )
        if not isinstance(self.rounding, Rounding):
            object.__setattr__(self, "rounding", Rounding.parse(str(self.rounding)))


def round_quotient(numerator: int, denominator: int, rounding: Rounding) -> int:
    """Divide two integers and round the quotient once, exactly."""
    if denominator == 0:
        raise ZeroDivisionError("decimal division by zero")
    negative = (numerator < 0) != (denominator < 0)
    q, r = divmod(abs(numerator), abs(denominator))
    if r:
        twice = 2 * r
        d = abs(denominator)
        if rounding is Rounding.UP:
            q += 1
        elif rounding is Rounding.HALF_UP:
            q += twice >= d
        elif rounding is Rounding.HALF_EVEN:
            q += twice > d or (twice == d and q % 2 == 1)
        elif rounding is Rounding.CEILING:
            q += not negative
        elif rounding is Rounding.FLOOR:
            q += negative
    return -q if negative else q
