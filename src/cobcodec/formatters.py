"""Identifier and display formatters built on the PIC field codec."""

from __future__ import annotations

from cobcodec.config.settings import get_settings
from cobcodec.copybook.pic import NumericInput, format_unsigned_numeric
from cobcodec.numeric.context import Rounding
from cobcodec.numeric.decimal_value import DecimalValue, SignStyle

ACCOUNT_NUMBER_LENGTH = 11  # PIC 9(11)
CARD_NUMBER_LENGTH = 16  # PIC X(16), digits only
SSN_LENGTH = 9  # PIC 9(09)
PHONE_LENGTH = 10
MONETARY_SCALE = 2


def _group(digits: str, sizes: tuple[int, ...]) -> list[str]:
    parts: list[str] = []
    pos = 0
    for size in sizes:
        parts.append(digits[pos : pos + size])
        pos += size
    return parts


def format_account_number(value: NumericInput) -> str:
    return format_unsigned_numeric(value, ACCOUNT_NUMBER_LENGTH)


def format_card_number(value: NumericInput, separator: str | None = None) -> str:
    """16 digits; with ``separator`` the digits are shown in groups of four."""
    digits = format_unsigned_numeric(value, CARD_NUMBER_LENGTH)
    if separator is None:
        return digits
    return separator.join(_group(digits, (4, 4, 4, 4)))


def mask_card_number(value: NumericInput, mask: str = "*") -> str:
    digits = format_unsigned_numeric(value, CARD_NUMBER_LENGTH)
    return mask * (CARD_NUMBER_LENGTH - 4) + digits[-4:]


def format_ssn(value: NumericInput) -> str:
    return "-".join(_group(format_unsigned_numeric(value, SSN_LENGTH), (3, 2, 4)))


def format_phone(value: NumericInput) -> str:
    area, exchange, line = _group(format_unsigned_numeric(value, PHONE_LENGTH), (3, 3, 4))
    return f"({area}){exchange}-{line}"


def format_currency(
    value: NumericInput,
    sign_style: SignStyle = SignStyle.MINUS,
    currency_symbol: str | None = None,
) -> str:
    """US currency display, e.g. ``$1,234.50`` or ``-$12.00``; rounds half-up to cents."""
    settings = get_settings()
    amount = DecimalValue.parse(value).to_fixed_scale(MONETARY_SCALE, Rounding.HALF_UP)
    symbol = settings.currency_symbol if currency_symbol is None else currency_symbol
    return amount.to_display_string(
        thousands_separator=True,
        sign_style=sign_style,
        currency_symbol=symbol,
        separator=settings.thousands_separator,
    )
