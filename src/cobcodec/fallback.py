"""Opt-in "always return something" wrappers over the strict codecs.

The core never substitutes a default for bad input. These helpers do, on
request, and log every substitution so it stays visible.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import TypeVar

import structlog

from cobcodec.codecs import packed, zoned
from cobcodec.dates import CalendarDate, parse_ccyymmdd
from cobcodec.errors import CodecError
from cobcodec.numeric.decimal_value import DecimalValue

log = structlog.get_logger(__name__)

T = TypeVar("T")
D = TypeVar("D")


def or_default(func: Callable[..., T], *args: object, default: D, **kwargs: object) -> T | D:
    try:
        return func(*args, **kwargs)
    except CodecError as exc:
        log.warning(
            "codec_default_substituted",
            operation=getattr(func, "__qualname__", repr(func)),
            error=type(exc).__name__,
            detail=str(exc),
        )
        return default


def parse_decimal_or_default(
    value: str | int | float | Decimal, default: DecimalValue | None = None
) -> DecimalValue | None:
    return or_default(DecimalValue.parse, value, default=default)


def parse_date_or_default(
    text: str, default: CalendarDate | None = None
) -> CalendarDate | None:
    return or_default(parse_ccyymmdd, text, default=default)


def decode_packed_or_default(
    data: bytes, scale: int, default: DecimalValue | None = None
) -> DecimalValue | None:
    return or_default(packed.decode, data, scale, default=default)


def decode_zoned_or_default(
    text: str, scale: int, default: DecimalValue | None = None
) -> DecimalValue | None:
    return or_default(zoned.decode, text, scale, default=default)
