"""Decode and encode whole records from a copybook layout."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

import structlog

from cobcodec.codecs import binary, packed, zoned
from cobcodec.config.settings import get_settings
from cobcodec.copybook.parser import Field
from cobcodec.copybook.pic import (
    NumericInput,
    PicKind,
    format_alphanumeric,
    format_unsigned_numeric,
)
from cobcodec.errors import RecordTooShort, UnsupportedUsage, ValueExceedsCapacity
from cobcodec.numeric.decimal_value import DecimalValue

log = structlog.get_logger(__name__)

FieldValue = str | DecimalValue


def field_byte_width(field: Field) -> int:
    spec = field.spec
    if field.storage == "packed":
        return packed.packed_length(spec.total_length)
    if field.storage == "binary":
        return binary.binary_length(spec.total_length)
    return spec.total_length


def record_length(fields: Sequence[Field]) -> int:
    return sum(field_byte_width(f) * f.occurs for f in fields)


def _field_names(field: Field) -> Iterable[str]:
    for j in range(field.occurs):
        yield field.name + (f"_{j}" if field.occurs > 1 else "")


def _decode_field(field: Field, chunk: bytes, codepage: str) -> FieldValue:
    spec = field.spec
    if spec.kind is PicKind.ALPHANUMERIC:
        if field.storage != "display":
            raise UnsupportedUsage(f"{field.name}: PIC X cannot be {field.usage}", field.usage)
        return chunk.decode(codepage, errors="replace")
    if field.storage == "packed":
        return packed.decode(chunk, spec.fractional_digits)
    if field.storage == "binary":
        return binary.decode(chunk, spec.fractional_digits, signed=spec.signed)
    # plain F-zone final digits are valid positives in signed display fields too
    return zoned.decode_bytes(chunk, spec.fractional_digits, codepage=codepage, allow_unsigned=True)


def decode_record(
    fields: Sequence[Field], body: bytes, codepage: str | None = None
) -> dict[str, FieldValue]:
    """Split ``body`` by the layout; OCCURS fields become ``NAME_0``..``NAME_n``."""
    page = codepage or get_settings().codepage
    result: dict[str, FieldValue] = {}
    pos = 0
    for field in fields:
        width = field_byte_width(field)
        for name in _field_names(field):
            chunk = body[pos : pos + width]
            if len(chunk) < width:
                raise RecordTooShort(
                    f"{name} needs bytes {pos}-{pos + width}, record has {len(body)}", body
                )
            result[name] = _decode_field(field, chunk, page)
            pos += width
    log.debug("record_decoded", fields=len(result), consumed=pos, trailing=len(body) - pos)
    return result


def _encode_field(field: Field, value: NumericInput | None, codepage: str) -> bytes:
    spec = field.spec
    if spec.kind is PicKind.ALPHANUMERIC:
        if field.storage != "display":
            raise UnsupportedUsage(f"{field.name}: PIC X cannot be {field.usage}", field.usage)
        text = "" if value is None else str(value)
        return format_alphanumeric(text, spec.total_length).encode(codepage, errors="replace")
    number = DecimalValue.parse(0 if value is None else value)
    if field.storage == "packed":
        return packed.encode(number, spec.total_length, spec.fractional_digits, signed=spec.signed)
    if field.storage == "binary":
        return binary.encode(number, spec.total_length, spec.fractional_digits, signed=spec.signed)
    if spec.signed:
        return zoned.encode_bytes(
            number, spec.total_length, spec.fractional_digits, codepage=codepage
        )
    # MOVE to an unsigned field drops the sign
    digits = str(abs(number.rescale_exact(spec.fractional_digits).unscaled))
    if len(digits) > spec.total_length:
        raise ValueExceedsCapacity(
            f"{field.name}: {number} does not fit {spec.total_length} digits", number
        )
    return format_unsigned_numeric(digits, spec.total_length).encode(codepage)


def encode_record(
    fields: Sequence[Field],
    values: Mapping[str, NumericInput | None],
    codepage: str | None = None,
) -> bytes:
    """Build a record body; missing names encode as spaces or zero (INITIALIZE)."""
    page = codepage or get_settings().codepage
    parts: list[bytes] = []
    for field in fields:
        for name in _field_names(field):
            parts.append(_encode_field(field, values.get(name), page))
    return b"".join(parts)
