"""Error taxonomy for the codec core.

Every codec operation raises one of these instead of substituting a default.
Callers that want "always return something" go through ``cobcodec.fallback``.
"""

from __future__ import annotations


class CodecError(ValueError):
    """Base class for all codec failures; carries the offending input."""

    def __init__(self, message: str, value: object = None) -> None:
        super().__init__(message)
        self.value = value


class InvalidNumericFormat(CodecError):
    pass


class ValueExceedsCapacity(CodecError):
    pass


class InvalidDigitNibble(CodecError):
    pass


class InvalidSignNibble(CodecError):
    pass


class InvalidOverpunchCharacter(CodecError):
    pass


class InvalidDateFormat(CodecError):
    pass


class InvalidDateRange(CodecError):
    pass


class InvalidTimeFormat(CodecError):
    pass


class InvalidTimeRange(CodecError):
    pass


class InvalidFieldSpec(CodecError):
    """Field parameters (length, digits, scale) are themselves invalid."""


class RecordTooShort(CodecError):
    pass


class UnsupportedUsage(CodecError):
    pass
