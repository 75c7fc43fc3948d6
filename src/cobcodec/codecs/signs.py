"""Packed-decimal sign nibble table.

Mainframe dialects disagree on which nibbles count as signs, so the table is a
value rather than a constant. The default accepts A/C/E/F as positive and B/D
as negative, and writes C, D, or F (unsigned).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from cobcodec.errors import InvalidFieldSpec


def _nibble(code: int | str) -> int:
    value = int(code, 16) if isinstance(code, str) else int(code)
    if not 0xA <= value <= 0xF:
        raise InvalidFieldSpec(f"Sign code must be a nibble in A-F, got {code!r}", code)
    return value


@dataclass(frozen=True)
class PackedSignTable:
    positive: frozenset[int] = frozenset({0xA, 0xC, 0xE, 0xF})
    negative: frozenset[int] = frozenset({0xB, 0xD})
    preferred_positive: int = 0xC
    preferred_negative: int = 0xD
    preferred_unsigned: int = 0xF

    def __post_init__(self) -> None:
        if self.positive & self.negative:
            raise InvalidFieldSpec("Positive and negative sign codes overlap")
        if self.preferred_positive not in self.positive:
            raise InvalidFieldSpec("Preferred positive code is not a positive sign")
        if self.preferred_negative not in self.negative:
            raise InvalidFieldSpec("Preferred negative code is not a negative sign")
        if self.preferred_unsigned not in self.positive:
            raise InvalidFieldSpec("Preferred unsigned code is not a positive sign")

    @staticmethod
    def from_codes(
        positive: Iterable[int | str],
        negative: Iterable[int | str],
        preferred_positive: int | str = 0xC,
        preferred_negative: int | str = 0xD,
        preferred_unsigned: int | str = 0xF,
    ) -> PackedSignTable:
        return PackedSignTable(
            positive=frozenset(_nibble(c) for c in positive),
            negative=frozenset(_nibble(c) for c in negative),
            preferred_positive=_nibble(preferred_positive),
            preferred_negative=_nibble(preferred_negative),
            preferred_unsigned=_nibble(preferred_unsigned),
        )

    def sign_of(self, nibble: int) -> int | None:
        """Return +1, -1, or None when the nibble is not a recognized sign."""
        if nibble in self.positive:
            return 1
        if nibble in self.negative:
            return -1
        return None


DEFAULT_SIGN_TABLE = PackedSignTable()
