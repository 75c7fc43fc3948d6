"""Identifier checks carried over from the terminal screens' field edits."""

from __future__ import annotations

import re

CARD_RE = re.compile(r"^[0-9]{13,19}$")
ACCOUNT_RE = re.compile(r"^[0-9]{11}$")
SSN_RE = re.compile(r"^[0-9]{9}$")
INVALID_SSNS = frozenset({"123456789", "078051120"} | {d * 9 for d in "0123456789"})


def _clean(value: str | int) -> str:
    return re.sub(r"[\s-]", "", str(value))


def luhn_checksum_ok(digits: str) -> bool:
    total = 0
    for index, ch in enumerate(reversed(digits)):
        digit = int(ch)
        if index % 2:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def is_valid_card_number(value: str | int) -> bool:
    digits = _clean(value)
    return bool(CARD_RE.match(digits)) and luhn_checksum_ok(digits)


def account_check_digit(first_ten: str) -> int:
    """Alternating 1/2 weights over the first ten digits, mod 10."""
    total = sum(int(ch) * (1 if i % 2 == 0 else 2) for i, ch in enumerate(first_ten))
    return (10 - total % 10) % 10


def is_valid_account_number(value: str | int) -> bool:
    digits = _clean(value)
    if not ACCOUNT_RE.match(digits) or len(set(digits)) == 1:
        return False
    return account_check_digit(digits[:10]) == int(digits[10])


def is_valid_ssn(value: str | int) -> bool:
    digits = _clean(value)
    if not SSN_RE.match(digits) or digits in INVALID_SSNS:
        return False
    area, group, serial = digits[:3], digits[3:5], digits[5:]
    if area in {"000", "666"} or area.startswith("9"):
        return False
    return group != "00" and serial != "0000"
