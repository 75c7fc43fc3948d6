"""Minimal copybook parser for record layouts.

Supports a subset:
- PIC X(n)
- PIC 9(n) / S9(n)V9(m), stored as zoned decimal (USAGE DISPLAY)
- COMP-3 (packed decimal), with or without the USAGE keyword
- COMP/COMP-4/COMP-5 (binary, big endian)
- OCCURS n
- REDEFINES/RENAMES and group items are skipped
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from cobcodec.copybook.pic import PicFieldSpec

PIC_RE = re.compile(r"\bPIC(?:TURE)?\s+(?:IS\s+)?([XS9VZ\(\)0-9]+)", re.IGNORECASE)
USAGE_RE = re.compile(
    r"(?:USAGE\s+(?:IS\s+)?)?\b(COMP(?:UTATIONAL)?(?:-[345])?|DISPLAY)\b", re.IGNORECASE
)
NAME_RE = re.compile(r"^\s*\d+\s+([A-Z0-9_-]+)", re.IGNORECASE)
OCCURS_RE = re.compile(r"OCCURS\s+(\d+)", re.IGNORECASE)


@dataclass
class Field:
    name: str
    pic: str
    usage: str | None
    occurs: int = 1

    @property
    def spec(self) -> PicFieldSpec:
        return PicFieldSpec.from_picture(self.pic)

    @property
    def storage(self) -> str:
        """One of ``display``, ``packed``, ``binary``."""
        usage = (self.usage or "DISPLAY").upper().replace("COMPUTATIONAL", "COMP")
        if usage == "COMP-3":
            return "packed"
        if usage in {"COMP", "COMP-4", "COMP-5"}:
            return "binary"
        return "display"


def parse_copybook(text: str) -> list[Field]:
    fields: list[Field] = []
    for line in text.splitlines():
        if not line.strip() or line.strip().startswith("*"):
            continue
        name_match = NAME_RE.search(line)
        pic_match = PIC_RE.search(line)
        if not name_match or not pic_match:
            continue
        name = name_match.group(1).upper()
        pic = pic_match.group(1).upper()
        rest = line[pic_match.end() :]
        usage_match = USAGE_RE.search(rest)
        usage = usage_match.group(1).upper() if usage_match else None
        occurs_match = OCCURS_RE.search(line)
        occurs = int(occurs_match.group(1)) if occurs_match else 1
        fields.append(Field(name=name, pic=pic, usage=usage, occurs=occurs))
    return fields
