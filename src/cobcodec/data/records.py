"""Record framing for mainframe datasets.

- RDW (record descriptor word): 2-byte big-endian length including the RDW,
  then 2 reserved bytes
- BDW (block descriptor word): 4-byte length prefix per block of RDW records
- fixed-length (RECFM=F/FB): records cut at a constant length

A descriptor that is cut off, shorter than itself, or longer than the bytes
that follow raises ``RecordTooShort``; nothing is dropped silently.
"""

from __future__ import annotations

from collections.abc import Iterable

from cobcodec.errors import InvalidFieldSpec, RecordTooShort

DESCRIPTOR_SIZE = 4
MAX_RDW_LENGTH = 0xFFFF


def rdw_prefix(record_body: bytes) -> bytes:
    length = len(record_body) + DESCRIPTOR_SIZE
    if length > MAX_RDW_LENGTH:
        raise InvalidFieldSpec(
            f"Record body of {len(record_body)} bytes does not fit an RDW", len(record_body)
        )
    return length.to_bytes(2, "big") + bytes(2)


def _descriptor_length(data: bytes, offset: int, width: int, kind: str) -> int:
    remaining = len(data) - offset
    if remaining < DESCRIPTOR_SIZE:
        raise RecordTooShort(
            f"{kind} at offset {offset} is cut off after {remaining} bytes", data[offset:]
        )
    length = int.from_bytes(data[offset : offset + width], "big")
    if length < DESCRIPTOR_SIZE:
        raise RecordTooShort(f"{kind} at offset {offset} declares length {length}", length)
    if length > remaining:
        raise RecordTooShort(
            f"{kind} at offset {offset} declares {length} bytes, {remaining} remain", length
        )
    return length


def iter_records_with_rdw(dataset: bytes) -> Iterable[tuple[int, bytes]]:
    """Yield ``(length, body)`` per RDW record; ``length`` counts the RDW."""
    offset = 0
    while offset < len(dataset):
        length = _descriptor_length(dataset, offset, 2, "RDW")
        yield length, dataset[offset + DESCRIPTOR_SIZE : offset + length]
        offset += length


def iter_bdw_records(data: bytes) -> Iterable[tuple[int, bytes]]:
    """Yield the RDW records of every BDW block in turn (RECFM=VB)."""
    offset = 0
    while offset < len(data):
        block_len = _descriptor_length(data, offset, 4, "BDW")
        yield from iter_records_with_rdw(data[offset + DESCRIPTOR_SIZE : offset + block_len])
        offset += block_len


def iter_fixed_records(data: bytes, record_length: int) -> Iterable[tuple[int, bytes]]:
    """Fixed-length records; a short trailing fragment is yielded as-is."""
    if record_length < 1:
        raise InvalidFieldSpec(f"Record length must be positive, got {record_length}", record_length)
    for offset in range(0, len(data), record_length):
        body = data[offset : offset + record_length]
        yield len(body), body
