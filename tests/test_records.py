import pytest

from cobcodec.data.records import iter_bdw_records, iter_fixed_records, iter_records_with_rdw, rdw_prefix
from cobcodec.errors import InvalidFieldSpec, RecordTooShort


def _block(*bodies: bytes) -> bytes:
    block = b"".join(rdw_prefix(body) + body for body in bodies)
    return (len(block) + 4).to_bytes(4, "big") + block


def test_iter_bdw_records_parses_blocks():
    body1 = b"AAAA"
    body2 = b"BBBBB"
    dataset = _block(body1, body2) + _block(b"C")
    records = list(iter_bdw_records(dataset))
    assert records == [(8, body1), (9, body2), (5, b"C")]


def test_rdw_prefix():
    assert rdw_prefix(b"XY") == b"\x00\x06\x00\x00"
    with pytest.raises(InvalidFieldSpec):
        rdw_prefix(bytes(0xFFFC))


def test_rdw_record_longer_than_data_raises():
    body = b"\x12\x3c"
    dataset = rdw_prefix(body) + body + b"\x00\x20\x00\x00XYZ"
    records = iter_records_with_rdw(dataset)
    assert next(records) == (6, body)
    with pytest.raises(RecordTooShort):
        next(records)


@pytest.mark.parametrize(
    "dataset",
    [
        b"\x00\x03\x00\x00",  # length below the RDW itself
        b"\x00\x06\x00",  # descriptor cut off
        rdw_prefix(b"A") + b"A" + b"\x00",  # stray trailing byte
    ],
)
def test_corrupt_rdw_raises(dataset):
    with pytest.raises(RecordTooShort):
        list(iter_records_with_rdw(dataset))


def test_corrupt_bdw_raises():
    good = _block(b"AAAA")
    with pytest.raises(RecordTooShort):
        list(iter_bdw_records(good + b"\x00\x00\x00\x40" + b"\x00" * 8))
    with pytest.raises(RecordTooShort):
        list(iter_bdw_records(b"\x00\x00\x00\x02"))
    # RDW inside the block overruns the block
    block = b"\x00\x09\x00\x00AB"
    with pytest.raises(RecordTooShort):
        list(iter_bdw_records((len(block) + 4).to_bytes(4, "big") + block))


def test_empty_dataset_yields_nothing():
    assert list(iter_records_with_rdw(b"")) == []
    assert list(iter_bdw_records(b"")) == []


def test_fixed_records_keep_short_tail():
    assert list(iter_fixed_records(b"AAABBBC", 3)) == [(3, b"AAA"), (3, b"BBB"), (1, b"C")]
    with pytest.raises(InvalidFieldSpec):
        list(iter_fixed_records(b"AAA", 0))
