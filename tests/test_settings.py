import json

import pytest
import yaml

from cobcodec.config import settings as settings_module
from cobcodec.config.settings import (
    CodecSettings,
    get_settings,
    init_settings,
    load_settings,
    sample_settings,
)
from cobcodec.errors import InvalidFieldSpec
from cobcodec.numeric.context import DecimalConfig, Rounding


@pytest.fixture(autouse=True)
def _reset_settings(monkeypatch):
    monkeypatch.setattr(settings_module, "_active", None)


def test_defaults():
    current = get_settings()
    assert current.codepage == "cp037"
    assert current.decimal == DecimalConfig(precision=31, rounding=Rounding.HALF_UP)
    assert current.packed_signs.preferred_negative == 0xD


def test_sample_round_trips_through_yaml(tmp_path):
    path = tmp_path / "cobcodec.yaml"
    path.write_text(yaml.safe_dump(sample_settings()))
    assert load_settings(path) == CodecSettings()


def test_json_settings(tmp_path):
    path = tmp_path / "cobcodec.json"
    path.write_text(
        json.dumps(
            {
                "decimal": {"precision": 38, "rounding": "ROUND_HALF_EVEN"},
                "thousands_separator": ".",
                "codepage": "cp500",
                "packed_signs": {"positive": ["C", "F"], "negative": ["D"]},
            }
        )
    )
    loaded = load_settings(path)
    assert loaded.decimal.precision == 38
    assert loaded.decimal.rounding is Rounding.HALF_EVEN
    assert loaded.thousands_separator == "."
    assert loaded.codepage == "cp500"
    assert loaded.packed_signs.sign_of(0xA) is None
    assert loaded.packed_signs.sign_of(0xD) == -1


def test_empty_file_means_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_settings(path) == CodecSettings()


@pytest.mark.parametrize(
    "payload",
    [
        {"thousands_separator": ", "},
        {"codepage": "no-such-codepage"},
        {"decimal": {"precision": 18}},
        {"decimal": {"rounding": "SIDEWAYS"}},
        {"packed_signs": {"positive": ["C"], "negative": ["C", "D"]}},
        {"packed_signs": ["C", "D"]},
        {"decimal": "HALF_UP"},
        {"decimal": {"precision": "many"}},
        ["codepage", "cp037"],
    ],
)
def test_invalid_mappings(payload):
    with pytest.raises(InvalidFieldSpec):
        CodecSettings.from_mapping(payload)


def test_initialized_once():
    custom = CodecSettings(currency_symbol="EUR ")
    init_settings(custom)
    assert get_settings() is custom
    init_settings(CodecSettings(currency_symbol="EUR "))
    with pytest.raises(RuntimeError):
        init_settings(CodecSettings())


def test_non_mapping_file_is_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- cp037\n- cp500\n")
    with pytest.raises(InvalidFieldSpec):
        load_settings(path)
