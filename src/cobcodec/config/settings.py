"""Process-wide codec settings.

Settings are immutable and initialized at most once, at startup. Every codec
function also accepts its configuration explicitly, so the global value is only
a default and never changes underneath a running caller.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

from cobcodec.codecs.signs import DEFAULT_SIGN_TABLE, PackedSignTable
from cobcodec.errors import InvalidFieldSpec
from cobcodec.numeric.context import DecimalConfig, Rounding

log = structlog.get_logger(__name__)

DEFAULT_CODEPAGE = "cp037"


def _section(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = payload.get(key) or {}
    if not isinstance(value, Mapping):
        raise InvalidFieldSpec(f"Settings key '{key}' must be a mapping", value)
    return value


@dataclass(frozen=True)
class CodecSettings:
    decimal: DecimalConfig = field(default_factory=DecimalConfig)
    currency_symbol: str = "$"
    thousands_separator: str = ","
    codepage: str = DEFAULT_CODEPAGE
    packed_signs: PackedSignTable = DEFAULT_SIGN_TABLE

    @staticmethod
    def from_mapping(payload: Mapping[str, Any]) -> CodecSettings:
        if not isinstance(payload, Mapping):
            raise InvalidFieldSpec("Settings must be a mapping of keys to values", payload)
        decimal_cfg = _section(payload, "decimal")
        signs = _section(payload, "packed_signs")
        separator = str(payload.get("thousands_separator", ","))
        if len(separator) != 1:
            raise InvalidFieldSpec("thousands_separator must be a single character", separator)
        codepage = str(payload.get("codepage", DEFAULT_CODEPAGE))
        try:
            "0".encode(codepage)
        except LookupError:
            raise InvalidFieldSpec(f"Unknown codepage '{codepage}'", codepage) from None
        precision = decimal_cfg.get("precision", DecimalConfig.precision)
        if isinstance(precision, bool) or not isinstance(precision, int):
            raise InvalidFieldSpec(f"Precision must be an integer, got {precision!r}", precision)
        return CodecSettings(
            decimal=DecimalConfig(
                precision=precision,
                rounding=Rounding.parse(str(decimal_cfg.get("rounding", "HALF_UP"))),
            ),
            currency_symbol=str(payload.get("currency_symbol", "$")),
            thousands_separator=separator,
            codepage=codepage,
            packed_signs=PackedSignTable.from_codes(
                positive=signs.get("positive", ["A", "C", "E", "F"]),
                negative=signs.get("negative", ["B", "D"]),
                preferred_positive=signs.get("preferred_positive", "C"),
                preferred_negative=signs.get("preferred_negative", "D"),
                preferred_unsigned=signs.get("preferred_unsigned", "F"),
            )
            if signs
            else DEFAULT_SIGN_TABLE,
        )


def load_settings(path: Path) -> CodecSettings:
    if path.suffix.lower() in {".yml", ".yaml"}:
        payload = yaml.safe_load(path.read_text())
    else:
        payload = json.loads(path.read_text())
    return CodecSettings.from_mapping({} if payload is None else payload)


def sample_settings() -> dict[str, Any]:
    return {
        "decimal": {"precision": 31, "rounding": "HALF_UP"},
        "currency_symbol": "$",
        "thousands_separator": ",",
        "codepage": DEFAULT_CODEPAGE,
        "packed_signs": {
            "positive": ["A", "C", "E", "F"],
            "negative": ["B", "D"],
            "preferred_positive": "C",
            "preferred_negative": "D",
            "preferred_unsigned": "F",
        },
    }


_DEFAULT = CodecSettings()
_active: CodecSettings | None = None
_lock = threading.Lock()


def init_settings(settings: CodecSettings) -> CodecSettings:
    """Install the process-wide settings once; repeating with equal settings is a no-op."""
    global _active
    with _lock:
        if _active is not None and _active != settings:
            raise RuntimeError("Codec settings are already initialized for this process")
        _active = settings
    log.debug("settings_initialized", codepage=settings.codepage, rounding=settings.decimal.rounding.name)
    return settings


def get_settings() -> CodecSettings:
    return _active if _active is not None else _DEFAULT
