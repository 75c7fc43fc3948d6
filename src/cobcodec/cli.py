from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import orjson
import typer
import yaml
from rich.console import Console
from rich.markup import escape

from cobcodec.codecs import packed, zoned
from cobcodec.config.logging import configure_logging
from cobcodec.config.settings import get_settings, init_settings, load_settings, sample_settings
from cobcodec.copybook.parser import parse_copybook
from cobcodec.copybook.pic import PicFieldSpec, format_field
from cobcodec.copybook.record import decode_record, record_length
from cobcodec.data.records import iter_bdw_records, iter_fixed_records, iter_records_with_rdw
from cobcodec.dates import days_in_month, is_leap_year, parse_ccyymmdd
from cobcodec.errors import CodecError
from cobcodec.numeric.decimal_value import DecimalValue, SignStyle

app = typer.Typer(help="Encode and decode COBOL field formats.")
record_app = typer.Typer(help="Copybook-driven record decoding.")
console = Console()
FRAMINGS = {"rdw", "bdw", "fixed"}

app.add_typer(record_app, name="record")

# values such as -123.45 must not be taken for options
VALUE_COMMAND = {"context_settings": {"ignore_unknown_options": True}}


def _serialize(obj: object) -> object:
    # DecimalValue is not JSON-native; emit its exact display string.
    if isinstance(obj, DecimalValue):
        return str(obj)
    raise TypeError(f"Cannot serialize {type(obj).__name__}")


def _emit(payload: object, output: Path | None = None) -> None:
    if output:
        output.write_bytes(
            orjson.dumps(payload, option=orjson.OPT_PASSTHROUGH_DATACLASS, default=_serialize)
        )
        console.print(f"[bold green]Wrote[/] output to {output}")
    else:
        console.print(
            orjson.dumps(
                payload,
                option=orjson.OPT_INDENT_2 | orjson.OPT_PASSTHROUGH_DATACLASS,
                default=_serialize,
            ).decode(),
            soft_wrap=True,
            markup=False,
        )


@contextmanager
def _codec_errors() -> Iterator[None]:
    try:
        yield
    except CodecError as exc:
        console.print(f"[bold red]{type(exc).__name__}:[/] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1) from exc


def _parse_value(value: str) -> DecimalValue:
    with _codec_errors():
        return DecimalValue.parse(value)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    log_json: bool = typer.Option(False, "--log-json", help="Emit logs as JSON lines."),
    settings: Path | None = typer.Option(
        None, "--settings", help="YAML/JSON settings file (precision, rounding, signs, codepage)."
    ),
) -> None:
    configure_logging(verbose=verbose, log_json=log_json)
    if settings:
        if not settings.is_file():
            raise typer.BadParameter(f"Settings file not found: {settings}")
        with _codec_errors():
            init_settings(load_settings(settings))


@app.command(**VALUE_COMMAND)
def pack(
    value: str = typer.Argument(..., help="Decimal value, e.g. -123.45."),
    digits: int = typer.Option(..., "--digits", "-n", help="Total digits of the COMP-3 field."),
    scale: int = typer.Option(0, "--scale", "-s", help="Digits after the implied point."),
    unsigned: bool = typer.Option(False, "--unsigned", help="Write the unsigned sign code."),
) -> None:
    """Encode a value as packed decimal and print its hex view."""
    number = _parse_value(value)
    with _codec_errors():
        buffer = packed.encode(number, digits, scale, signed=not unsigned)
    _emit({"value": number, "digits": digits, "scale": scale, "hex": packed.to_hex(buffer)})


@app.command()
def unpack(
    hex_bytes: str = typer.Argument(..., metavar="HEX", help="Packed bytes as hex, e.g. 12345C."),
    scale: int = typer.Option(0, "--scale", "-s", help="Digits after the implied point."),
) -> None:
    """Decode a packed-decimal hex string."""
    with _codec_errors():
        number = packed.decode(packed.from_hex(hex_bytes), scale)
    _emit({"hex": hex_bytes.upper(), "scale": scale, "value": number})


@app.command(**VALUE_COMMAND)
def zone(
    value: str = typer.Argument(..., help="Decimal value, e.g. -123.45."),
    digits: int = typer.Option(..., "--digits", "-n", help="Total digits of the zoned field."),
    scale: int | None = typer.Option(None, "--scale", "-s", help="Align to this many decimals."),
) -> None:
    """Encode a value as zoned decimal with a trailing overpunch."""
    number = _parse_value(value)
    with _codec_errors():
        text = zoned.encode(number, digits, scale)
    _emit({"value": number, "digits": digits, "zoned": text})


@app.command(**VALUE_COMMAND)
def unzone(
    text: str = typer.Argument(..., help="Zoned text, e.g. 1234E or 0012}."),
    scale: int = typer.Option(0, "--scale", "-s", help="Digits after the implied point."),
    unsigned: bool = typer.Option(False, "--unsigned", help="Accept a plain trailing digit."),
) -> None:
    """Decode zoned text with a trailing overpunch."""
    with _codec_errors():
        number = zoned.decode(text, scale, allow_unsigned=unsigned)
    _emit({"zoned": text, "scale": scale, "value": number})


@app.command()
def date(text: str = typer.Argument(..., help="CCYYMMDD date.")) -> None:
    """Validate a CCYYMMDD date."""
    with _codec_errors():
        parsed = parse_ccyymmdd(text)
    _emit(
        {
            "ccyymmdd": text,
            "iso": parsed.isoformat(),
            "leap_year": is_leap_year(parsed.year),
            "days_in_month": days_in_month(parsed.year, parsed.month),
        }
    )


@app.command(**VALUE_COMMAND)
def pic(
    value: str = typer.Argument(..., help="Raw field value."),
    picture: str = typer.Option(..., "--picture", "-p", help="PIC string, e.g. S9(5)V99."),
) -> None:
    """Format a value for a PIC field."""
    with _codec_errors():
        spec = PicFieldSpec.from_picture(picture)
        formatted = format_field(spec, value)
    _emit({"picture": picture.upper(), "kind": spec.kind.value, "formatted": formatted})


@app.command(**VALUE_COMMAND)
def display(
    value: str = typer.Argument(..., help="Decimal value."),
    sign_style: SignStyle = typer.Option(SignStyle.MINUS, "--sign-style", help="Sign rendering."),
    thousands: bool = typer.Option(False, "--thousands", help="Group thousands."),
    currency: bool = typer.Option(False, "--currency", help="Prefix the currency symbol."),
) -> None:
    """Render a value for display."""
    number = _parse_value(value)
    symbol = get_settings().currency_symbol if currency else ""
    _emit({"value": number, "display": number.to_display_string(thousands, sign_style, symbol)})


@app.command("settings-sample")
def settings_sample() -> None:
    """Print a settings file with every key at its default."""
    console.print(yaml.safe_dump(sample_settings(), sort_keys=False), highlight=False, markup=False)


@record_app.command("decode")
def record_decode(
    copybook: Path = typer.Argument(..., help="Copybook describing the record layout."),
    input: Path = typer.Argument(..., help="Dataset to decode."),
    framing: str = typer.Option("fixed", "--framing", "-f", help="fixed | rdw | bdw."),
    codepage: str | None = typer.Option(None, "--codepage", "-p", help="EBCDIC codepage."),
    max_records: int | None = typer.Option(None, "--max-records", help="Stop after N records."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Optional path to write JSON."),
) -> None:
    """Decode every record of a dataset using a copybook layout."""
    mode = framing.lower()
    if mode not in FRAMINGS:
        raise typer.BadParameter(f"Unsupported framing '{framing}'. Choose from {FRAMINGS}.")
    for path in (copybook, input):
        if not path.is_file():
            raise typer.BadParameter(f"Input file not found: {path}")
    fields = parse_copybook(copybook.read_text())
    if not fields:
        raise typer.BadParameter(f"No elementary fields found in {copybook}")
    data = input.read_bytes()

    with _codec_errors():
        if mode == "rdw":
            records = iter_records_with_rdw(data)
        elif mode == "bdw":
            records = iter_bdw_records(data)
        else:
            records = iter_fixed_records(data, record_length(fields))
        decoded = []
        for index, (_length, body) in enumerate(records):
            if max_records is not None and index >= max_records:
                break
            decoded.append(decode_record(fields, body, codepage))
    _emit(decoded, output)


if __name__ == "__main__":
    app()
