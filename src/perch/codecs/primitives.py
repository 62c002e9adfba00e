"""Primitive codec table.

Each primitive consumes and produces exactly one segment. A segment
that does not match the kind's textual grammar gives no result — the
caller moves on to the next candidate — rather than raising.
"""

import re
import struct
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import Any

from perch.codecs.base import Codec, ParseResults, Segments
from perch.errors import RenderError

_INTEGER = re.compile(r"[-+]?[0-9]+")
_FLOAT = re.compile(
    r"[-+]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:e[-+]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)
_DECIMAL = re.compile(r"[-+]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")

# Digits in the widest fixed-width integer (uint64)
_MAX_FIXED_DIGITS = 20

# (min, max) for each fixed-width integer kind
INTEGER_RANGES: dict[str, tuple[int, int]] = {
    "int8": (-(2**7), 2**7 - 1),
    "uint8": (0, 2**8 - 1),
    "int16": (-(2**15), 2**15 - 1),
    "uint16": (0, 2**16 - 1),
    "int32": (-(2**31), 2**31 - 1),
    "uint32": (0, 2**32 - 1),
    "int64": (-(2**63), 2**63 - 1),
    "uint64": (0, 2**64 - 1),
}


def _segment_codec(
    convert: Callable[[str], Any | None],
    write: Callable[[Any], str],
) -> Codec:
    """Build a one-segment codec from a converter returning ``None`` on mismatch."""

    def parse(segments: Segments) -> ParseResults:
        if not segments:
            return
        value = convert(segments[0])
        if value is not None:
            yield value, segments[1:]

    def render(value: Any) -> list[str]:
        return [write(value)]

    return Codec(parse=parse, render=render)


def parse_bool(text: str) -> bool | None:
    # Lowercase only, matching what render emits
    if text == "true":
        return True
    if text == "false":
        return False
    return None


def write_bool(value: Any) -> str:
    return "true" if value else "false"


def _integer_parser(bounds: tuple[int, int] | None) -> Callable[[str], int | None]:
    def convert(text: str) -> int | None:
        if not _INTEGER.fullmatch(text):
            return None
        if bounds is not None and len(text.lstrip("+-").lstrip("0")) > _MAX_FIXED_DIGITS:
            return None
        try:
            value = int(text)
        except ValueError:
            # Longer than the interpreter's int conversion limit
            return None
        if bounds is not None and not bounds[0] <= value <= bounds[1]:
            return None
        return value

    return convert


def parse_float64(text: str) -> float | None:
    if not _FLOAT.fullmatch(text):
        return None
    return float(text)


def parse_float32(text: str) -> float | None:
    value = parse_float64(text)
    if value is None:
        return None
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return None


def write_float(value: Any) -> str:
    return repr(float(value))


def parse_decimal(text: str) -> Decimal | None:
    if not _DECIMAL.fullmatch(text):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def write_decimal(value: Any) -> str:
    value = Decimal(value)
    if not value.is_finite():
        msg = f"Cannot write non-finite decimal {value!r} as a path segment."
        raise RenderError(msg)
    return format(value, "f")


def _build_table() -> dict[str, Codec]:
    table: dict[str, Codec] = {
        "str": _segment_codec(lambda s: s, str),
        "bool": _segment_codec(parse_bool, write_bool),
        "int": _segment_codec(_integer_parser(None), lambda v: str(int(v))),
        "float32": _segment_codec(parse_float32, write_float),
        "float64": _segment_codec(parse_float64, write_float),
        "decimal": _segment_codec(parse_decimal, write_decimal),
    }
    for kind, bounds in INTEGER_RANGES.items():
        table[kind] = _segment_codec(_integer_parser(bounds), lambda v: str(int(v)))
    return table


# kind name -> one-segment codec
PRIMITIVES: dict[str, Codec] = _build_table()
