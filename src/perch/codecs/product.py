"""Product codec builder — tuples and fixed-shape records.

Fields are written one after another in declaration order. Parsing
explores every way each field can consume the path before moving on to
the next, because a field's boundary (how many segments a nested
sequence takes, say) is only known once the later fields agree.
"""

from collections.abc import Callable, Sequence
from typing import Any

from perch.codecs.base import Codec, ParseResults, SegmentCodec, Segments, parse_consecutive
from perch.errors import RenderError
from perch.types import Record, Tuple, TypeDescriptor

Resolve = Callable[[TypeDescriptor], SegmentCodec]


def build_product(
    codecs: Sequence[SegmentCodec],
    construct: Callable[..., Any],
    destruct: Callable[[Any], Sequence[Any]],
) -> Codec:
    """Build a codec over *codecs* in order.

    *construct* receives the parsed field values positionally;
    *destruct* returns a composite value's fields in the same order.
    """
    fields = tuple(codecs)

    def parse_field(index: int) -> Callable[[Segments], ParseResults]:
        return fields[index].parse

    def parse(segments: Segments) -> ParseResults:
        for values, rest in parse_consecutive(parse_field, len(fields), segments):
            yield construct(*values), rest

    def render(value: Any) -> list[str]:
        parts = tuple(destruct(value))
        if len(parts) != len(fields):
            msg = f"Expected {len(fields)} field(s), got {len(parts)} from {value!r}."
            raise RenderError(msg)
        out: list[str] = []
        for codec, part in zip(fields, parts):
            out.extend(codec.render(part))
        return out

    return Codec(parse=parse, render=render)


def build_tuple(descriptor: Tuple, resolve: Resolve) -> Codec:
    """Codec for a Python tuple of fixed arity."""
    codecs = [resolve(item) for item in descriptor.items]
    return build_product(codecs, lambda *values: values, tuple)


def build_record(descriptor: Record, resolve: Resolve) -> Codec:
    """Codec for a record: positional constructor, attribute reader."""
    names = tuple(f.name for f in descriptor.fields)
    codecs = [resolve(f.type) for f in descriptor.fields]

    def destruct(value: Any) -> tuple[Any, ...]:
        try:
            return tuple(getattr(value, name) for name in names)
        except AttributeError as exc:
            msg = f"{value!r} is not a {getattr(descriptor.cls, '__name__', descriptor.cls)}."
            raise RenderError(msg) from exc

    return build_product(codecs, descriptor.cls, destruct)
