"""Sequence codec builder — count-prefixed homogeneous sequences.

Wire shape: ``<count>/<item 0>/<item 1>/.../<item n-1>``.
"""

import re
from collections.abc import Callable
from typing import Any

from perch.codecs.base import Codec, ParseResults, SegmentCodec, Segments, parse_consecutive

_COUNT = re.compile(r"[0-9]+")


def build_sequence(
    element: SegmentCodec,
    container: Callable[[list[Any]], Any] = list,
) -> Codec:
    """Build a codec for sequences of *element* values.

    Parsing succeeds only when exactly ``count`` items parse; a missing
    item fails the whole sequence rather than yielding a shorter one.
    """

    def parse_item(_index: int) -> Callable[[Segments], ParseResults]:
        return element.parse

    def parse(segments: Segments) -> ParseResults:
        if not segments or not _COUNT.fullmatch(segments[0]):
            return
        try:
            count = int(segments[0])
        except ValueError:
            # Longer than the interpreter's int conversion limit
            return
        for items, rest in parse_consecutive(parse_item, count, segments[1:]):
            yield container(list(items)), rest

    def render(value: Any) -> list[str]:
        items = list(value)
        out = [str(len(items))]
        for item in items:
            out.extend(element.render(item))
        return out

    return Codec(parse=parse, render=render)
