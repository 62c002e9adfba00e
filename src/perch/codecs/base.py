"""Codec protocol and the building blocks shared by every builder.

A codec pairs a lazy, multi-result ``parse`` with a total ``render``.
``parse`` is a generator: calling it twice gives two independent
iterators, and nothing past the first full match is computed unless
the caller keeps pulling.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, Protocol, TypeAlias, runtime_checkable

from perch.errors import ConfigurationError

Segments: TypeAlias = tuple[str, ...]
ParseResults: TypeAlias = Iterator[tuple[Any, Segments]]
SegmentParser: TypeAlias = Callable[[Segments], ParseResults]
SegmentWriter: TypeAlias = Callable[[Any], list[str]]


@runtime_checkable
class SegmentCodec(Protocol):
    """Anything with a segment-level ``parse`` and ``render``."""

    def parse(self, segments: Segments) -> ParseResults: ...
    def render(self, value: Any) -> list[str]: ...


@dataclass(frozen=True, slots=True)
class Codec:
    """A compiled parse/render pair for one descriptor node."""

    parse: SegmentParser
    render: SegmentWriter


class ForwardCodec:
    """Placeholder registered before a descriptor's body is built.

    Recursive descriptors reach this placeholder instead of recursing
    into the resolver again. Calls are forwarded once ``bind()`` has
    supplied the real codec.
    """

    __slots__ = ("_name", "_target")

    def __init__(self, name: str = "") -> None:
        self._name = name
        self._target: SegmentCodec | None = None

    @property
    def bound(self) -> bool:
        return self._target is not None

    def bind(self, codec: SegmentCodec) -> None:
        """Point this placeholder at the finished codec. Only allowed once."""
        if self._target is not None:
            msg = f"Codec for {self._name!r} is already bound."
            raise ConfigurationError(msg)
        self._target = codec

    def _resolved(self) -> SegmentCodec:
        if self._target is None:
            msg = f"Codec for {self._name!r} used before resolution finished."
            raise ConfigurationError(msg)
        return self._target

    def parse(self, segments: Segments) -> ParseResults:
        return self._resolved().parse(segments)

    def render(self, value: Any) -> list[str]:
        return self._resolved().render(value)

    def __repr__(self) -> str:
        state = "bound" if self.bound else "unbound"
        return f"<ForwardCodec {self._name!r} {state}>"


def parse_consecutive(
    parser_at: Callable[[int], SegmentParser],
    count: int,
    segments: Segments,
) -> Iterator[tuple[tuple[Any, ...], Segments]]:
    """Parse *count* values left to right, threading the remaining path.

    Depth-first over every result of every step: for each way the
    value at index ``i`` can be parsed, all ways of parsing ``i + 1``
    onwards from what it left over are tried. Yields ``(values, rest)``
    for each complete assignment.

    Uses an explicit stack of iterators so long sequences neither
    recurse nor enumerate anything past a failing step.
    """
    if count == 0:
        yield (), segments
        return

    stack: list[ParseResults] = [iter(parser_at(0)(segments))]
    values: list[Any] = []
    # Invariant at the top of the loop: len(values) == len(stack) - 1
    while stack:
        step = next(stack[-1], None)
        if step is None:
            stack.pop()
            if values:
                values.pop()
            continue

        value, rest = step
        values.append(value)
        if len(stack) == count:
            yield tuple(values), rest
            values.pop()
        else:
            stack.append(iter(parser_at(len(stack))(rest)))
