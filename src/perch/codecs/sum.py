"""Sum codec builder — dispatch on a literal head segment.

Each case is written as ``<prefix>/<fields...>``; an unlabeled case
(empty prefix) is written as just its fields. When parsing, the head
segment selects every case registered under it, and the unlabeled case
is *also* tried against the whole path — its fields might legitimately
start with a segment that happens to equal some prefix. The router, not
this layer, picks among the candidates by requiring the whole path to
be consumed.
"""

import logging
import re
from collections.abc import Callable
from typing import Any

from perch.codecs.base import Codec, ParseResults, SegmentCodec, SegmentParser, Segments
from perch.codecs.product import build_product
from perch.config import CASE_PREFIX_MODES, RouterConfig
from perch.errors import ConfigurationError, RenderError
from perch.types import Case, Record, Ref, Sum, Tuple, TypeDescriptor, Variant

logger = logging.getLogger("perch.resolver")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def case_prefix(case: Case, config: RouterConfig) -> str:
    """Return the literal segment for *case* ("" means unlabeled)."""
    if case.prefix is not None:
        return case.prefix.strip(config.separator)

    mode = config.case_prefix
    if mode == "name":
        return case.name
    if mode == "lower":
        return case.name.lower()
    if mode == "kebab":
        return _CAMEL_BOUNDARY.sub("-", case.name).lower()

    msg = f"Unknown case_prefix mode {mode!r}; expected one of {', '.join(CASE_PREFIX_MODES)}."
    raise ConfigurationError(msg)


def _case_codec(case: Case, resolve: Callable[[TypeDescriptor], SegmentCodec]) -> Codec:
    codecs = [resolve(f.type) for f in case.fields]
    names = tuple(f.name for f in case.fields)

    if case.cls is None:

        def construct(*values: Any) -> Variant:
            return Variant(case.name, values)

    else:
        construct = case.cls

    def destruct(value: Any) -> tuple[Any, ...]:
        if isinstance(value, Variant):
            return value.fields
        try:
            return tuple(getattr(value, name) for name in names)
        except AttributeError as exc:
            msg = f"{value!r} has no fields {names!r} for case {case.name!r}."
            raise RenderError(msg) from exc

    return build_product(codecs, construct, destruct)


def _is_left_recursive(case: Case, descriptor: Sum) -> bool:
    """True when the first segment *case* reads belongs to *descriptor* itself."""
    if not case.fields:
        return False
    node: object = case.fields[0].type
    seen: set[int] = set()
    while id(node) not in seen:
        seen.add(id(node))
        if node is descriptor:
            return True
        if isinstance(node, Ref):
            node = node.target()
        elif isinstance(node, Tuple) and node.items:
            node = node.items[0]
        elif isinstance(node, Record) and node.fields:
            node = node.fields[0].type
        else:
            return False
    return False


def _default_tag_reader(descriptor: Sum) -> Callable[[Any], str]:
    by_class: dict[type, str] = {}
    for case in descriptor.cases:
        if isinstance(case.cls, type):
            by_class.setdefault(case.cls, case.name)

    def tag(value: Any) -> str:
        if isinstance(value, Variant):
            return value.tag
        for klass in type(value).__mro__:
            name = by_class.get(klass)
            if name is not None:
                return name
        msg = f"{value!r} does not belong to any case of {descriptor.name}."
        raise RenderError(msg)

    return tag


def build_sum(
    descriptor: Sum,
    resolve: Callable[[TypeDescriptor], SegmentCodec],
    config: RouterConfig,
) -> Codec:
    """Build the codec for a sum type.

    Cases sharing a prefix are all tried, in declaration order. At most
    one case may be unlabeled.
    """
    by_prefix: dict[str, list[SegmentParser]] = {}
    writers: dict[str, Callable[[Any], list[str]]] = {}
    unlabeled: list[str] = []
    unlabeled_parse: SegmentParser | None = None

    for case in descriptor.cases:
        if case.name in writers:
            msg = f"Duplicate case {case.name!r} in {descriptor.name}."
            raise ConfigurationError(msg)

        prefix = case_prefix(case, config)
        product = _case_codec(case, resolve)
        by_prefix.setdefault(prefix, []).append(product.parse)

        if prefix:
            writers[case.name] = _prefixed_writer(prefix, product.render)
        else:
            if _is_left_recursive(case, descriptor):
                msg = (
                    f"Unlabeled case {case.name!r} of {descriptor.name} starts with a "
                    f"{descriptor.name} field; give it a prefix so parsing consumes a segment first."
                )
                raise ConfigurationError(msg)
            unlabeled.append(case.name)
            unlabeled_parse = product.parse
            writers[case.name] = product.render

    if len(unlabeled) > 1:
        msg = (
            f"{descriptor.name} has more than one unlabeled case "
            f"({', '.join(unlabeled)}); give all but one a prefix."
        )
        raise ConfigurationError(msg)

    for prefix, parsers in by_prefix.items():
        if prefix and len(parsers) > 1:
            logger.debug(
                "%s: %d cases share prefix %r; declaration order breaks ties",
                descriptor.name,
                len(parsers),
                prefix,
            )

    tag = descriptor.tag or _default_tag_reader(descriptor)

    def parse(segments: Segments) -> ParseResults:
        if segments:
            for case_parse in by_prefix.get(segments[0], ()):
                yield from case_parse(segments[1:])
        if unlabeled_parse is not None:
            yield from unlabeled_parse(segments)

    def render(value: Any) -> list[str]:
        name = tag(value)
        writer = writers.get(name)
        if writer is None:
            msg = f"{name!r} is not a case of {descriptor.name}."
            raise RenderError(msg)
        return writer(value)

    return Codec(parse=parse, render=render)


def _prefixed_writer(prefix: str, write: Callable[[Any], list[str]]) -> Callable[[Any], list[str]]:
    def render(value: Any) -> list[str]:
        return [prefix, *write(value)]

    return render
