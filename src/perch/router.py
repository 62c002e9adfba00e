"""Routers — bind an endpoint type to paths in both directions.

``infer()`` compiles an endpoint type once and returns an immutable
router that answers two questions for the UI layer:

- ``get_route(model)``: what path represents the current model?
- ``set_route(uri)``: what message (if any) should navigating to *uri* dispatch?

Usage::

    router = infer(Page, make_message=SetPage, get_endpoint=lambda m: m.page)
    router.link(User(42))        # "user/42"
    router.set_route("user/42")  # SetPage(User(42))
    router.set_route("user/abc") # None
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from perch.codecs.base import SegmentCodec, Segments
from perch.config import RouterConfig
from perch.inference import describe
from perch.resolver import Resolver

logger = logging.getLogger("perch.router")

_NO_MATCH = object()


@runtime_checkable
class Routing(Protocol):
    """What the UI layer needs from any router."""

    def get_route(self, model: Any) -> str: ...
    def set_route(self, uri: str) -> Any | None: ...


@dataclass(frozen=True, slots=True)
class Router:
    """A hand-written router: two plain functions.

    Useful when paths do not follow from a type, or in tests::

        Router(get_route=lambda m: m.path, set_route=lambda uri: Navigate(uri))
    """

    get_route: Callable[[Any], str]
    set_route: Callable[[str], Any | None]


@dataclass(frozen=True, slots=True)
class PathCodec:
    """The compiled codec for an endpoint type, joined into whole paths."""

    codec: SegmentCodec
    config: RouterConfig = RouterConfig()

    def split(self, path: str) -> Segments:
        """Split *path* into segments. ``""`` is one empty segment."""
        sep = self.config.separator
        if self.config.strip_slashes:
            path = path.strip(sep)
        return tuple(path.split(sep))

    def to_path(self, endpoint: Any) -> str:
        """Render *endpoint* as a path. Raises ``RenderError`` for foreign values."""
        return self.config.separator.join(self.codec.render(endpoint))

    def matches(self, path: str) -> Iterator[Any]:
        """Yield every endpoint that consumes all of *path*, in generation order.

        More than one result means the endpoint type is ambiguous for this
        path; ``from_path`` picks the first.
        """
        for value, rest in self.codec.parse(self.split(path)):
            if not rest:
                yield value

    def from_path(self, path: str, default: Any = None) -> Any:
        """Return the first endpoint that consumes all of *path*, or *default*.

        When ``None`` is itself an endpoint (``Page | None``), pass a
        sentinel as *default* to tell "matched None" from "no match".
        """
        value = next(self.matches(path), _NO_MATCH)
        if value is _NO_MATCH:
            logger.debug("no endpoint matches %r", path)
            return default
        return value


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True, slots=True)
class EndpointRouter:
    """A router whose routes come from an endpoint value held by the model."""

    codec: PathCodec
    get_endpoint: Callable[[Any], Any] = _identity
    make_message: Callable[[Any], Any] = _identity

    def link(self, endpoint: Any) -> str:
        """Get the path for *endpoint*."""
        return self.codec.to_path(endpoint)

    def get_route(self, model: Any) -> str:
        """Get the path corresponding to *model*."""
        return self.link(self.get_endpoint(model))

    def set_route(self, uri: str) -> Any | None:
        """Get the message to dispatch when the page navigates to *uri*."""
        value = next(self.codec.matches(uri), _NO_MATCH)
        if value is _NO_MATCH:
            logger.debug("no endpoint matches %r", uri)
            return None
        return self.make_message(value)


def compile_codec(endpoint: Any, config: RouterConfig | None = None) -> PathCodec:
    """Compile *endpoint* (a descriptor or an annotated Python type) into a ``PathCodec``.

    All configuration errors surface here, never while matching.
    """
    config = config or RouterConfig()
    descriptor = describe(endpoint)
    resolver = Resolver(config)
    codec = resolver.resolve(descriptor)
    logger.debug("compiled router for %r (%d codecs)", endpoint, len(resolver))
    return PathCodec(codec, config)


def infer(
    endpoint: Any,
    make_message: Callable[[Any], Any] = _identity,
    get_endpoint: Callable[[Any], Any] = _identity,
    *,
    config: RouterConfig | None = None,
) -> EndpointRouter:
    """Infer a router for the endpoint type *endpoint*.

    *endpoint* is usually a union of ``@endpoint``-decorated dataclasses
    (see ``perch.inference``) but may also be a ``TypeDescriptor``.
    """
    return EndpointRouter(
        codec=compile_codec(endpoint, config),
        get_endpoint=get_endpoint,
        make_message=make_message,
    )
