"""Descriptor resolver with a forward-reference codec cache.

The resolver turns a descriptor tree into a codec graph once, at router
construction. A descriptor is registered in the cache as a
``ForwardCodec`` *before* its body is built, so a sum case that holds a
field of its own enclosing type finds the placeholder instead of
recursing forever. Recursion then only happens while parsing or
rendering, bounded by the length of the path or the depth of the value.
"""

import logging

from perch.codecs.base import ForwardCodec, SegmentCodec
from perch.codecs.primitives import PRIMITIVES
from perch.codecs.product import build_record, build_tuple
from perch.codecs.sequence import build_sequence
from perch.codecs.sum import build_sum
from perch.config import RouterConfig
from perch.errors import ConfigurationError
from perch.types import Primitive, Record, Ref, Sequence, Sum, Tuple, TypeDescriptor, describe_name

logger = logging.getLogger("perch.resolver")


class Resolver:
    """Compiles descriptors into codecs, memoized per descriptor.

    Usage::

        resolver = Resolver()
        codec = resolver.resolve(PAGE)
        codec.render(User(42))  # ["user", "42"]

    Not meant to be shared while resolving; once ``resolve`` has returned,
    the codecs it produced are read-only and safe to use from any thread.
    """

    __slots__ = ("_cache", "_config")

    def __init__(self, config: RouterConfig | None = None) -> None:
        self._config = config or RouterConfig()
        self._cache: dict[TypeDescriptor, SegmentCodec] = {}

    @property
    def config(self) -> RouterConfig:
        return self._config

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, descriptor: object) -> bool:
        return descriptor in self._cache

    def resolve(self, descriptor: TypeDescriptor) -> SegmentCodec:
        """Return the codec for *descriptor*, building it on first use.

        Raises ``ConfigurationError`` for shapes no builder supports.
        """
        try:
            cached = self._cache.get(descriptor)
        except TypeError as exc:
            msg = f"Cannot build a router for {descriptor!r}: descriptors must be hashable."
            raise ConfigurationError(msg) from exc
        if cached is not None:
            return cached

        name = describe_name(descriptor)
        forward = ForwardCodec(name)
        self._cache[descriptor] = forward
        try:
            codec = self._build(descriptor)
        except Exception:
            # Leave no half-built placeholder behind
            self._cache.pop(descriptor, None)
            raise

        forward.bind(codec)
        self._cache[descriptor] = codec
        logger.debug("resolved %s (%s)", name, type(descriptor).__name__)
        return codec

    def _build(self, descriptor: TypeDescriptor) -> SegmentCodec:
        match descriptor:
            case Primitive(kind=kind):
                codec = PRIMITIVES.get(kind)
                if codec is None:
                    msg = f"Unknown primitive kind {kind!r}."
                    raise ConfigurationError(msg)
                return codec
            case Sequence(item=item, container=container):
                return build_sequence(self.resolve(item), container)
            case Tuple():
                return build_tuple(descriptor, self.resolve)
            case Record():
                return build_record(descriptor, self.resolve)
            case Sum():
                return build_sum(descriptor, self.resolve, self._config)
            case Ref(target=target):
                return self.resolve(target())

        msg = (
            f"Cannot build a router for {descriptor!r}: expected a Primitive, "
            "Sequence, Tuple, Record, Sum or Ref descriptor."
        )
        raise ConfigurationError(msg)
