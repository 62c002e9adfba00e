"""Derive type descriptors from ordinary Python annotations.

Lets an endpoint type be declared the way the rest of an app declares
its data::

    @endpoint("")
    @dataclass(frozen=True)
    class Home: ...

    @endpoint("user")
    @dataclass(frozen=True)
    class User:
        id: int

    type Page = Home | User

    describe(Page)  # Sum("Page", (Case("Home", ..., prefix=""), Case("User", ...)))

Supported annotations:

- ``str``, ``bool``, ``int``, ``float``, ``Decimal``
- ``Annotated[T, "int32"]`` (or any ``TypeDescriptor`` as metadata) to pick an exact kind
- ``list[T]``, ``tuple[T, ...]`` — count-prefixed sequences
- ``tuple[A, B, ...]`` — fixed tuples
- dataclasses and ``NamedTuple`` classes — records
- unions (``A | B``, ``Optional``), ``type`` aliases of unions, and ``Enum`` classes — sums

Self-referential types (a dataclass field annotated with the union it
belongs to) become ``Ref`` descriptors pointing back at the enclosing
descriptor.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import types
import typing
from collections.abc import Callable
from decimal import Decimal
from typing import Any, TypeVar

from perch.errors import ConfigurationError
from perch.types import (
    PRIMITIVE_KINDS,
    Case,
    Field,
    Primitive,
    Record,
    Ref,
    Sequence,
    Sum,
    Tuple,
    TypeDescriptor,
)

logger = logging.getLogger("perch.inference")

T = TypeVar("T", bound=type)

_SCALARS: dict[Any, str] = {
    str: "str",
    bool: "bool",
    int: "int",
    float: "float64",
    Decimal: "decimal",
}

_DESCRIPTOR_TYPES = (Primitive, Sequence, Tuple, Record, Sum, Ref)


def endpoint(prefix: str) -> Callable[[T], T]:
    """Declare the literal path segment for a union member class.

    ``@endpoint("")`` marks the class as the unlabeled case. Leading and
    trailing slashes are ignored, so ``@endpoint("/user/")`` is ``"user"``.
    """
    root = prefix.strip("/")

    def decorate(cls: T) -> T:
        cls.__endpoint__ = root  # type: ignore[attr-defined]
        return cls

    return decorate


def endpoint_prefix(cls: type) -> str | None:
    """Return the prefix declared with ``@endpoint`` on *cls* itself, if any."""
    return cls.__dict__.get("__endpoint__")


def describe(annotation: Any) -> TypeDescriptor:
    """Build a descriptor tree for *annotation*.

    Raises ``ConfigurationError`` for annotations that have no path
    representation (``dict``, ``Any``, plain classes without fields...).
    """
    return _Describer().describe(annotation)


class _Describer:
    """One describe() call: memo plus the set of types still being built."""

    __slots__ = ("_done", "_pending")

    def __init__(self) -> None:
        self._done: dict[Any, TypeDescriptor] = {}
        self._pending: set[Any] = set()

    def describe(self, annotation: Any) -> TypeDescriptor:
        if isinstance(annotation, _DESCRIPTOR_TYPES):
            return annotation

        try:
            hash(annotation)
        except TypeError as exc:
            msg = f"Cannot describe {annotation!r} as a path: not a type."
            raise ConfigurationError(msg) from exc

        scalar = _SCALARS.get(annotation)
        if scalar is not None:
            return Primitive(scalar)

        if annotation in self._done:
            return self._done[annotation]

        if annotation in self._pending:
            name = _type_name(annotation)
            logger.debug("recursive reference to %s", name)
            return Ref(lambda: self._done[annotation], name)

        self._pending.add(annotation)
        try:
            descriptor = self._build(annotation)
        finally:
            self._pending.discard(annotation)
        self._done[annotation] = descriptor
        return descriptor

    def _build(self, annotation: Any) -> TypeDescriptor:
        if isinstance(annotation, typing.TypeAliasType):
            return self._describe_alias(annotation)

        origin = typing.get_origin(annotation)
        args = typing.get_args(annotation)

        if origin is typing.Annotated:
            return self._describe_annotated(args[0], args[1:])
        if origin is typing.Union or origin is types.UnionType:
            return self._describe_union(_type_name(annotation), args)
        if origin is list:
            (item,) = args or (str,)
            return Sequence(self.describe(item), list)
        if origin is tuple:
            return self._describe_tuple(args)

        if isinstance(annotation, type):
            if issubclass(annotation, enum.Enum):
                return _describe_enum(annotation)
            if dataclasses.is_dataclass(annotation) or _is_namedtuple(annotation):
                return Record(annotation, self._fields(annotation))

        msg = f"Cannot describe {annotation!r} as a path: unsupported annotation."
        raise ConfigurationError(msg)

    def _describe_alias(self, alias: typing.TypeAliasType) -> TypeDescriptor:
        value = alias.__value__
        origin = typing.get_origin(value)
        if origin is typing.Union or origin is types.UnionType:
            return self._describe_union(alias.__name__, typing.get_args(value))
        return self.describe(value)

    def _describe_annotated(self, base: Any, metadata: tuple[Any, ...]) -> TypeDescriptor:
        for item in metadata:
            if isinstance(item, _DESCRIPTOR_TYPES):
                return item
            if isinstance(item, str) and item in PRIMITIVE_KINDS:
                return Primitive(item)
        return self.describe(base)

    def _describe_tuple(self, args: tuple[Any, ...]) -> TypeDescriptor:
        if len(args) == 2 and args[1] is Ellipsis:
            return Sequence(self.describe(args[0]), tuple)
        if args == ((),):
            return Tuple(())
        return Tuple(tuple(self.describe(a) for a in args))

    def _describe_union(self, name: str, members: tuple[Any, ...]) -> Sum:
        cases = []
        for member in members:
            if member is type(None):
                cases.append(Case("None", cls=type(None)))
                continue
            if not isinstance(member, type):
                msg = f"Union member {member!r} of {name} must be a class."
                raise ConfigurationError(msg)
            cases.append(
                Case(
                    name=member.__name__,
                    fields=self._fields(member),
                    cls=member,
                    prefix=endpoint_prefix(member),
                )
            )
        return Sum(name, tuple(cases))

    def _fields(self, cls: type) -> tuple[Field, ...]:
        hints = typing.get_type_hints(cls, include_extras=True)
        if dataclasses.is_dataclass(cls):
            names = [f.name for f in dataclasses.fields(cls) if f.init]
        elif _is_namedtuple(cls):
            names = list(cls._fields)  # type: ignore[attr-defined]
        else:
            # Plain marker class: constructed with no arguments
            return ()
        return tuple(Field(n, self.describe(hints[n])) for n in names)


def _describe_enum(cls: type[enum.Enum]) -> Sum:
    cases = tuple(Case(member.name, cls=_constant(member)) for member in cls)
    return Sum(cls.__name__, cases, tag=_enum_tag)


def _enum_tag(value: Any) -> str:
    return value.name


def _constant(value: Any) -> Callable[[], Any]:
    def make() -> Any:
        return value

    return make


def _is_namedtuple(cls: type) -> bool:
    return issubclass(cls, tuple) and hasattr(cls, "_fields")


def _type_name(annotation: Any) -> str:
    name = getattr(annotation, "__name__", None)
    if isinstance(name, str) and typing.get_origin(annotation) is None:
        return name
    return repr(annotation).replace("typing.", "")
