"""Type descriptors — the declared shape of an endpoint type.

A descriptor tree is built once per endpoint type (by hand, or from
annotations via ``perch.inference``) and compiled into a codec by the
resolver. All descriptors are frozen dataclasses::

    PAGE = Sum("Page", (
        Case("Home", prefix=""),
        Case("User", (Field("id", Primitive("int32")),), cls=User, prefix="user"),
        Case("Node", (Field("child", Ref(lambda: PAGE, "Page")),), cls=Node),
    ))

``Ref`` is the only way for an immutable descriptor to mention itself:
its target is looked up when the resolver reaches it, not when the
descriptor is constructed.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

PRIMITIVE_KINDS: tuple[str, ...] = (
    "str",
    "bool",
    "int8",
    "uint8",
    "int16",
    "uint16",
    "int32",
    "uint32",
    "int64",
    "uint64",
    "int",
    "float32",
    "float64",
    "decimal",
)


@dataclass(frozen=True, slots=True)
class Primitive:
    """A single-segment scalar: ``str``, ``bool``, sized ints, floats, ``decimal``."""

    kind: str


@dataclass(frozen=True, slots=True)
class Sequence:
    """A homogeneous, count-prefixed sequence of *item* values.

    *container* is called with a list of parsed items (``list`` or ``tuple``).
    """

    item: "TypeDescriptor"
    container: Callable[[list[Any]], Any] = list


@dataclass(frozen=True, slots=True)
class Tuple:
    """A fixed-length heterogeneous Python tuple."""

    items: tuple["TypeDescriptor", ...]


@dataclass(frozen=True, slots=True)
class Field:
    """A named, typed member of a record or sum case."""

    name: str
    type: "TypeDescriptor"


@dataclass(frozen=True, slots=True)
class Record:
    """A fixed-shape record: built as ``cls(*values)``, read by field name."""

    cls: Callable[..., Any]
    fields: tuple[Field, ...]


@dataclass(frozen=True, slots=True)
class Case:
    """One alternative of a sum type.

    ``prefix=None`` derives the literal from the case name (see
    ``RouterConfig.case_prefix``); ``prefix=""`` makes the case unlabeled.
    Without a *cls*, values of this case are ``Variant`` instances.
    """

    name: str
    fields: tuple[Field, ...] = ()
    cls: Callable[..., Any] | None = None
    prefix: str | None = None


@dataclass(frozen=True, slots=True)
class Sum:
    """A tagged union of named cases, tried in declaration order.

    *tag* maps a value to its case name. When omitted, ``Variant.tag`` or
    the value's class is used.
    """

    name: str
    cases: tuple[Case, ...]
    tag: Callable[[Any], str] | None = None


@dataclass(frozen=True, slots=True)
class Ref:
    """A late-bound reference to another descriptor (usually an enclosing one)."""

    target: Callable[[], "TypeDescriptor"]
    name: str = ""


TypeDescriptor: TypeAlias = Primitive | Sequence | Tuple | Record | Sum | Ref


@dataclass(frozen=True, slots=True)
class Variant:
    """Generic value of a sum case that has no class of its own."""

    tag: str
    fields: tuple[Any, ...] = ()


def describe_name(descriptor: object) -> str:
    """Short human-readable name for a descriptor, used in logs and errors."""
    match descriptor:
        case Primitive(kind=kind):
            return kind
        case Sequence(item=item):
            return f"{describe_name(item)}[]"
        case Tuple(items=items):
            return "(" + ", ".join(describe_name(i) for i in items) + ")"
        case Record(cls=cls):
            return getattr(cls, "__name__", repr(cls))
        case Sum(name=name):
            return name
        case Ref(name=name):
            return name or "<ref>"
    return type(descriptor).__name__
