"""Tests for perch.codecs.sum — literal-prefix dispatch and unlabeled fallback."""

from dataclasses import dataclass

import pytest

from perch.codecs.sum import build_sum, case_prefix
from perch.config import RouterConfig
from perch.errors import ConfigurationError, RenderError
from perch.resolver import Resolver
from perch.types import Case, Field, Primitive, Ref, Sum, Tuple, Variant

INT = Primitive("int32")
STR = Primitive("str")

PAGE = Sum(
    "Page",
    (
        Case("Home", prefix=""),
        Case("User", (Field("id", INT),), prefix="user"),
    ),
)


def _codec(descriptor: Sum, config: RouterConfig | None = None):
    resolver = Resolver(config)
    return build_sum(descriptor, resolver.resolve, resolver.config)


class TestCasePrefix:
    def test_explicit_prefix_trims_separator(self) -> None:
        assert case_prefix(Case("User", prefix="/user/"), RouterConfig()) == "user"

    def test_empty_prefix_is_unlabeled(self) -> None:
        assert case_prefix(Case("Home", prefix=""), RouterConfig()) == ""

    def test_default_uses_case_name(self) -> None:
        assert case_prefix(Case("UserProfile"), RouterConfig()) == "UserProfile"

    def test_lower_mode(self) -> None:
        config = RouterConfig(case_prefix="lower")
        assert case_prefix(Case("UserProfile"), config) == "userprofile"

    def test_kebab_mode(self) -> None:
        config = RouterConfig(case_prefix="kebab")
        assert case_prefix(Case("UserProfile"), config) == "user-profile"
        assert case_prefix(Case("HTTPStatus"), config) == "http-status"

    def test_unknown_mode(self) -> None:
        with pytest.raises(ConfigurationError, match="case_prefix"):
            case_prefix(Case("User"), RouterConfig(case_prefix="upper"))


class TestRender:
    def test_prefixed_case(self) -> None:
        assert _codec(PAGE).render(Variant("User", (42,))) == ["user", "42"]

    def test_unlabeled_case_writes_no_prefix(self) -> None:
        assert _codec(PAGE).render(Variant("Home")) == []

    def test_unknown_tag(self) -> None:
        with pytest.raises(RenderError, match="Nope"):
            _codec(PAGE).render(Variant("Nope"))

    def test_foreign_value(self) -> None:
        with pytest.raises(RenderError, match="Page"):
            _codec(PAGE).render(42)


class TestParse:
    def test_labeled_then_unlabeled(self) -> None:
        results = list(_codec(PAGE).parse(("user", "42")))
        assert results == [
            (Variant("User", (42,)), ()),
            (Variant("Home"), ("user", "42")),
        ]

    def test_bad_field_leaves_only_fallback(self) -> None:
        results = list(_codec(PAGE).parse(("user", "abc")))
        assert results == [(Variant("Home"), ("user", "abc"))]

    def test_empty_head_selects_unlabeled_case(self) -> None:
        results = list(_codec(PAGE).parse(("",)))
        assert results[0] == (Variant("Home"), ())

    def test_empty_path_tries_unlabeled_only(self) -> None:
        assert list(_codec(PAGE).parse(())) == [(Variant("Home"), ())]

    def test_no_unlabeled_case(self) -> None:
        descriptor = Sum("Only", (Case("A", (Field("v", STR),), prefix="a"),))
        assert list(_codec(descriptor).parse(("b", "x"))) == []

    def test_prefix_segment_also_tried_as_data(self) -> None:
        descriptor = Sum(
            "Ambiguous",
            (
                Case("A", (Field("v", STR),), prefix="a"),
                Case("B", (Field("v", STR),), prefix=""),
            ),
        )
        results = list(_codec(descriptor).parse(("a", "x")))
        assert (Variant("A", ("x",)), ()) in results
        assert (Variant("B", ("a",)), ("x",)) in results

    def test_shared_prefix_tries_all_in_order(self) -> None:
        descriptor = Sum(
            "Shared",
            (
                Case("Number", (Field("n", INT),), prefix="p"),
                Case("Text", (Field("s", STR),), prefix="p"),
            ),
        )
        results = list(_codec(descriptor).parse(("p", "5")))
        assert results == [
            (Variant("Number", (5,)), ()),
            (Variant("Text", ("5",)), ()),
        ]


class TestConfiguration:
    def test_two_unlabeled_cases(self) -> None:
        descriptor = Sum("Bad", (Case("A", prefix=""), Case("B", prefix="")))
        with pytest.raises(ConfigurationError, match="unlabeled"):
            _codec(descriptor)

    def test_duplicate_case_names(self) -> None:
        descriptor = Sum("Bad", (Case("A", prefix="a"), Case("A", prefix="b")))
        with pytest.raises(ConfigurationError, match="Duplicate"):
            _codec(descriptor)

    def test_left_recursive_unlabeled_case(self) -> None:
        expr = Sum(
            "Expr",
            (
                Case("Lit", (Field("value", INT),), prefix="lit"),
                Case("Pair", (Field("left", Ref(lambda: expr, "Expr")), Field("right", INT)), prefix=""),
            ),
        )
        with pytest.raises(ConfigurationError, match="Pair"):
            _codec(expr)

    def test_left_recursion_through_a_tuple(self) -> None:
        expr = Sum(
            "Expr",
            (
                Case("Lit", (Field("value", INT),), prefix="lit"),
                Case("Wrap", (Field("inner", Tuple((Ref(lambda: expr, "Expr"), INT))),), prefix=""),
            ),
        )
        with pytest.raises(ConfigurationError, match="Wrap"):
            _codec(expr)

    def test_labeled_recursion_is_allowed(self) -> None:
        tree = Sum(
            "Tree",
            (
                Case("Leaf", prefix=""),
                Case("Node", (Field("child", Ref(lambda: tree, "Tree")),), prefix="node"),
            ),
        )
        codec = _codec(tree)
        assert codec.render(Variant("Node", (Variant("Leaf"),))) == ["node"]
        assert (Variant("Node", (Variant("Leaf"),)), ()) in list(codec.parse(("node",)))

    def test_lower_prefix_mode(self) -> None:
        descriptor = Sum("Page", (Case("About"),))
        codec = _codec(descriptor, RouterConfig(case_prefix="lower"))
        assert codec.render(Variant("About")) == ["about"]
        assert list(codec.parse(("about",))) == [(Variant("About"), ())]


@dataclass(frozen=True)
class Article:
    slug: str


@dataclass(frozen=True)
class FeaturedArticle(Article):
    pass


class TestClassCases:
    DESCRIPTOR = Sum("Content", (Case("Article", (Field("slug", STR),), cls=Article, prefix="a"),))

    def test_parse_constructs_class(self) -> None:
        assert list(_codec(self.DESCRIPTOR).parse(("a", "hello"))) == [(Article("hello"), ())]

    def test_render_reads_fields(self) -> None:
        assert _codec(self.DESCRIPTOR).render(Article("hello")) == ["a", "hello"]

    def test_subclass_dispatches_through_mro(self) -> None:
        assert _codec(self.DESCRIPTOR).render(FeaturedArticle("x")) == ["a", "x"]

    def test_custom_tag_reader(self) -> None:
        descriptor = Sum(
            "Flag",
            (Case("On", cls=lambda: True, prefix="on"), Case("Off", cls=lambda: False, prefix="off")),
            tag=lambda value: "On" if value else "Off",
        )
        codec = _codec(descriptor)
        assert codec.render(True) == ["on"]
        assert list(codec.parse(("off",))) == [(False, ())]
