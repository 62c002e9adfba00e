"""Tests for perch.codecs.primitives — one-segment scalar codecs."""

import math
import struct
from decimal import Decimal

import pytest

from perch.codecs.primitives import INTEGER_RANGES, PRIMITIVES
from perch.errors import RenderError
from perch.types import PRIMITIVE_KINDS


def _parse(kind: str, *segments: str) -> list:
    return list(PRIMITIVES[kind].parse(segments))


class TestTable:
    def test_all_kinds_registered(self) -> None:
        assert set(PRIMITIVES) == set(PRIMITIVE_KINDS)

    @pytest.mark.parametrize("kind", PRIMITIVE_KINDS)
    def test_empty_path_has_no_result(self, kind: str) -> None:
        assert _parse(kind) == []

    def test_consumes_exactly_one_segment(self) -> None:
        assert _parse("int32", "42", "rest", "more") == [(42, ("rest", "more"))]


class TestString:
    def test_any_segment(self) -> None:
        assert _parse("str", "hello") == [("hello", ())]

    def test_empty_segment_is_a_string(self) -> None:
        assert _parse("str", "") == [("", ())]

    def test_render_raw(self) -> None:
        assert PRIMITIVES["str"].render("a b") == ["a b"]


class TestBool:
    def test_parse_lowercase(self) -> None:
        assert _parse("bool", "true") == [(True, ())]
        assert _parse("bool", "false") == [(False, ())]

    def test_rejects_other_casing(self) -> None:
        assert _parse("bool", "True") == []
        assert _parse("bool", "FALSE") == []

    def test_rejects_numbers(self) -> None:
        assert _parse("bool", "1") == []

    def test_render_lowercase(self) -> None:
        assert PRIMITIVES["bool"].render(True) == ["true"]
        assert PRIMITIVES["bool"].render(False) == ["false"]


class TestIntegers:
    def test_signed(self) -> None:
        assert _parse("int32", "-17") == [(-17, ())]

    def test_explicit_plus(self) -> None:
        assert _parse("int32", "+5") == [(5, ())]

    @pytest.mark.parametrize("kind", sorted(INTEGER_RANGES))
    def test_bounds(self, kind: str) -> None:
        low, high = INTEGER_RANGES[kind]
        assert _parse(kind, str(low)) == [(low, ())]
        assert _parse(kind, str(high)) == [(high, ())]
        assert _parse(kind, str(low - 1)) == []
        assert _parse(kind, str(high + 1)) == []

    def test_unsigned_rejects_negative(self) -> None:
        assert _parse("uint8", "-1") == []

    def test_arbitrary_precision(self) -> None:
        big = 2**100
        assert _parse("int", str(big)) == [(big, ())]

    @pytest.mark.parametrize("text", ["abc", "", " 5", "5 ", "5_000", "1.0", "0x10"])
    def test_rejects_non_integers(self, text: str) -> None:
        assert _parse("int64", text) == []

    def test_fixed_width_rejects_oversized_text(self) -> None:
        assert _parse("int32", "9" * 5000) == []

    def test_leading_zeros_within_range(self) -> None:
        assert _parse("int8", "0" * 30 + "5") == [(5, ())]

    def test_past_int_conversion_limit(self) -> None:
        assert _parse("int", "1" * 5000) == []

    def test_render_decimal_text(self) -> None:
        assert PRIMITIVES["int16"].render(-300) == ["-300"]


class TestFloats:
    def test_parse_decimal_notation(self) -> None:
        assert _parse("float64", "1.5") == [(1.5, ())]

    def test_parse_exponent(self) -> None:
        assert _parse("float64", "1e3") == [(1000.0, ())]

    def test_parse_integer_text(self) -> None:
        assert _parse("float64", "10") == [(10.0, ())]

    def test_parse_infinity(self) -> None:
        [(value, rest)] = _parse("float64", "inf")
        assert math.isinf(value)
        assert rest == ()

    @pytest.mark.parametrize("text", ["abc", "1.5.2", "1_0.0", " 1.5", ""])
    def test_rejects_malformed(self, text: str) -> None:
        assert _parse("float64", text) == []

    def test_render_repr(self) -> None:
        assert PRIMITIVES["float64"].render(1.5) == ["1.5"]
        assert PRIMITIVES["float64"].render(2) == ["2.0"]

    def test_float32_rounds_to_single_precision(self) -> None:
        [(value, _)] = _parse("float32", "0.1")
        assert value == struct.unpack("f", struct.pack("f", 0.1))[0]
        assert value == pytest.approx(0.1)

    def test_float32_rejects_overflow(self) -> None:
        assert _parse("float32", "1e39") == []

    def test_float32_round_trip(self) -> None:
        value = struct.unpack("f", struct.pack("f", 3.3))[0]
        [segment] = PRIMITIVES["float32"].render(value)
        assert _parse("float32", segment) == [(value, ())]


class TestDecimal:
    def test_parse(self) -> None:
        assert _parse("decimal", "1.50") == [(Decimal("1.50"), ())]

    def test_rejects_exponent(self) -> None:
        assert _parse("decimal", "1e3") == []

    def test_render_fixed_point(self) -> None:
        assert PRIMITIVES["decimal"].render(Decimal("1E+3")) == ["1000"]
        assert PRIMITIVES["decimal"].render(Decimal("-0.25")) == ["-0.25"]

    @pytest.mark.parametrize("value", [Decimal("NaN"), Decimal("Infinity"), Decimal("-Infinity")])
    def test_render_non_finite_raises(self, value: Decimal) -> None:
        with pytest.raises(RenderError, match="non-finite"):
            PRIMITIVES["decimal"].render(value)
