"""Scalar coercion tests."""

from __future__ import annotations

import math
from enum import IntEnum, StrEnum

import pytest
from record_binding.schema_management import FieldKind
from record_binding.value_coercion import FieldCoercionError, coerce_scalar


class Color(StrEnum):
    RED = "red"
    BLUE = "blue"


class Priority(IntEnum):
    LOW = 1
    HIGH = 2


class Slug(str):
    pass


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("true", True),
        ("TRUE", True),
        ("True", True),
        ("t", True),
        ("1", True),
        ("false", False),
        ("F", False),
        ("0", False),
    ],
)
def test_bool_literals_are_case_insensitive(text: str, expected: bool) -> None:
    assert coerce_scalar(FieldKind.BOOL, text) is expected


@pytest.mark.parametrize("text", ["yes", "", "2", " true"])
def test_bool_rejects_other_text(text: str) -> None:
    with pytest.raises(FieldCoercionError) as exc_info:
        coerce_scalar(FieldKind.BOOL, text)

    assert exc_info.value.text == text
    assert exc_info.value.kind is FieldKind.BOOL


def test_int_parses_signed_decimal_and_leading_zeros() -> None:
    assert coerce_scalar(FieldKind.INT, "20") == 20
    assert coerce_scalar(FieldKind.INT, "-20") == -20
    assert coerce_scalar(FieldKind.INT, "+7") == 7
    assert coerce_scalar(FieldKind.INT, "007") == 7


@pytest.mark.parametrize("text", ["twenty", "1.5", "1_000", " 5", "", "0x10"])
def test_int_rejects_non_decimal_text(text: str) -> None:
    with pytest.raises(FieldCoercionError, match="invalid syntax"):
        coerce_scalar(FieldKind.INT, text)


def test_int_range_follows_bit_size() -> None:
    assert coerce_scalar(FieldKind.INT, "127", bit_size=8) == 127
    assert coerce_scalar(FieldKind.INT, "-128", bit_size=8) == -128

    with pytest.raises(FieldCoercionError, match="out of range for 8 bits"):
        coerce_scalar(FieldKind.INT, "128", bit_size=8)
    with pytest.raises(FieldCoercionError, match="out of range for 8 bits"):
        coerce_scalar(FieldKind.INT, "-129", bit_size=8)
    with pytest.raises(FieldCoercionError, match="out of range for 64 bits"):
        coerce_scalar(FieldKind.INT, "9223372036854775808")


def test_uint_rejects_signs_and_overflow() -> None:
    assert coerce_scalar(FieldKind.UINT, "255", bit_size=8) == 255

    with pytest.raises(FieldCoercionError, match="invalid syntax"):
        coerce_scalar(FieldKind.UINT, "-1")
    with pytest.raises(FieldCoercionError, match="out of range for 8 bits"):
        coerce_scalar(FieldKind.UINT, "256", bit_size=8)


def test_float_parses_decimal_and_special_values() -> None:
    assert coerce_scalar(FieldKind.FLOAT, "20") == 20.0
    assert coerce_scalar(FieldKind.FLOAT, "-1.5e3") == -1500.0
    assert coerce_scalar(FieldKind.FLOAT, ".5") == 0.5
    assert math.isinf(coerce_scalar(FieldKind.FLOAT, "-Inf"))  # type: ignore[arg-type]
    assert math.isnan(coerce_scalar(FieldKind.FLOAT, "NaN"))  # type: ignore[arg-type]


@pytest.mark.parametrize("text", ["abc", "1_0", " 1.0", "1e", ""])
def test_float_rejects_malformed_text(text: str) -> None:
    with pytest.raises(FieldCoercionError, match="invalid syntax"):
        coerce_scalar(FieldKind.FLOAT, text)


def test_float_overflow_is_an_error() -> None:
    with pytest.raises(FieldCoercionError, match="out of range for 64 bits"):
        coerce_scalar(FieldKind.FLOAT, "1e400")
    with pytest.raises(FieldCoercionError, match="out of range for 32 bits"):
        coerce_scalar(FieldKind.FLOAT, "1e39", bit_size=32)
    assert coerce_scalar(FieldKind.FLOAT, "1e38", bit_size=32) == 1e38


def test_string_is_passthrough() -> None:
    assert coerce_scalar(FieldKind.STRING, " any text ") == " any text "


def test_scalar_type_receives_parsed_value() -> None:
    slug = coerce_scalar(FieldKind.STRING, "hello", scalar_type=Slug)
    priority = coerce_scalar(FieldKind.INT, "2", scalar_type=Priority)
    color = coerce_scalar(FieldKind.STRING, "blue", scalar_type=Color)

    assert isinstance(slug, Slug)
    assert priority is Priority.HIGH
    assert color is Color.BLUE


def test_scalar_type_rejection_becomes_coercion_error() -> None:
    with pytest.raises(FieldCoercionError) as exc_info:
        coerce_scalar(FieldKind.STRING, "green", scalar_type=Color)

    assert exc_info.value.text == "green"
    assert "cannot parse 'green' as string" in str(exc_info.value)


def test_non_scalar_kind_is_a_programming_error() -> None:
    with pytest.raises(ValueError, match="not a scalar kind"):
        coerce_scalar(FieldKind.STRUCT, "x")


def test_float32_accepts_literals_rounding_to_the_largest_value() -> None:
    assert coerce_scalar(FieldKind.FLOAT, "3.4028235e38", bit_size=32) == 3.4028235e38
    assert coerce_scalar(FieldKind.FLOAT, "-3.4028235e38", bit_size=32) == -3.4028235e38

    with pytest.raises(FieldCoercionError, match="out of range for 32 bits"):
        coerce_scalar(FieldKind.FLOAT, "3.4028236e38", bit_size=32)
