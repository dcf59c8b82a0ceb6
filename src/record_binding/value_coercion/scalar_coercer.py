"""Parsing of single form values into scalar field kinds."""

from __future__ import annotations

import math
import re
from collections.abc import Callable

from record_binding.binding_errors import BindingError
from record_binding.schema_management.schema_models import FieldKind

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_UINT_PATTERN = re.compile(r"[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_TRUE_LITERALS = frozenset({"1", "t", "true"})
_FALSE_LITERALS = frozenset({"0", "f", "false"})
# Halfway between the largest float32 and 2**128; larger literals round to infinity.
_FLOAT32_OVERFLOW = 3.4028235677973366e38


class FieldCoercionError(BindingError):
    """Raised when one form value cannot be parsed into its field kind."""

    def __init__(self, text: str, kind: FieldKind, reason: str) -> None:
        self.text = text
        self.kind = kind
        self.reason = reason
        super().__init__(f"cannot parse {text!r} as {kind.value}: {reason}")


def coerce_scalar(
    kind: FieldKind,
    text: str,
    *,
    bit_size: int = 64,
    scalar_type: type | None = None,
) -> object:
    """Parse ``text`` into a value of ``kind``.

    Args:
      kind: Scalar kind of the destination field.
      text: Raw form value.
      bit_size: Width used for integer range checks and float32 overflow.
      scalar_type: Optional type the parsed value is passed through, such as a
        str subclass or an IntEnum.

    Raises:
      FieldCoercionError: If the text is not a valid literal for the kind, is
        out of range, or is rejected by ``scalar_type``.
      ValueError: If ``kind`` is not a scalar kind.
    """
    parser = _PARSERS.get(kind)
    if parser is None:
        raise ValueError(f"{kind.value} is not a scalar kind")
    value = parser(text, bit_size)
    if scalar_type is None:
        return value
    try:
        return scalar_type(value)
    except (TypeError, ValueError) as exc:
        raise FieldCoercionError(text, kind, str(exc)) from exc


def _parse_bool(text: str, _bit_size: int) -> bool:
    lowered = text.lower()
    if lowered in _TRUE_LITERALS:
        return True
    if lowered in _FALSE_LITERALS:
        return False
    raise FieldCoercionError(text, FieldKind.BOOL, "invalid syntax")


def _parse_int(text: str, bit_size: int) -> int:
    if not _INT_PATTERN.fullmatch(text):
        raise FieldCoercionError(text, FieldKind.INT, "invalid syntax")
    value = int(text)
    limit = 1 << (bit_size - 1)
    if not -limit <= value < limit:
        raise FieldCoercionError(text, FieldKind.INT, f"value out of range for {bit_size} bits")
    return value


def _parse_uint(text: str, bit_size: int) -> int:
    if not _UINT_PATTERN.fullmatch(text):
        raise FieldCoercionError(text, FieldKind.UINT, "invalid syntax")
    value = int(text)
    if value >= 1 << bit_size:
        raise FieldCoercionError(text, FieldKind.UINT, f"value out of range for {bit_size} bits")
    return value


def _parse_float(text: str, bit_size: int) -> float:
    if not _FLOAT_PATTERN.fullmatch(text):
        raise FieldCoercionError(text, FieldKind.FLOAT, "invalid syntax")
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise FieldCoercionError(text, FieldKind.FLOAT, f"value out of range for {bit_size} bits")
    if bit_size == 32 and math.isfinite(value) and abs(value) >= _FLOAT32_OVERFLOW:
        raise FieldCoercionError(text, FieldKind.FLOAT, "value out of range for 32 bits")
    return value


def _parse_string(text: str, _bit_size: int) -> str:
    return text


_PARSERS: dict[FieldKind, Callable[[str, int], object]] = {
    FieldKind.BOOL: _parse_bool,
    FieldKind.INT: _parse_int,
    FieldKind.UINT: _parse_uint,
    FieldKind.FLOAT: _parse_float,
    FieldKind.STRING: _parse_string,
}
