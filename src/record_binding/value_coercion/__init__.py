"""Scalar coercion exports."""

from .scalar_coercer import FieldCoercionError, coerce_scalar

__all__ = ["FieldCoercionError", "coerce_scalar"]
