"""Key path unflattening exports."""

from .key_path_unflattener import (
    PATH_SEPARATOR,
    KeyPathError,
    first_value,
    flatten_values,
    form_from_query,
    form_from_values,
    unflatten,
)

__all__ = [
    "PATH_SEPARATOR",
    "KeyPathError",
    "first_value",
    "flatten_values",
    "form_from_query",
    "form_from_values",
    "unflatten",
]
