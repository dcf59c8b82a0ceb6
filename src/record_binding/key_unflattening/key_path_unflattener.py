"""Conversion between flat dotted-key forms and nested value trees."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from urllib.parse import parse_qs

from record_binding.binding_errors import BindingError
from record_binding.schema_management.binding_contracts import FlatForm, ValueMap, ValueTree

PATH_SEPARATOR = "."


class KeyPathError(BindingError):
    """Raised for form keys with empty path segments."""


def unflatten(form: FlatForm, prefix: str = "") -> ValueTree:
    """Build a value tree from the keys of ``form`` that start with ``prefix``.

    Keys are visited in lexicographic order and the first key to claim a name
    wins: once a name holds a leaf or a branch, later keys mapping to it are
    dropped, so ``{"A": "x", "A.B": "y"}`` yields ``{"A": "x"}``. Only the
    first value of each key is used and keys without values are ignored.

    Raises:
      KeyPathError: If a considered key has an empty segment.
    """
    tree: ValueTree = {}
    for key in sorted(form):
        if not key.startswith(prefix):
            continue
        values = _values_of(form[key])
        if not values:
            continue
        remainder = key[len(prefix) :]
        _ensure_segments(key, remainder)
        name, separator, _ = remainder.partition(PATH_SEPARATOR)
        if name in tree:
            continue
        if separator:
            tree[name] = unflatten(form, prefix=f"{prefix}{name}{PATH_SEPARATOR}")
        else:
            tree[name] = values[0]
    return tree


def flatten_values(values: Mapping[str, object], prefix: str = "") -> dict[str, str]:
    """Return ``values`` as a flat mapping of dotted paths to strings."""
    flattened: dict[str, str] = {}
    for name, value in values.items():
        path = f"{prefix}{name}"
        if isinstance(value, Mapping):
            flattened.update(flatten_values(value, prefix=f"{path}{PATH_SEPARATOR}"))
        else:
            flattened[path] = str(value)
    return flattened


def form_from_values(values: ValueMap) -> dict[str, list[str]]:
    """Turn a value map into a flat form suitable for loading."""
    return {path: [text] for path, text in flatten_values(values).items()}


def form_from_query(query: str) -> dict[str, list[str]]:
    """Decode urlencoded ``query`` text, keeping blank values."""
    return parse_qs(query, keep_blank_values=True)


def first_value(values: Sequence[str] | str) -> str | None:
    """Return the significant value of one form entry."""
    normalized = _values_of(values)
    return normalized[0] if normalized else None


def _values_of(values: Sequence[str] | str) -> tuple[str, ...]:
    if isinstance(values, str):
        return (values,)
    return tuple(str(value) for value in values)


def _ensure_segments(key: str, remainder: str) -> None:
    if not remainder or any(not segment for segment in remainder.split(PATH_SEPARATOR)):
        raise KeyPathError(f"Form key '{key}' contains an empty path segment.")
