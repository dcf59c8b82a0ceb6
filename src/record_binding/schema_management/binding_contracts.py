"""Shared binding shapes and the capability protocols record types may implement."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol, TypeAlias, runtime_checkable

FlatForm: TypeAlias = Mapping[str, Sequence[str] | str]
ValueTree: TypeAlias = dict[str, "str | ValueTree"]
ValueMap: TypeAlias = dict[str, "str | ValueMap"]
LoadErrors: TypeAlias = dict[str, Exception]
ValidationErrors: TypeAlias = dict[str, Exception]


@runtime_checkable
class Loader(Protocol):
    """Record type that binds and renders its own form data.

    A Loader receives the raw flat form, not an unflattened tree, and is the
    supported way to expose fields the generic binder cannot handle, such as
    lists or mappings.
    """

    def load_form(self, form: FlatForm) -> Mapping[str, Exception] | None:
        """Bind ``form`` into the record and return per-field errors."""

    def generate_values(self) -> ValueMap:
        """Return the value map used to pre-fill the record's form."""


@runtime_checkable
class Validator(Protocol):
    """Record type with semantic validation run after a clean structural load."""

    def validate(self) -> Mapping[str, Exception | str] | None:
        """Return dotted-path keyed errors, or None when the record is valid."""


@runtime_checkable
class HexRepresentable(Protocol):
    """Opaque identifier-like scalar rendered through ``hex()``."""

    def hex(self) -> str:
        """Return the hexadecimal representation of the value."""


def is_loader_type(record_type: type) -> bool:
    """Return True when instances of ``record_type`` implement ``Loader``."""
    return callable(getattr(record_type, "load_form", None)) and callable(
        getattr(record_type, "generate_values", None)
    )


def is_validator_type(record_type: type) -> bool:
    """Return True when instances of ``record_type`` implement ``Validator``."""
    return callable(getattr(record_type, "validate", None))


def is_hex_representable_type(scalar_type: type | None) -> bool:
    """Return True when ``scalar_type`` defines its own ``hex()`` method.

    ``float.hex`` is a builtin float formatting method, not an identifier
    rendering, so float and subclasses inheriting it unchanged do not qualify.
    """
    if scalar_type is None:
        return False
    method = getattr(scalar_type, "hex", None)
    if not callable(method):
        return False
    return method is not getattr(float, "hex", None)
