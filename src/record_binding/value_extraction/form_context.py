"""Form display context built from values and errors."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from record_binding.key_unflattening import PATH_SEPARATOR
from record_binding.schema_management import TypeSchema, ValueMap

from .value_extractor import create_empty_values, create_values


@dataclass(frozen=True)
class FormContext:
    """Values and errors handed to the rendering layer for one form.

    Both lookups take dotted field paths, for example::

        context.value("author.name")
        context.error("author.name")
    """

    values: ValueMap
    errors: Mapping[str, Exception] = field(default_factory=dict)

    def value(self, path: str) -> str:
        """Return the rendered value at ``path`` or an empty string."""
        current: Any = self.values
        for segment in path.split(PATH_SEPARATOR):
            if not isinstance(current, Mapping) or segment not in current:
                return ""
            current = current[segment]
        return current if isinstance(current, str) else ""

    def error(self, path: str) -> str:
        """Return the error text recorded for ``path`` or an empty string."""
        error = self.errors.get(path)
        return "" if error is None else str(error)


def generate_form_context(
    target: Any,
    errors: Mapping[str, Exception] | None = None,
    schema: TypeSchema | None = None,
) -> FormContext:
    """Build the context for re-displaying ``target`` with ``errors``."""
    return FormContext(values=create_values(target, schema), errors=dict(errors or {}))


def empty_form_context(record: TypeSchema | type) -> FormContext:
    """Build the context for a blank new-record form."""
    return FormContext(values=create_empty_values(record))
