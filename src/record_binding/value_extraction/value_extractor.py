"""Rendering of records into value maps for display and edit forms."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from record_binding.binding_errors import BindingError
from record_binding.key_unflattening import PATH_SEPARATOR, flatten_values
from record_binding.schema_management import (
    FieldDescriptor,
    FieldKind,
    Ref,
    TypeSchema,
    UnsupportedKindError,
    ValueMap,
    describe_record_type,
)


class ExtractionError(BindingError):
    """Raised when a record's values cannot be read."""


def create_values(instance: Any, schema: TypeSchema | None = None) -> ValueMap:
    """Render ``instance`` into a nested value map.

    Nil levels declared by the schema render blank. Loader types render
    through their own ``generate_values``.

    Raises:
      ExtractionError: If ``instance`` is None or not of the schema's type, or
        a field holds None where its schema declares no nullable level.
    """
    if instance is None:
        raise ExtractionError("Cannot extract values from None.")
    resolved = schema or describe_record_type(type(instance))
    if not isinstance(instance, resolved.record_type):
        raise ExtractionError(
            f"Expected a {resolved.name} instance, got {type(instance).__qualname__}."
        )
    if resolved.is_loader:
        return dict(instance.generate_values())
    return _record_values(resolved, instance, prefix="")


def create_empty_values(record: TypeSchema | type) -> ValueMap:
    """Render an all-blank value map from type information alone."""
    schema = record if isinstance(record, TypeSchema) else describe_record_type(record)
    if schema.is_loader:
        return dict(schema.new_instance().generate_values())
    return _blank_values(schema)


def render_scalar(value: Any, descriptor: FieldDescriptor) -> str:
    """Render one scalar value, preferring ``hex()`` for identifier types.

    Enum members render their value so the text parses back into the member.
    """
    scalar_type = descriptor.scalar_type
    if (
        descriptor.hex_representable
        and scalar_type is not None
        and isinstance(value, scalar_type)
    ):
        return str(value.hex())
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def render_columns(
    instance: Any, columns: Sequence[str], schema: TypeSchema | None = None
) -> tuple[str, ...]:
    """Render the dotted ``columns`` of ``instance`` for a list row."""
    flattened = flatten_values(create_values(instance, schema))
    return tuple(flattened.get(column, "") for column in columns)


def _record_values(schema: TypeSchema, record: Any, *, prefix: str) -> ValueMap:
    values: ValueMap = {}
    for descriptor in schema.fields:
        path = f"{prefix}{descriptor.name}"
        content, present = _read_chain(getattr(record, descriptor.name), descriptor, path)
        if descriptor.kind is FieldKind.STRUCT:
            nested = _nested_schema(descriptor)
            if not present:
                values[descriptor.name] = _blank_values(nested)
                continue
            if not isinstance(content, nested.record_type):
                raise ExtractionError(
                    f"Field '{path}' holds {type(content).__qualname__}, expected {nested.name}."
                )
            values[descriptor.name] = _record_values(
                nested, content, prefix=f"{path}{PATH_SEPARATOR}"
            )
        else:
            values[descriptor.name] = render_scalar(content, descriptor) if present else ""
    return values


def _read_chain(value: Any, descriptor: FieldDescriptor, path: str) -> tuple[Any, bool]:
    """Follow the field's indirection chain, reporting whether a value is present."""
    if value is None:
        if descriptor.nullable:
            return None, False
        raise ExtractionError(f"Field '{path}' is None but is not declared optional.")
    for _ in range(descriptor.ref_depth):
        if not isinstance(value, Ref):
            raise ExtractionError(f"Field '{path}' holds {type(value).__qualname__}, expected Ref.")
        value = value.value
        if value is None:
            return None, False
    return value, True


def _blank_values(schema: TypeSchema) -> ValueMap:
    values: ValueMap = {}
    for descriptor in schema.fields:
        if descriptor.kind is FieldKind.UNSUPPORTED:
            raise UnsupportedKindError(schema.name, (descriptor.name,))
        if descriptor.kind is FieldKind.STRUCT:
            values[descriptor.name] = _blank_values(_nested_schema(descriptor))
        else:
            values[descriptor.name] = ""
    return values


def _nested_schema(descriptor: FieldDescriptor) -> TypeSchema:
    assert descriptor.schema is not None
    return descriptor.schema
