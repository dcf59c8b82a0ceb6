"""Record type inspection and schema flattening service."""

from __future__ import annotations

import dataclasses
import logging
import types
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from record_binding.binding_errors import BindingError

from .binding_contracts import is_hex_representable_type, is_loader_type, is_validator_type
from .schema_models import (
    FieldDescriptor,
    FieldKind,
    FlattenedField,
    FloatWidth,
    Indirection,
    IntegerWidth,
    Ref,
    TypeSchema,
)

DEFAULT_ID_TAG = "_id"

_LOGGER = logging.getLogger(__name__)

_DESCRIBED: dict[tuple[type, str], TypeSchema] = {}
_BUILT: dict[tuple[type, str], TypeSchema] = {}


class SchemaError(BindingError):
    """Raised when a record type cannot be described."""


class UnsupportedKindError(SchemaError):
    """Raised when a record declares fields the generic binder cannot handle."""

    def __init__(self, record_name: str, paths: tuple[str, ...]) -> None:
        self.record_name = record_name
        self.paths = paths
        joined = ", ".join(paths)
        super().__init__(
            f"{record_name} has fields of unsupported kind ({joined}) and does not "
            "implement load_form/generate_values."
        )


def describe_record_type(record_type: type, *, id_tag: str = DEFAULT_ID_TAG) -> TypeSchema:
    """Return the cached schema for ``record_type``.

    The schema is built on first use. Record types with unsupported fields are
    rejected unless they implement the Loader capability.
    """
    cache_key = (record_type, id_tag)
    cached = _DESCRIBED.get(cache_key)
    if cached is not None:
        return cached

    schema = _build_schema(record_type, id_tag=id_tag, in_progress=())
    if not schema.is_loader:
        unsupported = schema.unsupported_paths()
        if unsupported:
            raise UnsupportedKindError(schema.name, unsupported)

    _DESCRIBED[cache_key] = schema
    return schema


def flatten_type_schema(schema: TypeSchema) -> list[FlattenedField]:
    """Return deterministic flattened scalar fields of ``schema``."""
    fields: list[FlattenedField] = []
    _flatten_record(schema, prefix="", fields=fields)
    return fields


def _flatten_record(schema: TypeSchema, *, prefix: str, fields: list[FlattenedField]) -> None:
    for descriptor in schema.fields:
        path = f"{prefix}{descriptor.name}"
        if descriptor.kind is FieldKind.STRUCT and descriptor.schema is not None:
            _flatten_record(descriptor.schema, prefix=f"{path}.", fields=fields)
        elif descriptor.kind.is_scalar:
            fields.append(FlattenedField(path=path, definition=descriptor))


def _build_schema(
    record_type: type, *, id_tag: str, in_progress: tuple[type, ...]
) -> TypeSchema:
    cache_key = (record_type, id_tag)
    cached = _BUILT.get(cache_key)
    if cached is not None:
        return cached

    if not isinstance(record_type, type) or not dataclasses.is_dataclass(record_type):
        raise SchemaError(f"Record types must be dataclasses, got {record_type!r}.")
    if record_type in in_progress:
        chain = " -> ".join(item.__qualname__ for item in (*in_progress, record_type))
        raise SchemaError(f"Recursive record types are not supported: {chain}")
    if record_type.__dataclass_params__.frozen:  # type: ignore[attr-defined]
        raise SchemaError(f"{record_type.__qualname__} is frozen and cannot be bound.")

    try:
        hints = get_type_hints(record_type, include_extras=True)
    except (NameError, TypeError) as exc:
        raise SchemaError(
            f"Cannot resolve field annotations of {record_type.__qualname__}: {exc}"
        ) from exc

    nested_progress = (*in_progress, record_type)
    descriptors = tuple(
        _describe_field(field, hints[field.name], id_tag=id_tag, in_progress=nested_progress)
        for field in dataclasses.fields(record_type)
    )
    id_field = next(
        (descriptor.name for descriptor in descriptors if descriptor.key == id_tag), None
    )
    schema = TypeSchema(
        record_type=record_type,
        fields=descriptors,
        id_field=id_field,
        is_loader=is_loader_type(record_type),
        is_validator=is_validator_type(record_type),
    )
    _LOGGER.debug(
        "Described %s: %d fields, id field %s", schema.name, len(descriptors), id_field
    )
    _BUILT[cache_key] = schema
    return schema


def _describe_field(
    field: dataclasses.Field[Any],
    annotation: Any,
    *,
    id_tag: str,
    in_progress: tuple[type, ...],
) -> FieldDescriptor:
    inner, indirections, markers = _unwrap_annotation(annotation)
    kind, bit_size, scalar_type = _resolve_kind(inner, markers, field.name)
    nested = None
    if kind is FieldKind.STRUCT:
        nested = _build_schema(inner, id_tag=id_tag, in_progress=in_progress)

    has_default = (
        field.default is not dataclasses.MISSING
        or field.default_factory is not dataclasses.MISSING
    )
    return FieldDescriptor(
        name=field.name,
        kind=kind,
        indirections=indirections,
        schema=nested,
        scalar_type=scalar_type,
        bit_size=bit_size,
        hex_representable=kind.is_scalar and is_hex_representable_type(scalar_type),
        key=str(field.metadata.get("key", field.name)),
        required_init=field.init and not has_default,
        annotation=inner,
    )


def _unwrap_annotation(annotation: Any) -> tuple[Any, tuple[Indirection, ...], list[Any]]:
    """Strip Annotated, Optional and Ref wrappers, outermost first."""
    indirections: list[Indirection] = []
    markers: list[Any] = []
    current = annotation
    while True:
        origin = get_origin(current)
        if origin is Annotated:
            current, *extras = get_args(current)
            markers.extend(extras)
            continue
        if origin in (Union, types.UnionType):
            members = [member for member in get_args(current) if member is not type(None)]
            if len(members) != 1:
                return current, tuple(indirections), markers
            # Ref.value is already nullable, only an outermost Optional adds a level.
            if not indirections:
                indirections.append(Indirection.OPTIONAL)
            current = members[0]
            continue
        if origin is Ref:
            indirections.append(Indirection.REF)
            (current,) = get_args(current)
            continue
        if current is Ref:
            indirections.append(Indirection.REF)
            current = Any
            continue
        return current, tuple(indirections), markers


def _resolve_kind(
    annotation: Any, markers: list[Any], field_name: str
) -> tuple[FieldKind, int, type | None]:
    declared = annotation
    while hasattr(annotation, "__supertype__"):
        annotation = annotation.__supertype__

    if not isinstance(annotation, type) or get_origin(annotation) is not None:
        return FieldKind.UNSUPPORTED, 64, None
    scalar_type = declared if isinstance(declared, type) else annotation

    integer_width = _marker(markers, IntegerWidth, field_name)
    float_width = _marker(markers, FloatWidth, field_name)

    if issubclass(annotation, bool):
        _reject_marker(integer_width or float_width, field_name, "bool")
        return FieldKind.BOOL, 64, None
    if issubclass(annotation, int):
        _reject_marker(float_width, field_name, "int")
        width = integer_width or IntegerWidth(64)
        kind = FieldKind.INT if width.signed else FieldKind.UINT
        return kind, width.bits, _custom_type(scalar_type, int)
    if issubclass(annotation, float):
        _reject_marker(integer_width, field_name, "float")
        width_bits = float_width.bits if float_width else 64
        return FieldKind.FLOAT, width_bits, _custom_type(scalar_type, float)
    if issubclass(annotation, str):
        _reject_marker(integer_width or float_width, field_name, "str")
        return FieldKind.STRING, 64, _custom_type(scalar_type, str)
    if dataclasses.is_dataclass(annotation):
        return FieldKind.STRUCT, 64, None
    return FieldKind.UNSUPPORTED, 64, None


def _custom_type(scalar_type: type, builtin: type) -> type | None:
    return None if scalar_type is builtin else scalar_type


def _marker(markers: list[Any], marker_type: type, field_name: str) -> Any:
    found = [marker for marker in markers if isinstance(marker, marker_type)]
    if len(found) > 1:
        raise SchemaError(f"Field '{field_name}' declares more than one {marker_type.__name__}.")
    return found[0] if found else None


def _reject_marker(marker: Any, field_name: str, kind_name: str) -> None:
    if marker is not None:
        raise SchemaError(
            f"Field '{field_name}' of type {kind_name} cannot carry {type(marker).__name__}."
        )
