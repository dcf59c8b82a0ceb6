"""Schema-driven assignment of value trees into records."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from record_binding.binding_errors import BindingError
from record_binding.key_unflattening import PATH_SEPARATOR
from record_binding.schema_management import (
    FieldDescriptor,
    FieldKind,
    LoadErrors,
    Ref,
    SchemaError,
    TypeSchema,
    UnsupportedKindError,
    ValueTree,
)
from record_binding.value_coercion import FieldCoercionError, coerce_scalar

RecordResolver = Callable[[], Any]


class SchemaMismatchError(BindingError):
    """Raised when the value tree shape disagrees with the record schema."""

    def __init__(self, path: str, expected: str, received: str) -> None:
        self.path = path
        super().__init__(f"Field '{path}' expects a {expected}, got a {received}.")


class _Slot(Protocol):
    def get(self) -> Any: ...

    def set(self, value: Any) -> None: ...


@dataclass(frozen=True)
class _AttributeSlot:
    owner: Any
    name: str

    def get(self) -> Any:
        return getattr(self.owner, self.name)

    def set(self, value: Any) -> None:
        setattr(self.owner, self.name, value)


@dataclass(frozen=True)
class _RefSlot:
    cell: Ref[Any]

    def get(self) -> Any:
        return self.cell.value

    def set(self, value: Any) -> None:
        self.cell.value = value


def apply(schema: TypeSchema, tree: ValueTree, target: Any) -> LoadErrors:
    """Write ``tree`` into ``target`` following ``schema``.

    Fields missing from the tree are left untouched and tree entries without a
    matching field are ignored. Coercion failures are collected under the
    field's dotted path while the remaining fields are still processed.

    Raises:
      SchemaMismatchError: If a record field receives a plain value or a
        scalar field receives a nested tree. No partial errors are returned.
      SchemaError: If ``schema`` belongs to a Loader type.
    """
    if schema.is_loader:
        raise SchemaError(f"{schema.name} binds its own forms through load_form.")
    if not isinstance(target, schema.record_type):
        raise SchemaError(
            f"Cannot bind {type(target).__qualname__} using the {schema.name} schema."
        )
    errors: LoadErrors = {}
    _apply_record(schema, tree, lambda: target, prefix="", errors=errors)
    return errors


def _apply_record(
    schema: TypeSchema,
    tree: ValueTree,
    resolve_record: RecordResolver,
    *,
    prefix: str,
    errors: LoadErrors,
) -> None:
    for descriptor in schema.fields:
        if descriptor.name not in tree:
            continue
        entry = tree[descriptor.name]
        path = f"{prefix}{descriptor.name}"

        if descriptor.kind is FieldKind.STRUCT:
            if not isinstance(entry, Mapping):
                raise SchemaMismatchError(path, "record", "value")
            _apply_record(
                _nested_schema(descriptor),
                entry,
                _nested_resolver(resolve_record, descriptor),
                prefix=f"{path}{PATH_SEPARATOR}",
                errors=errors,
            )
            continue

        if descriptor.kind is FieldKind.UNSUPPORTED:
            raise UnsupportedKindError(schema.name, (path,))
        if isinstance(entry, Mapping):
            raise SchemaMismatchError(path, "value", "record")

        try:
            value = coerce_scalar(
                descriptor.kind,
                entry,
                bit_size=descriptor.bit_size,
                scalar_type=descriptor.scalar_type,
            )
        except FieldCoercionError as exc:
            errors[path] = exc
            continue
        _value_slot(resolve_record(), descriptor).set(value)


def _nested_resolver(
    resolve_parent: RecordResolver, descriptor: FieldDescriptor
) -> RecordResolver:
    """Return a resolver allocating the nested record only when first written."""
    nested_schema = _nested_schema(descriptor)

    def resolve() -> Any:
        slot = _value_slot(resolve_parent(), descriptor)
        return allocate_if_absent(slot, nested_schema.new_instance)

    return resolve


def _value_slot(record: Any, descriptor: FieldDescriptor) -> _Slot:
    """Return the innermost slot of ``descriptor``, allocating absent cells."""
    slot: _Slot = _AttributeSlot(record, descriptor.name)
    for _ in range(descriptor.ref_depth):
        cell = allocate_if_absent(slot, Ref)
        slot = _RefSlot(cell)
    return slot


def allocate_if_absent(slot: _Slot, factory: Callable[[], Any]) -> Any:
    """Return the slot's content, storing ``factory()`` first when it is None."""
    current = slot.get()
    if current is None:
        current = factory()
        slot.set(current)
    return current


def _nested_schema(descriptor: FieldDescriptor) -> TypeSchema:
    assert descriptor.schema is not None
    return descriptor.schema
