"""Schema management entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Generic, TypeVar, get_origin

T = TypeVar("T")

_CONTAINER_ORIGINS = (list, dict, set, frozenset, tuple)


class FieldKind(str, Enum):
    """Kinds of record fields understood by the binding engine."""

    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    STRING = "string"
    STRUCT = "struct"
    UNSUPPORTED = "unsupported"

    @property
    def is_scalar(self) -> bool:
        """Return True for kinds parsed from a single form value."""
        return self not in (FieldKind.STRUCT, FieldKind.UNSUPPORTED)


class Indirection(str, Enum):
    """One nullable level between a record attribute and the value it holds."""

    OPTIONAL = "optional"
    REF = "ref"


@dataclass
class Ref(Generic[T]):
    """Mutable cell adding one level of indirection to a record field.

    A field annotated ``Ref[Ref[int]]`` has two nullable levels: the outer
    cell's ``value`` may be None or another cell, whose ``value`` may be None
    or an int.
    """

    value: T | None = None


@dataclass(frozen=True)
class IntegerWidth:
    """Width marker for integer fields, used inside ``Annotated``."""

    bits: int
    signed: bool = True

    def __post_init__(self) -> None:
        if self.bits not in (8, 16, 32, 64):
            raise ValueError(f"Unsupported integer width: {self.bits}")


@dataclass(frozen=True)
class FloatWidth:
    """Width marker for float fields, used inside ``Annotated``."""

    bits: int

    def __post_init__(self) -> None:
        if self.bits not in (32, 64):
            raise ValueError(f"Unsupported float width: {self.bits}")


Int8 = Annotated[int, IntegerWidth(8)]
Int16 = Annotated[int, IntegerWidth(16)]
Int32 = Annotated[int, IntegerWidth(32)]
Int64 = Annotated[int, IntegerWidth(64)]
UInt = Annotated[int, IntegerWidth(64, signed=False)]
UInt8 = Annotated[int, IntegerWidth(8, signed=False)]
UInt16 = Annotated[int, IntegerWidth(16, signed=False)]
UInt32 = Annotated[int, IntegerWidth(32, signed=False)]
UInt64 = Annotated[int, IntegerWidth(64, signed=False)]
Float32 = Annotated[float, FloatWidth(32)]
Float64 = Annotated[float, FloatWidth(64)]


@dataclass(frozen=True)
class FieldDescriptor:  # pylint: disable=too-many-instance-attributes
    """Registration-time description of one record field."""

    name: str
    kind: FieldKind
    indirections: tuple[Indirection, ...] = ()
    schema: TypeSchema | None = None
    scalar_type: type | None = None
    bit_size: int = 64
    hex_representable: bool = False
    key: str = ""
    required_init: bool = True
    annotation: Any = None

    @property
    def pointer_depth(self) -> int:
        """Number of nullable levels declared for the field."""
        return len(self.indirections)

    @property
    def nullable(self) -> bool:
        """Return True when the attribute itself may hold None."""
        return bool(self.indirections) and self.indirections[0] is Indirection.OPTIONAL

    @property
    def ref_depth(self) -> int:
        """Number of ``Ref`` cells between the attribute and the value."""
        return sum(1 for level in self.indirections if level is Indirection.REF)

    def zero_value(self) -> Any:
        """Value a freshly allocated record holds in this field."""
        if self.indirections:
            return None if self.nullable else Ref()
        if self.kind is FieldKind.STRUCT and self.schema is not None:
            return self.schema.new_instance()
        if self.kind is FieldKind.UNSUPPORTED:
            origin = get_origin(self.annotation) or self.annotation
            if origin in _CONTAINER_ORIGINS:
                return origin()
            return None
        return _scalar_zero(self.kind, self.scalar_type)


@dataclass(frozen=True)
class TypeSchema:
    """Cached, immutable description of a record type's fields."""

    record_type: type
    fields: tuple[FieldDescriptor, ...]
    id_field: str | None = None
    is_loader: bool = False
    is_validator: bool = False

    @property
    def name(self) -> str:
        """Qualified name of the described record type."""
        return self.record_type.__qualname__

    def field(self, name: str) -> FieldDescriptor | None:
        """Return the descriptor for ``name`` or None."""
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        return None

    def unsupported_paths(self, prefix: str = "") -> tuple[str, ...]:
        """Dotted paths of every unsupported field, nested records included."""
        paths: list[str] = []
        for descriptor in self.fields:
            path = f"{prefix}{descriptor.name}"
            if descriptor.kind is FieldKind.UNSUPPORTED:
                paths.append(path)
            elif descriptor.kind is FieldKind.STRUCT and descriptor.schema is not None:
                paths.extend(descriptor.schema.unsupported_paths(f"{path}."))
        return tuple(paths)

    def new_instance(self) -> Any:
        """Construct a record whose fields without defaults hold zero values."""
        arguments = {
            descriptor.name: descriptor.zero_value()
            for descriptor in self.fields
            if descriptor.required_init
        }
        return self.record_type(**arguments)


@dataclass(frozen=True)
class FlattenedField:
    """Flattened schema field definition."""

    path: str
    definition: FieldDescriptor


def _scalar_zero(kind: FieldKind, scalar_type: type | None) -> Any:
    zero: Any
    if kind is FieldKind.BOOL:
        zero = False
    elif kind in (FieldKind.INT, FieldKind.UINT):
        zero = 0
    elif kind is FieldKind.FLOAT:
        zero = 0.0
    else:
        zero = ""
    if scalar_type is None:
        return zero
    try:
        return scalar_type(zero)
    except (TypeError, ValueError):
        return zero
