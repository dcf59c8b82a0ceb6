"""Schema management exports."""

from .binding_contracts import (
    FlatForm,
    HexRepresentable,
    LoadErrors,
    Loader,
    ValidationErrors,
    Validator,
    ValueMap,
    ValueTree,
)
from .schema_models import (
    FieldDescriptor,
    FieldKind,
    FlattenedField,
    Float32,
    Float64,
    FloatWidth,
    Indirection,
    Int8,
    Int16,
    Int32,
    Int64,
    IntegerWidth,
    Ref,
    TypeSchema,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from .schema_projection import (
    DEFAULT_ID_TAG,
    SchemaError,
    UnsupportedKindError,
    describe_record_type,
    flatten_type_schema,
)
from .type_registry import (
    MissingIdentifierError,
    RegisteredType,
    RegistrationError,
    RegistrationOptions,
    RegistryFrozenError,
    TypeRegistry,
)

__all__ = [
    "DEFAULT_ID_TAG",
    "FieldDescriptor",
    "FieldKind",
    "FlatForm",
    "FlattenedField",
    "Float32",
    "Float64",
    "FloatWidth",
    "HexRepresentable",
    "Indirection",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "IntegerWidth",
    "LoadErrors",
    "Loader",
    "MissingIdentifierError",
    "Ref",
    "RegisteredType",
    "RegistrationError",
    "RegistrationOptions",
    "RegistryFrozenError",
    "SchemaError",
    "TypeRegistry",
    "TypeSchema",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UnsupportedKindError",
    "ValidationErrors",
    "Validator",
    "ValueMap",
    "ValueTree",
    "describe_record_type",
    "flatten_type_schema",
]
