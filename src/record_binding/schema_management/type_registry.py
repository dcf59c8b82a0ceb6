"""Registration of record types under database/collection specifiers."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from record_binding.binding_errors import BindingError

from .schema_models import TypeSchema
from .schema_projection import DEFAULT_ID_TAG, describe_record_type, flatten_type_schema

_LOGGER = logging.getLogger(__name__)


class RegistrationError(BindingError):
    """Raised when a record type cannot be registered."""


class MissingIdentifierError(RegistrationError):
    """Raised when a registered record type has no identifier field."""


class RegistryFrozenError(RegistrationError):
    """Raised when the registry is modified after it was frozen."""


@dataclass(frozen=True)
class RegistrationOptions:
    """Options used when registering a record type."""

    columns: Sequence[str] | None = None


@dataclass(frozen=True)
class RegisteredType:
    """A record type registered under one collection."""

    collection: str
    schema: TypeSchema
    columns: tuple[str, ...]

    @property
    def database(self) -> str:
        """Database part of the collection specifier."""
        return self.collection.split(".", 1)[0]

    @property
    def name(self) -> str:
        """Collection part of the collection specifier."""
        return self.collection.split(".", 1)[1]


class TypeRegistry:
    """Registry of record types keyed by ``database.collection``.

    Registration is single-writer; call :meth:`freeze` once every type is
    registered to make the registry read-only for concurrent readers.
    """

    def __init__(self, *, id_tag: str = DEFAULT_ID_TAG) -> None:
        self._id_tag = id_tag
        self._types: dict[str, RegisteredType] = {}
        self._frozen = False

    @property
    def id_tag(self) -> str:
        """Storage key that marks a record's identifier field."""
        return self._id_tag

    @property
    def frozen(self) -> bool:
        """Return True once the registry no longer accepts changes."""
        return self._frozen

    def freeze(self) -> None:
        """Reject every later register/unregister call."""
        self._frozen = True

    def register(
        self,
        record_type: type,
        collection: str,
        options: RegistrationOptions | None = None,
    ) -> RegisteredType:
        """Describe ``record_type`` and register it under ``collection``.

        Raises:
          RegistryFrozenError: If the registry has been frozen.
          RegistrationError: If the specifier is malformed, already registered,
            or names columns the record does not have.
          UnsupportedKindError: If the record has unsupported fields and is not
            a Loader.
          MissingIdentifierError: If no field carries the identifier key.
        """
        self._ensure_mutable()
        database, _, name = collection.partition(".")
        if not database or not name:
            raise RegistrationError(
                f"Collection specifier '{collection}' must have the form database.collection."
            )
        existing = self._types.get(collection)
        if existing is not None:
            raise RegistrationError(
                f"Collection '{collection}' already registered for {existing.schema.name}; "
                f"got {record_type.__qualname__}."
            )

        schema = describe_record_type(record_type, id_tag=self._id_tag)
        if schema.id_field is None:
            raise MissingIdentifierError(
                f"{schema.name} has no field with key '{self._id_tag}'."
            )
        columns = _resolve_columns(schema, options.columns if options else None)

        registered = RegisteredType(collection=collection, schema=schema, columns=columns)
        self._types[collection] = registered
        _LOGGER.info("Registered %s as %s", schema.name, collection)
        return registered

    def unregister(self, collection: str) -> None:
        """Remove the record type registered under ``collection``."""
        self._ensure_mutable()
        if collection not in self._types:
            raise RegistrationError(f"Collection '{collection}' is not registered.")
        del self._types[collection]
        _LOGGER.info("Unregistered %s", collection)

    def has_type(self, collection: str) -> bool:
        """Return True when ``collection`` is registered."""
        return collection in self._types

    def get(self, collection: str) -> RegisteredType:
        """Return the registration for ``collection``."""
        try:
            return self._types[collection]
        except KeyError as exc:
            raise RegistrationError(f"Collection '{collection}' is not registered.") from exc

    def new_instance(self, collection: str) -> Any:
        """Return a zero-valued record of the type registered under ``collection``."""
        return self.get(collection).schema.new_instance()

    def collections_by_database(self) -> dict[str, tuple[str, ...]]:
        """Group registered collection names by database, both sorted."""
        grouped: dict[str, list[str]] = {}
        for registered in self._types.values():
            grouped.setdefault(registered.database, []).append(registered.name)
        return {database: tuple(sorted(grouped[database])) for database in sorted(grouped)}

    def __contains__(self, collection: object) -> bool:
        return collection in self._types

    def __iter__(self) -> Iterator[RegisteredType]:
        return iter(tuple(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise RegistryFrozenError("Type registry is frozen.")


def _resolve_columns(schema: TypeSchema, requested: Sequence[str] | None) -> tuple[str, ...]:
    available = [field.path for field in flatten_type_schema(schema)]
    if requested is None:
        return tuple(available)
    for column in requested:
        if column not in available:
            raise RegistrationError(f"Column '{column}' does not exist in {schema.name}.")
    return tuple(requested)
