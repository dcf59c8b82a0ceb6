"""Assembly of a frozen type registry from configuration."""

from __future__ import annotations

import importlib

from record_binding.binding_errors import BindingError
from record_binding.schema_management import RegistrationOptions, TypeRegistry

from .loader import ConfigurationError
from .runtime_settings import Configuration, RecordTypeConfig


def build_type_registry(configuration: Configuration) -> TypeRegistry:
    """Import and register every configured record type, then freeze the registry."""
    registry = TypeRegistry(id_tag=configuration.registry.id_tag)
    for record_config in configuration.registry.record_types:
        record_type = import_record_type(record_config.record_path)
        try:
            registry.register(
                record_type,
                record_config.collection,
                _options_for(record_config),
            )
        except BindingError as exc:
            raise ConfigurationError(
                f"Cannot register {record_config.record_path} as "
                f"{record_config.collection}: {exc}"
            ) from exc
    registry.freeze()
    return registry


def import_record_type(record_path: str) -> type:
    """Resolve a ``package.module:ClassName`` path to the class it names."""
    module_name, _, attribute_path = record_path.partition(":")
    try:
        target: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import module '{module_name}': {exc}") from exc
    for attribute in attribute_path.split("."):
        try:
            target = getattr(target, attribute)
        except AttributeError as exc:
            raise ConfigurationError(
                f"Module '{module_name}' has no attribute '{attribute_path}'."
            ) from exc
    if not isinstance(target, type):
        raise ConfigurationError(f"'{record_path}' does not name a class.")
    return target


def _options_for(record_config: RecordTypeConfig) -> RegistrationOptions | None:
    if record_config.columns is None:
        return None
    return RegistrationOptions(columns=record_config.columns)
