"""Configuration loader service."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from record_binding.schema_management import DEFAULT_ID_TAG

from .runtime_settings import Configuration, LoggingSettings, RecordTypeConfig, RegistrySettings

DEFAULT_LOG_LEVEL = "WARNING"


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    registry = _parse_registry_section(parsed.get("registry"))
    logging_settings = _parse_logging_section(parsed.get("logging"))

    return Configuration(path=path, registry=registry, logging=logging_settings)


def _parse_registry_section(value: Any) -> RegistrySettings:
    section = _require_mapping(value, "registry")
    id_tag = _require_non_empty_string(section.get("id_tag", DEFAULT_ID_TAG), "registry.id_tag")
    raw_types = section.get("types")
    if not isinstance(raw_types, Sequence) or isinstance(raw_types, str):
        raise ConfigurationError("registry.types must be a list of record type entries.")

    record_types: list[RecordTypeConfig] = []
    seen_collections: set[str] = set()
    for index, entry in enumerate(raw_types):
        record_type = _parse_record_type(entry, f"registry.types[{index}]")
        if record_type.collection in seen_collections:
            raise ConfigurationError(
                f"Collection '{record_type.collection}' is declared more than once."
            )
        seen_collections.add(record_type.collection)
        record_types.append(record_type)

    return RegistrySettings(id_tag=id_tag, record_types=tuple(record_types))


def _parse_record_type(value: Any, label: str) -> RecordTypeConfig:
    entry = _require_mapping(value, label)
    record_path = _require_non_empty_string(entry.get("record"), f"{label}.record")
    module_name, separator, attribute = record_path.partition(":")
    if not separator or not module_name or not attribute:
        raise ConfigurationError(f"{label}.record must have the form 'package.module:ClassName'.")
    collection = _require_non_empty_string(entry.get("collection"), f"{label}.collection")
    if "." not in collection:
        raise ConfigurationError(f"{label}.collection must have the form database.collection.")
    columns = entry.get("columns")
    return RecordTypeConfig(
        record_path=record_path,
        collection=collection,
        columns=None if columns is None else _normalize_string_sequence(columns, label),
    )


def _parse_logging_section(value: Any) -> LoggingSettings:
    if value is None:
        return LoggingSettings(level=DEFAULT_LOG_LEVEL)
    section = _require_mapping(value, "logging")
    level = _require_non_empty_string(section.get("level", DEFAULT_LOG_LEVEL), "logging.level")
    level = level.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"logging.level '{level}' is not a known log level.")
    return LoggingSettings(level=level)


def _normalize_string_sequence(value: Any, label: str) -> tuple[str, ...]:
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{label}.columns entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{label}.columns must be a string or list of strings.")


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped
