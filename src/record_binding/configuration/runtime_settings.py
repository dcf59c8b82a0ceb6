"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RecordTypeConfig:
    """One record type to register, as declared in the configuration."""

    record_path: str
    collection: str
    columns: tuple[str, ...] | None


@dataclass(frozen=True)
class RegistrySettings:
    """Type registry configuration."""

    id_tag: str
    record_types: tuple[RecordTypeConfig, ...]


@dataclass(frozen=True)
class LoggingSettings:
    """Logging configuration."""

    level: str


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    registry: RegistrySettings
    logging: LoggingSettings
