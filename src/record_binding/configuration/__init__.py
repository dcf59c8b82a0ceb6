"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, load_configuration
from .registry_assembly import build_type_registry, import_record_type
from .runtime_settings import (
    Configuration,
    LoggingSettings,
    RecordTypeConfig,
    RegistrySettings,
)

__all__ = [
    "Configuration",
    "LoggingSettings",
    "RecordTypeConfig",
    "RegistrySettings",
    "ConfigurationError",
    "load_configuration",
    "build_type_registry",
    "import_record_type",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
