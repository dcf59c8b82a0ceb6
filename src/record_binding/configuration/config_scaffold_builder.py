"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "record-binding.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Binding configuration template for record-binding.
# Replace every <REQUIRED> placeholder before running list-types, bind or blank.
# Replace <OPTIONAL> placeholders only when your setup needs them.

registry:
  # Storage key (dataclass field metadata "key") that marks the identifier field.
  id_tag: "_id"
  types:
    # One entry per record type; record is an importable "package.module:ClassName".
    - record: "<REQUIRED>"
      # collection must be a database.collection specifier.
      collection: "<REQUIRED>"
      # columns are dotted field paths shown in list rows; omit to show all.
      columns:
        - "<OPTIONAL>"

logging:
  # One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
  level: "WARNING"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML binding configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder binding configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(
            f"Binding configuration file already exists: {destination.resolve()}"
        )
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
