"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "form-sheet-sync.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Sync configuration template for form-sheet-sync.
# Replace every <REQUIRED> placeholder before running sync-all, import or submit.
# Relative paths are resolved against the directory of this file.

site:
  # Site name prefixes every destination workbook title (first 20 characters).
  name: "<REQUIRED>"
  # IANA time zone used to render submission dates and times.
  timezone: "UTC"

catalog:
  # Form export (YAML or JSON) listing forms, their fields and submissions.
  path: "<REQUIRED>"

store:
  # Directory receiving one workbook per synchronized form.
  directory: "<REQUIRED>"

state:
  # mappings_path: "sheet-mappings.json"
  # activity_log_path: "sync-log.json"

sync:
  # Rows appended per request during import.
  batch_size: 500
  # Pause between import batches, in seconds.
  batch_pause_seconds: 1.0
  # Activity log entries kept (oldest evicted first).
  log_retention: 100
  # Error notices kept until read.
  error_notice_retention: 10
"""


def build_placeholder_configuration() -> str:
    """Build a YAML sync configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder sync configuration template to the requested output path.

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
        raise FileExistsError(f"Sync configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
