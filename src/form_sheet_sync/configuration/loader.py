"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .runtime_settings import (
    CatalogSettings,
    Configuration,
    SiteSettings,
    StateSettings,
    StoreSettings,
    SyncSettings,
)

DEFAULT_MAPPINGS_FILENAME = "sheet-mappings.json"
DEFAULT_ACTIVITY_LOG_FILENAME = "sync-log.json"


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
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    base_path = path.resolve().parent
    return Configuration(
        path=path,
        site=_parse_site_section(parsed.get("site")),
        catalog=_parse_catalog_section(parsed.get("catalog"), base_path),
        store=_parse_store_section(parsed.get("store"), base_path),
        state=_parse_state_section(parsed.get("state"), base_path),
        sync=_parse_sync_section(parsed.get("sync")),
    )


def _parse_site_section(value: Any) -> SiteSettings:
    section = _require_mapping(value, "site")
    name = _require_non_empty_string(section.get("name"), "site.name")
    timezone = _require_non_empty_string(section.get("timezone", "UTC"), "site.timezone")
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"site.timezone '{timezone}' is not a known time zone.") from exc
    return SiteSettings(name=name, timezone=timezone)


def _parse_catalog_section(value: Any, base_path: Path) -> CatalogSettings:
    section = _require_mapping(value, "catalog")
    raw_path = _require_non_empty_string(section.get("path"), "catalog.path")
    catalog_path = _resolve_path(base_path, raw_path)
    if not catalog_path.exists():
        raise ConfigurationError(f"Form catalog file not found: {catalog_path}")
    return CatalogSettings(path=catalog_path)


def _parse_store_section(value: Any, base_path: Path) -> StoreSettings:
    section = _require_mapping(value, "store")
    raw_directory = _require_non_empty_string(section.get("directory"), "store.directory")
    return StoreSettings(directory=_resolve_path(base_path, raw_directory))


def _parse_state_section(value: Any, base_path: Path) -> StateSettings:
    if value is None:
        value = {}
    if not isinstance(value, Mapping):
        raise ConfigurationError("Configuration section 'state' must be a mapping.")
    mappings_path = _optional_string(value.get("mappings_path"), "state.mappings_path")
    activity_log_path = _optional_string(
        value.get("activity_log_path"), "state.activity_log_path"
    )
    return StateSettings(
        mappings_path=_resolve_path(base_path, mappings_path or DEFAULT_MAPPINGS_FILENAME),
        activity_log_path=_resolve_path(
            base_path, activity_log_path or DEFAULT_ACTIVITY_LOG_FILENAME
        ),
    )


def _parse_sync_section(value: Any) -> SyncSettings:
    if value is None:
        value = {}
    if not isinstance(value, Mapping):
        raise ConfigurationError("Configuration section 'sync' must be a mapping.")
    return SyncSettings(
        batch_size=_require_positive_int(value.get("batch_size", 500), "sync.batch_size"),
        batch_pause_seconds=_require_non_negative_number(
            value.get("batch_pause_seconds", 1.0), "sync.batch_pause_seconds"
        ),
        log_retention=_require_positive_int(
            value.get("log_retention", 100), "sync.log_retention"
        ),
        error_notice_retention=_require_positive_int(
            value.get("error_notice_retention", 10), "sync.error_notice_retention"
        ),
    )


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


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


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value


def _require_non_negative_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ConfigurationError(f"{field_name} must be a number.")
    if value < 0:
        raise ConfigurationError(f"{field_name} must not be negative.")
    return float(value)
