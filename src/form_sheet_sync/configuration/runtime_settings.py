"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SiteSettings:
    """Identity of the site whose forms are synchronized."""

    name: str
    timezone: str


@dataclass(frozen=True)
class CatalogSettings:
    """Location of the form export consumed as schema provider and submission source."""

    path: Path


@dataclass(frozen=True)
class StoreSettings:
    """Workbook store configuration."""

    directory: Path


@dataclass(frozen=True)
class StateSettings:
    """Locations of persisted mapping state and the activity log."""

    mappings_path: Path
    activity_log_path: Path


@dataclass(frozen=True)
class SyncSettings:
    """Batching and retention knobs for synchronization."""

    batch_size: int
    batch_pause_seconds: float
    log_retention: int
    error_notice_retention: int


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    site: SiteSettings
    catalog: CatalogSettings
    store: StoreSettings
    state: StateSettings
    sync: SyncSettings
