"""Synchronization entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class DestinationHandle:
    """Identity of a destination returned by the tabular store on creation."""

    destination_id: str
    url: str


@dataclass(frozen=True)
class FormSyncState:
    """Persisted association between a form and its destination."""

    form_id: int
    destination_id: str
    destination_url: str
    created_at: datetime


class RecordSyncStatus(str, Enum):
    """Outcome status of synchronizing one submission."""

    SYNCED = "synced"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class RecordSyncOutcome:
    """Result of synchronizing one submission."""

    form_id: int
    record_id: str
    status: RecordSyncStatus
    error_message: str | None = None


@dataclass(frozen=True)
class FormSyncOutcome:
    """Per-form entry of a sync-all run."""

    form_id: int
    title: str
    destination_url: str | None = None
    reason: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class SyncAllOutcome:
    """Forms partitioned by what sync-all did with them."""

    created: tuple[FormSyncOutcome, ...]
    skipped: tuple[FormSyncOutcome, ...]
    errored: tuple[FormSyncOutcome, ...]


@dataclass(frozen=True)
class PartialBatchFailure:
    """One failed import batch; none of its rows were written."""

    batch_number: int
    first_row: int
    row_count: int
    message: str


@dataclass(frozen=True)
class ImportResult:
    """Counters and per-batch failures of a historical import."""

    imported: int
    failed: int
    total: int
    errors: tuple[PartialBatchFailure, ...]

    @property
    def has_failures(self) -> bool:
        return bool(self.errors)
