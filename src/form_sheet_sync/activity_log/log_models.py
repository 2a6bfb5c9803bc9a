"""Activity log entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class SyncLogKind(str, Enum):
    """Kind of a sync log entry."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class SyncLogEntry:
    """One line of the operator-facing sync log."""

    kind: SyncLogKind
    form_id: int
    timestamp: datetime
    record_id: str | None = None
    message: str | None = None

    def describe(self) -> str:
        if self.kind is SyncLogKind.SUCCESS:
            return f"Synced entry #{self.record_id} from form #{self.form_id}"
        return f"Form #{self.form_id}: {self.message}"


@dataclass(frozen=True)
class ErrorNotice:
    """Pending error notification shown once to an operator."""

    form_id: int
    title: str
    message: str
    timestamp: datetime
