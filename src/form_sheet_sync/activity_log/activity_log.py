"""Bounded sync log and error notification queue persisted as JSON."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from filelock import Timeout

from form_sheet_sync.file_coordination import (
    DEFAULT_LOCK_TIMEOUT_SECONDS,
    atomic_write_text,
    path_lock,
)

from .log_models import ErrorNotice, SyncLogEntry, SyncLogKind

_LOGGER = logging.getLogger(__name__)

DEFAULT_LOG_RETENTION = 100
DEFAULT_ERROR_NOTICE_RETENTION = 10


class ActivityLogError(Exception):
    """Raised when the activity log file cannot be read or written."""


class ActivityLog:
    """Append-only sync log with oldest-first eviction.

    Entries and pending error notices share one JSON document at ``path``.
    Updates hold ``<path>.lock`` so concurrent processes never drop entries.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        retention: int = DEFAULT_LOG_RETENTION,
        notice_retention: int = DEFAULT_ERROR_NOTICE_RETENTION,
        clock: Callable[[], datetime] | None = None,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
    ) -> None:
        if retention < 1 or notice_retention < 1:
            raise ValueError("Retention limits must be positive.")
        self._path = Path(path)
        self._retention = retention
        self._notice_retention = notice_retention
        self._clock = clock or (lambda: datetime.now(UTC))
        self._lock_timeout = lock_timeout

    def record_success(self, form_id: int, record_id: str) -> None:
        self._append(
            SyncLogEntry(
                kind=SyncLogKind.SUCCESS,
                form_id=form_id,
                timestamp=self._clock(),
                record_id=str(record_id),
            )
        )

    def record_error(self, form_id: int, message: str) -> None:
        _LOGGER.warning("Form %s: %s", form_id, message)
        self._append(
            SyncLogEntry(
                kind=SyncLogKind.ERROR,
                form_id=form_id,
                timestamp=self._clock(),
                message=message,
            )
        )

    def notify_error(self, form_id: int, title: str, message: str) -> None:
        notice = ErrorNotice(form_id=form_id, title=title, message=message, timestamp=self._clock())
        with self._locked():
            entries, notices = self._read()
            notices.append(notice)
            self._write(entries, notices[-self._notice_retention :])

    def recent(self, limit: int = 20) -> list[SyncLogEntry]:
        """Return up to ``limit`` entries, newest first."""
        with self._locked():
            entries, _ = self._read()
        return list(reversed(entries))[: max(limit, 0)]

    def clear(self) -> None:
        with self._locked():
            _, notices = self._read()
            self._write([], notices)

    def drain_error_notices(self) -> list[ErrorNotice]:
        """Return pending error notices, oldest first, and clear them."""
        with self._locked():
            entries, notices = self._read()
            if notices:
                self._write(entries, [])
        return notices

    def _append(self, entry: SyncLogEntry) -> None:
        with self._locked():
            entries, notices = self._read()
            entries.append(entry)
            self._write(entries[-self._retention :], notices)

    @contextmanager
    def _locked(self) -> Iterator[None]:
        lock = path_lock(self._path)
        try:
            lock.acquire(self._lock_timeout)
        except (Timeout, OSError) as exc:
            raise ActivityLogError(f"Failed to lock activity log {self._path}: {exc}") from exc
        try:
            yield
        finally:
            lock.release()

    def _read(self) -> tuple[list[SyncLogEntry], list[ErrorNotice]]:
        if not self._path.exists():
            return [], []
        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ActivityLogError(f"Failed to read activity log {self._path}: {exc}") from exc
        if not isinstance(document, Mapping):
            raise ActivityLogError(f"Activity log {self._path} must contain a JSON object.")
        try:
            entries = [_entry_from_json(item) for item in document.get("entries") or []]
            notices = [_notice_from_json(item) for item in document.get("error_notices") or []]
        except (KeyError, TypeError, ValueError) as exc:
            raise ActivityLogError(f"Invalid activity log {self._path}: {exc}") from exc
        return entries, notices

    def _write(self, entries: list[SyncLogEntry], notices: list[ErrorNotice]) -> None:
        document = {
            "entries": [_entry_to_json(entry) for entry in entries],
            "error_notices": [_notice_to_json(notice) for notice in notices],
        }
        try:
            atomic_write_text(self._path, json.dumps(document, ensure_ascii=False, indent=2) + "\n")
        except OSError as exc:
            raise ActivityLogError(f"Failed to write activity log {self._path}: {exc}") from exc


def _entry_to_json(entry: SyncLogEntry) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "kind": entry.kind.value,
        "form_id": entry.form_id,
        "timestamp": entry.timestamp.isoformat(),
    }
    if entry.record_id is not None:
        payload["record_id"] = entry.record_id
    if entry.message is not None:
        payload["message"] = entry.message
    return payload


def _entry_from_json(item: Mapping[str, Any]) -> SyncLogEntry:
    return SyncLogEntry(
        kind=SyncLogKind(item["kind"]),
        form_id=int(item["form_id"]),
        timestamp=datetime.fromisoformat(item["timestamp"]),
        record_id=item.get("record_id"),
        message=item.get("message"),
    )


def _notice_to_json(notice: ErrorNotice) -> dict[str, Any]:
    return {
        "form_id": notice.form_id,
        "title": notice.title,
        "message": notice.message,
        "timestamp": notice.timestamp.isoformat(),
    }


def _notice_from_json(item: Mapping[str, Any]) -> ErrorNotice:
    return ErrorNotice(
        form_id=int(item["form_id"]),
        title=str(item["title"]),
        message=str(item["message"]),
        timestamp=datetime.fromisoformat(item["timestamp"]),
    )
