"""Activity log tests."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta
from itertools import count
from pathlib import Path

import pytest
from filelock import FileLock
from form_sheet_sync.activity_log import ActivityLog, ActivityLogError, SyncLogKind


def _log(path: Path, **kwargs) -> ActivityLog:
    ticks = count()
    start = datetime(2024, 1, 1, tzinfo=UTC)
    return ActivityLog(path, clock=lambda: start + timedelta(seconds=next(ticks)), **kwargs)


def test_entries_are_returned_newest_first(tmp_path: Path) -> None:
    log = _log(tmp_path / "log.json")
    log.record_success(7, "101")
    log.record_error(7, "store offline")

    entries = log.recent()

    assert [entry.kind for entry in entries] == [SyncLogKind.ERROR, SyncLogKind.SUCCESS]
    assert entries[0].describe() == "Form #7: store offline"
    assert entries[1].describe() == "Synced entry #101 from form #7"


def test_oldest_entries_are_evicted_beyond_retention(tmp_path: Path) -> None:
    log = _log(tmp_path / "log.json", retention=3)
    for record_id in range(5):
        log.record_success(1, str(record_id))

    assert [entry.record_id for entry in log.recent(10)] == ["4", "3", "2"]


def test_log_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "log.json"
    _log(path).record_success(2, "9")

    entries = ActivityLog(path).recent()

    assert entries[0].record_id == "9"
    assert entries[0].timestamp == datetime(2024, 1, 1, tzinfo=UTC)


def test_clear_keeps_pending_notices(tmp_path: Path) -> None:
    log = _log(tmp_path / "log.json")
    log.record_error(1, "boom")
    log.notify_error(1, "Contact", "boom")

    log.clear()

    assert log.recent() == []
    assert [notice.message for notice in log.drain_error_notices()] == ["boom"]


def test_error_notices_are_bounded_and_drained_once(tmp_path: Path) -> None:
    log = _log(tmp_path / "log.json", notice_retention=2)
    for index in range(3):
        log.notify_error(index, f"Form {index}", f"failure {index}")

    drained = log.drain_error_notices()

    assert [notice.form_id for notice in drained] == [1, 2]
    assert log.drain_error_notices() == []


def test_corrupt_log_raises_activity_log_error(tmp_path: Path) -> None:
    path = tmp_path / "log.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ActivityLogError):
        ActivityLog(path).recent()


def test_retention_must_be_positive(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        ActivityLog(tmp_path / "log.json", retention=0)


def test_concurrent_writers_keep_every_entry(tmp_path: Path) -> None:
    path = tmp_path / "activity.json"

    def record(record_id: int) -> None:
        _log(path).record_success(5, str(record_id))

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(record, range(30)))

    entries = _log(path).recent(limit=100)
    assert sorted(int(entry.record_id or "") for entry in entries) == list(range(30))


def test_lock_held_elsewhere_raises_activity_log_error(tmp_path: Path) -> None:
    path = tmp_path / "activity.json"
    log = _log(path, lock_timeout=0.05)

    with FileLock(str(path) + ".lock"):
        with pytest.raises(ActivityLogError, match="lock"):
            log.record_error(5, "boom")

    log.record_error(5, "boom")
    assert [entry.message for entry in log.recent()] == ["boom"]
