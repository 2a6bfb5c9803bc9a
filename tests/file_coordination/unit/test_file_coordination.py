"""Path lock and atomic write tests."""

from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest
from filelock import FileLock, Timeout
from form_sheet_sync.file_coordination import (
    atomic_replace,
    atomic_write_text,
    lock_file_for,
    path_lock,
)


def test_atomic_write_replaces_content_without_leftovers(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "state.json"

    atomic_write_text(target, "first")
    atomic_write_text(target, "second")

    assert target.read_text(encoding="utf-8") == "second"
    assert [path.name for path in target.parent.iterdir()] == ["state.json"]


def test_failed_write_keeps_the_previous_file(tmp_path: Path) -> None:
    target = tmp_path / "state.json"
    atomic_write_text(target, "kept")

    def explode(temporary: Path) -> None:
        temporary.write_text("partial", encoding="utf-8")
        raise OSError("disk full")

    with pytest.raises(OSError, match="disk full"):
        atomic_replace(target, explode)

    assert target.read_text(encoding="utf-8") == "kept"
    assert [path.name for path in tmp_path.iterdir()] == ["state.json"]


def test_one_lock_object_per_path(tmp_path: Path) -> None:
    first = path_lock(tmp_path / "a.xlsx")

    assert path_lock(str(tmp_path / "a.xlsx")) is first
    assert path_lock(tmp_path / "sub" / ".." / "a.xlsx") is first
    assert path_lock(tmp_path / "b.xlsx") is not first
    assert lock_file_for(tmp_path / "a.xlsx") == tmp_path / "a.xlsx.lock"


def test_path_lock_is_reentrant_and_excludes_other_lock_files(tmp_path: Path) -> None:
    lock = path_lock(tmp_path / "a.xlsx")
    outsider = FileLock(str(tmp_path / "a.xlsx.lock"))

    with lock.held(), lock.held():
        with pytest.raises(Timeout):
            outsider.acquire(timeout=0.05)

    outsider.acquire(timeout=0.05)
    outsider.release()


def test_other_threads_wait_for_the_holder(tmp_path: Path) -> None:
    lock = path_lock(tmp_path / "a.xlsx")
    order: list[str] = []

    def contender() -> None:
        with lock.held():
            order.append("contender")

    with lock.held():
        thread = threading.Thread(target=contender)
        thread.start()
        time.sleep(0.05)
        order.append("holder")
    thread.join()

    assert order == ["holder", "contender"]
