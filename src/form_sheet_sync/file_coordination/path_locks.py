"""Process-wide and cross-process locks keyed by the file they protect."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout

DEFAULT_LOCK_TIMEOUT_SECONDS = 60.0
LOCK_SUFFIX = ".lock"

_REGISTRY_LOCK = threading.Lock()
_PATH_LOCKS: dict[Path, PathLock] = {}


class PathLock:
    """Reentrant lock on ``<path>.lock`` shared by threads and processes.

    Threads of one process queue on an ``RLock`` first, so the underlying
    file lock is only ever owned by one thread at a time.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._thread_lock = threading.RLock()
        self._file_lock = FileLock(lock_file_for(path), thread_local=False)

    def acquire(self, timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS) -> None:
        if not self._thread_lock.acquire(timeout=timeout):
            raise Timeout(str(lock_file_for(self.path)))
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file_lock.acquire(timeout=timeout)
        except BaseException:
            self._thread_lock.release()
            raise

    def release(self) -> None:
        self._file_lock.release()
        self._thread_lock.release()

    @contextmanager
    def held(self, timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS) -> Iterator[None]:
        self.acquire(timeout)
        try:
            yield
        finally:
            self.release()


def lock_file_for(path: Path) -> Path:
    return path.with_name(path.name + LOCK_SUFFIX)


def path_lock(path: Path | str) -> PathLock:
    """Return the single PathLock of this process for ``path``."""
    key = Path(path).resolve()
    with _REGISTRY_LOCK:
        lock = _PATH_LOCKS.get(key)
        if lock is None:
            lock = PathLock(key)
            _PATH_LOCKS[key] = lock
        return lock
