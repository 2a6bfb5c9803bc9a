"""File coordination exports."""

from .atomic_files import atomic_replace, atomic_write_text
from .path_locks import DEFAULT_LOCK_TIMEOUT_SECONDS, PathLock, lock_file_for, path_lock

__all__ = [
    "DEFAULT_LOCK_TIMEOUT_SECONDS",
    "PathLock",
    "atomic_replace",
    "atomic_write_text",
    "lock_file_for",
    "path_lock",
]
