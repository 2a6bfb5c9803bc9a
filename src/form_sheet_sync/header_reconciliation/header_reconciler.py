"""Additive header reconciliation service."""

from __future__ import annotations

import logging
import threading
from collections import Counter, defaultdict, deque
from collections.abc import Callable, Iterator, Sequence
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol

from form_sheet_sync.schema_management.schema_models import FlattenedColumn

from .header_changes import HeaderChange

_LOGGER = logging.getLogger(__name__)

DestinationLock = Callable[[str], AbstractContextManager[None]]


class HeaderRowStore(Protocol):
    """Subset of the tabular store API needed to reconcile a header row."""

    def get_headers(self, destination_id: str) -> list[str]: ...

    def set_headers(self, destination_id: str, headers: Sequence[str]) -> None: ...


class HeaderMutationGuard:
    """Serializes header read-diff-write cycles per destination.

    Two submissions for the same destination must not both observe the old
    header row and both append the same missing label. Threads of this
    process queue on an in-memory lock; ``destination_lock`` extends the
    guard to other processes sharing the same destination.
    """

    def __init__(self, destination_lock: DestinationLock | None = None) -> None:
        self._registry_lock = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._destination_lock = destination_lock

    @contextmanager
    def hold(self, destination_id: str) -> Iterator[None]:
        with self._lock_for(destination_id):
            if self._destination_lock is None:
                yield
                return
            with self._destination_lock(destination_id):
                yield

    def _lock_for(self, destination_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(destination_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[destination_id] = lock
            return lock


def reconcile_headers(current: Sequence[str], computed: Sequence[str]) -> HeaderChange:
    """Return labels of ``computed`` missing from ``current``, in computed order.

    Existing labels are never removed, renamed or reordered.
    """
    present = set(current)
    appended: list[str] = []
    for label in computed:
        if label in present:
            continue
        present.add(label)
        appended.append(label)
    return HeaderChange(current=tuple(current), appended=tuple(appended))


def reconcile_destination_headers(
    store: HeaderRowStore,
    destination_id: str,
    computed: Sequence[str],
    guard: HeaderMutationGuard,
) -> HeaderChange:
    """Read the live header row, append missing labels, and return the applied change."""
    with guard.hold(destination_id):
        change = reconcile_headers(store.get_headers(destination_id), computed)
        if not change.is_noop:
            _LOGGER.info(
                "Appending %d header(s) to destination %s: %s",
                len(change.appended),
                destination_id,
                ", ".join(change.appended),
            )
            store.set_headers(destination_id, list(change.merged))
    _warn_about_shadowed_labels(destination_id, computed, change.merged)
    return change


def _warn_about_shadowed_labels(
    destination_id: str, computed: Sequence[str], merged: Sequence[str]
) -> None:
    # Labels are matched as a set: a column whose label already heads another
    # column gets no header of its own and its values are not written.
    available = Counter(merged)
    shadowed = sorted(
        label for label, count in Counter(computed).items() if count > available[label]
    )
    if shadowed:
        _LOGGER.warning(
            "Destination %s has fewer header columns than fields labelled %s; "
            "values of the extra fields are not written.",
            destination_id,
            ", ".join(repr(label) for label in shadowed),
        )


def align_row_to_headers(
    headers: Sequence[str], columns: Sequence[FlattenedColumn], row: Sequence[str]
) -> list[str]:
    """Reorder a resolved row to match the live header row by label.

    Repeated labels are consumed in column order. Headers no column produces
    are left empty.
    """
    positions: defaultdict[str, deque[int]] = defaultdict(deque)
    for index, column in enumerate(columns):
        positions[column.label].append(index)
    aligned: list[str] = []
    for label in headers:
        queue = positions.get(label)
        aligned.append(row[queue.popleft()] if queue else "")
    return aligned
