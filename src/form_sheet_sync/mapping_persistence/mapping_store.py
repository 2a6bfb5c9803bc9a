"""JSON file persistence of form to destination mappings."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

from filelock import Timeout

from form_sheet_sync.file_coordination import (
    DEFAULT_LOCK_TIMEOUT_SECONDS,
    atomic_write_text,
    path_lock,
)
from form_sheet_sync.sync_orchestration.sync_contracts import FormSyncState

_LOGGER = logging.getLogger(__name__)


class MappingStoreError(Exception):
    """Raised when the mapping file cannot be read or written."""


class JsonMappingStore:
    """Mapping store keeping every FormSyncState in one JSON document.

    The document is keyed by form id. A missing file is an empty store.
    Updates hold ``<path>.lock`` so concurrent processes never lose each
    other's mappings.
    """

    def __init__(
        self, path: Path | str, *, lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS
    ) -> None:
        self._path = Path(path)
        self._lock_timeout = lock_timeout

    @property
    def path(self) -> Path:
        return self._path

    def load(self, form_id: int) -> FormSyncState | None:
        with self._locked():
            states = self._read()
        return states.get(form_id)

    def save(self, state: FormSyncState) -> None:
        with self._locked():
            states = self._read()
            states[state.form_id] = state
            self._write(states)
        _LOGGER.debug("Saved mapping for form %s -> %s", state.form_id, state.destination_id)

    def delete(self, form_id: int) -> None:
        with self._locked():
            states = self._read()
            if states.pop(form_id, None) is None:
                return
            self._write(states)
        _LOGGER.debug("Deleted mapping for form %s", form_id)

    def list_states(self) -> list[FormSyncState]:
        with self._locked():
            states = self._read()
        return [states[form_id] for form_id in sorted(states)]

    @contextmanager
    def _locked(self) -> Iterator[None]:
        lock = path_lock(self._path)
        try:
            lock.acquire(self._lock_timeout)
        except (Timeout, OSError) as exc:
            raise MappingStoreError(f"Failed to lock mapping file {self._path}: {exc}") from exc
        try:
            yield
        finally:
            lock.release()

    def _read(self) -> dict[int, FormSyncState]:
        if not self._path.exists():
            return {}
        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise MappingStoreError(f"Failed to read mapping file {self._path}: {exc}") from exc
        if not isinstance(document, Mapping):
            raise MappingStoreError(f"Mapping file {self._path} must contain a JSON object.")
        states = [_state_from_json(key, value) for key, value in document.items()]
        return {state.form_id: state for state in states}

    def _write(self, states: Mapping[int, FormSyncState]) -> None:
        document = {str(form_id): _state_to_json(states[form_id]) for form_id in sorted(states)}
        try:
            atomic_write_text(self._path, json.dumps(document, indent=2) + "\n")
        except OSError as exc:
            raise MappingStoreError(f"Failed to write mapping file {self._path}: {exc}") from exc


def _state_to_json(state: FormSyncState) -> dict[str, Any]:
    return {
        "destination_id": state.destination_id,
        "destination_url": state.destination_url,
        "created_at": state.created_at.isoformat(),
    }


def _state_from_json(key: str, value: Any) -> FormSyncState:
    if not str(key).isdigit() or not isinstance(value, Mapping):
        raise MappingStoreError(f"Invalid mapping entry for form {key!r}.")
    try:
        return FormSyncState(
            form_id=int(key),
            destination_id=str(value["destination_id"]),
            destination_url=str(value.get("destination_url") or ""),
            created_at=datetime.fromisoformat(str(value["created_at"])),
        )
    except (KeyError, ValueError) as exc:
        raise MappingStoreError(f"Invalid mapping entry for form {key}: {exc}") from exc
