"""Protocols implemented by the collaborators of the sync orchestrator."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from form_sheet_sync.schema_management.schema_models import FieldDefinition
from form_sheet_sync.value_resolution.submission_models import SubmissionRecord

from .sync_contracts import DestinationHandle, FormSyncState


class SchemaProvider(Protocol):
    """Source of form identities and field definitions."""

    def list_forms(self) -> list[int]: ...

    def get_form_title(self, form_id: int) -> str | None: ...

    def list_fields(self, form_id: int) -> list[FieldDefinition]: ...

    def get_options_map(self, form_id: int) -> dict[str, dict[str, str]]: ...


class SubmissionSource(Protocol):  # pylint: disable=too-few-public-methods
    """Source of stored historical submissions."""

    def list_historical(self, form_id: int) -> list[SubmissionRecord]: ...


class TabularStore(Protocol):
    """Destination store receiving header rows and data rows.

    Implementations raise ``AuthenticationError`` when no credential is
    usable, ``DestinationCreateError`` when creation is rejected,
    ``DestinationMissing`` when a destination no longer exists and
    ``DestinationUnavailable`` for any other store or transport failure.
    """

    def create(self, title: str, headers: Sequence[str]) -> DestinationHandle: ...

    def set_headers(self, destination_id: str, headers: Sequence[str]) -> None: ...

    def get_headers(self, destination_id: str) -> list[str]: ...

    def append_rows(self, destination_id: str, rows: Sequence[Sequence[str]]) -> None: ...

    def verify_exists(self, destination_id: str) -> bool: ...


class MappingStore(Protocol):
    """Persistence of form to destination mappings."""

    def load(self, form_id: int) -> FormSyncState | None: ...

    def save(self, state: FormSyncState) -> None: ...

    def delete(self, form_id: int) -> None: ...


class SyncEventSink(Protocol):
    """Operator-facing log and error notification sink."""

    def record_success(self, form_id: int, record_id: str) -> None: ...

    def record_error(self, form_id: int, message: str) -> None: ...

    def notify_error(self, form_id: int, title: str, message: str) -> None: ...
