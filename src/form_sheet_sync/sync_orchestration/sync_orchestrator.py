"""Form to destination synchronization service."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator, Sequence
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from form_sheet_sync.configuration.runtime_settings import SiteSettings, SyncSettings
from form_sheet_sync.header_reconciliation import (
    HeaderChange,
    HeaderMutationGuard,
    align_row_to_headers,
    reconcile_destination_headers,
)
from form_sheet_sync.schema_management import FlattenedColumn, build_headers, flatten_fields
from form_sheet_sync.value_resolution import SubmissionRecord, build_row

from .collaborators import (
    MappingStore,
    SchemaProvider,
    SubmissionSource,
    SyncEventSink,
    TabularStore,
)
from .destination_titles import compose_destination_title
from .sync_contracts import (
    FormSyncOutcome,
    FormSyncState,
    ImportResult,
    PartialBatchFailure,
    RecordSyncOutcome,
    RecordSyncStatus,
    SyncAllOutcome,
)
from .sync_errors import DestinationMissing, DestinationUnavailable, FormNotMappedError, SyncError

_LOGGER = logging.getLogger(__name__)


class SyncOrchestrator:  # pylint: disable=too-many-instance-attributes
    """Owns form mapping state and drives provisioning, live sync and bulk import.

    ``collaborator_errors`` names the exceptions raised by the injected
    collaborators. Like ``SyncError`` they fail one form or record only.
    """

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        *,
        schema_provider: SchemaProvider,
        submission_source: SubmissionSource,
        store: TabularStore,
        mappings: MappingStore,
        events: SyncEventSink,
        site: SiteSettings,
        sync_settings: SyncSettings,
        header_guard: HeaderMutationGuard | None = None,
        collaborator_errors: tuple[type[Exception], ...] = (),
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._schema = schema_provider
        self._submissions = submission_source
        self._store = store
        self._mappings = mappings
        self._events = events
        self._site = site
        self._settings = sync_settings
        self._header_guard = header_guard or HeaderMutationGuard()
        self._isolated_errors: tuple[type[Exception], ...] = (SyncError, *collaborator_errors)
        self._sleep = sleep
        self._clock = clock or (lambda: datetime.now(UTC))
        self._timezone = ZoneInfo(site.timezone)

    # pylint: enable=too-many-arguments

    def is_mapped(self, form_id: int) -> bool:
        return self._mappings.load(form_id) is not None

    def preview_headers(self, form_id: int) -> list[str]:
        """Return the header row the current schema would produce."""
        return build_headers(self._columns(form_id))

    def provision(self, form_id: int) -> FormSyncState:
        """Create a destination for the form and record the mapping."""
        headers = build_headers(self._columns(form_id))
        title = compose_destination_title(self._site.name, self.form_title(form_id), form_id)
        handle = self._store.create(title, headers)
        state = FormSyncState(
            form_id=form_id,
            destination_id=handle.destination_id,
            destination_url=handle.url,
            created_at=self._clock(),
        )
        self._mappings.save(state)
        _LOGGER.info(
            "Provisioned destination %s for form %s with %d columns",
            handle.destination_id,
            form_id,
            len(headers),
        )
        return state

    def resync(self, form_id: int) -> FormSyncState:
        """Discard the current mapping and provision a fresh destination."""
        self._mappings.delete(form_id)
        return self.provision(form_id)

    def reconcile_headers(self, form_id: int) -> HeaderChange:
        """Append header labels the current schema produces but the destination lacks."""
        state = self._require_state(form_id)
        return self._reconcile(state, self._columns(form_id))

    def sync_one(self, form_id: int, record: SubmissionRecord) -> RecordSyncOutcome:
        """Append one submission to the form's destination; never retried.

        Every failure, including one raised by a collaborator, becomes a
        FAILED outcome.
        """
        try:
            state = self._mappings.load(form_id)
            if state is None:
                return RecordSyncOutcome(
                    form_id=form_id, record_id=record.record_id, status=RecordSyncStatus.SKIPPED
                )
            columns = self._columns(form_id)
            headers = list(self._reconcile(state, columns).merged)
            row = self._resolve_rows([record], columns, headers, form_id)[0]
            self._store.append_rows(state.destination_id, [row])
        except DestinationMissing as exc:
            return self._record_failure(form_id, record, exc, discard_mapping=True)
        except self._isolated_errors as exc:
            return self._record_failure(form_id, record, exc)

        self._best_effort(
            f"Logging synced record {record.record_id} of form {form_id}",
            self._events.record_success,
            form_id,
            record.record_id,
        )
        return RecordSyncOutcome(
            form_id=form_id, record_id=record.record_id, status=RecordSyncStatus.SYNCED
        )

    def sync_all_forms(self) -> SyncAllOutcome:
        """Provision every form lacking a reachable destination.

        A failure while handling one form is recorded against that form and
        the remaining forms are still processed.
        """
        created: list[FormSyncOutcome] = []
        skipped: list[FormSyncOutcome] = []
        errored: list[FormSyncOutcome] = []

        for form_id in self._schema.list_forms():
            title = _fallback_title(form_id)
            try:
                title = self.form_title(form_id)
                state = self._mappings.load(form_id)
                if state is not None:
                    if self._store.verify_exists(state.destination_id):
                        skipped.append(
                            FormSyncOutcome(
                                form_id=form_id,
                                title=title,
                                destination_url=state.destination_url,
                                reason="Already synced",
                            )
                        )
                        continue
                    _LOGGER.warning(
                        "Destination %s of form %s is gone; provisioning a new one",
                        state.destination_id,
                        form_id,
                    )
                    self._mappings.delete(form_id)
                new_state = self.provision(form_id)
            except self._isolated_errors as exc:
                message = str(exc) or exc.__class__.__name__
                _LOGGER.error("Provisioning form %s failed: %s", form_id, message)
                self._best_effort(
                    f"Logging the failure of form {form_id}",
                    self._events.record_error,
                    form_id,
                    message,
                )
                errored.append(FormSyncOutcome(form_id=form_id, title=title, error=message))
                continue
            created.append(
                FormSyncOutcome(
                    form_id=form_id, title=title, destination_url=new_state.destination_url
                )
            )

        return SyncAllOutcome(
            created=tuple(created), skipped=tuple(skipped), errored=tuple(errored)
        )

    def import_existing(self, form_id: int) -> ImportResult:
        """Append all historical submissions, oldest first, in fixed-size batches."""
        state = self._require_state(form_id)
        columns = self._columns(form_id)
        try:
            headers = list(self._reconcile(state, columns).merged)
        except DestinationMissing:
            self._mappings.delete(form_id)
            raise

        records = sorted(
            self._submissions.list_historical(form_id),
            key=lambda record: _chronological_key(record.submitted_at),
        )
        rows = self._resolve_rows(records, columns, headers, form_id)

        imported = 0
        failed = 0
        errors: list[PartialBatchFailure] = []
        for batch_number, (first_row, batch) in enumerate(
            _chunked(rows, self._settings.batch_size), start=1
        ):
            if batch_number > 1 and self._settings.batch_pause_seconds > 0:
                self._sleep(self._settings.batch_pause_seconds)
            try:
                self._store.append_rows(state.destination_id, batch)
            except DestinationMissing:
                self._mappings.delete(form_id)
                raise
            except DestinationUnavailable as exc:
                failed += len(batch)
                errors.append(
                    PartialBatchFailure(
                        batch_number=batch_number,
                        first_row=first_row,
                        row_count=len(batch),
                        message=str(exc),
                    )
                )
                _LOGGER.error("Import batch %d of form %s failed: %s", batch_number, form_id, exc)
                self._events.record_error(
                    form_id, f"Import batch {batch_number} ({len(batch)} rows) failed: {exc}"
                )
                continue
            imported += len(batch)

        _LOGGER.info(
            "Imported %d of %d historical submissions for form %s (%d failed)",
            imported,
            len(rows),
            form_id,
            failed,
        )
        return ImportResult(
            imported=imported, failed=failed, total=len(rows), errors=tuple(errors)
        )

    def form_title(self, form_id: int) -> str:
        return self._schema.get_form_title(form_id) or _fallback_title(form_id)

    def _columns(self, form_id: int) -> list[FlattenedColumn]:
        return flatten_fields(self._schema.list_fields(form_id))

    def _require_state(self, form_id: int) -> FormSyncState:
        state = self._mappings.load(form_id)
        if state is None:
            raise FormNotMappedError(
                f"Form {form_id} has no destination yet; run sync-all or resync first."
            )
        return state

    def _reconcile(self, state: FormSyncState, columns: Sequence[FlattenedColumn]) -> HeaderChange:
        return reconcile_destination_headers(
            self._store, state.destination_id, build_headers(columns), self._header_guard
        )

    def _resolve_rows(
        self,
        records: Sequence[SubmissionRecord],
        columns: Sequence[FlattenedColumn],
        headers: Sequence[str],
        form_id: int,
    ) -> list[list[str]]:
        options_map = self._schema.get_options_map(form_id)
        return [
            align_row_to_headers(
                headers,
                columns,
                build_row(record, columns, options_map, timezone=self._timezone),
            )
            for record in records
        ]

    def _record_failure(
        self,
        form_id: int,
        record: SubmissionRecord,
        error: Exception,
        *,
        discard_mapping: bool = False,
    ) -> RecordSyncOutcome:
        message = str(error) or error.__class__.__name__
        _LOGGER.error("Syncing record %s of form %s failed: %s", record.record_id, form_id, message)
        if discard_mapping:
            self._best_effort(
                f"Discarding the mapping of form {form_id}", self._mappings.delete, form_id
            )
        self._best_effort(
            f"Logging the failure of form {form_id}", self._events.record_error, form_id, message
        )
        self._best_effort(
            f"Queueing an error notice for form {form_id}",
            self._events.notify_error,
            form_id,
            self._form_title_or_fallback(form_id),
            message,
        )
        return RecordSyncOutcome(
            form_id=form_id,
            record_id=record.record_id,
            status=RecordSyncStatus.FAILED,
            error_message=message,
        )

    def _form_title_or_fallback(self, form_id: int) -> str:
        try:
            return self.form_title(form_id)
        except self._isolated_errors as exc:
            _LOGGER.error("Reading the title of form %s failed: %s", form_id, exc)
            return _fallback_title(form_id)

    def _best_effort(self, description: str, action: Callable[..., object], *args: object) -> None:
        try:
            action(*args)
        except self._isolated_errors as exc:
            _LOGGER.error("%s failed: %s", description, exc)


def _fallback_title(form_id: int) -> str:
    return f"Form #{form_id}"


def _chunked(rows: Sequence[list[str]], size: int) -> Iterator[tuple[int, list[list[str]]]]:
    for start in range(0, len(rows), size):
        yield start, list(rows[start : start + size])


def _chronological_key(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment
