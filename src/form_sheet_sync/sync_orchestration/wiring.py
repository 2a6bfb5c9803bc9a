"""Assembly of the file-backed collaborators around a SyncOrchestrator."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from form_sheet_sync.activity_log import ActivityLog, ActivityLogError
from form_sheet_sync.configuration.runtime_settings import Configuration
from form_sheet_sync.form_catalog import CatalogError, FormCatalog, load_form_catalog
from form_sheet_sync.header_reconciliation import HeaderMutationGuard
from form_sheet_sync.mapping_persistence import JsonMappingStore, MappingStoreError
from form_sheet_sync.workbook_store import WorkbookStore

from .sync_orchestrator import SyncOrchestrator

COLLABORATOR_ERRORS: tuple[type[Exception], ...] = (
    CatalogError,
    MappingStoreError,
    ActivityLogError,
)


@dataclass(frozen=True)
class SyncRuntime:
    """Collaborators built from one configuration."""

    configuration: Configuration
    catalog: FormCatalog
    store: WorkbookStore
    mappings: JsonMappingStore
    activity_log: ActivityLog
    orchestrator: SyncOrchestrator


def build_sync_runtime(
    configuration: Configuration, *, sleep: Callable[[float], None] = time.sleep
) -> SyncRuntime:
    catalog = load_form_catalog(configuration.catalog.path)
    store = WorkbookStore(configuration.store.directory)
    mappings = JsonMappingStore(configuration.state.mappings_path)
    activity_log = ActivityLog(
        configuration.state.activity_log_path,
        retention=configuration.sync.log_retention,
        notice_retention=configuration.sync.error_notice_retention,
    )
    orchestrator = SyncOrchestrator(
        schema_provider=catalog,
        submission_source=catalog,
        store=store,
        mappings=mappings,
        events=activity_log,
        site=configuration.site,
        sync_settings=configuration.sync,
        header_guard=HeaderMutationGuard(destination_lock=store.hold_destination),
        collaborator_errors=COLLABORATOR_ERRORS,
        sleep=sleep,
    )
    return SyncRuntime(
        configuration=configuration,
        catalog=catalog,
        store=store,
        mappings=mappings,
        activity_log=activity_log,
        orchestrator=orchestrator,
    )
