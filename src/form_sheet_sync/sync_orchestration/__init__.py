"""Sync orchestration exports."""

from .collaborators import (
    MappingStore,
    SchemaProvider,
    SubmissionSource,
    SyncEventSink,
    TabularStore,
)
from .destination_titles import compose_destination_title, sanitize_destination_title
from .sync_contracts import (
    DestinationHandle,
    FormSyncOutcome,
    FormSyncState,
    ImportResult,
    PartialBatchFailure,
    RecordSyncOutcome,
    RecordSyncStatus,
    SyncAllOutcome,
)
from .sync_errors import (
    AuthenticationError,
    DestinationCreateError,
    DestinationMissing,
    DestinationUnavailable,
    FormNotMappedError,
    SyncError,
)
from .sync_orchestrator import SyncOrchestrator

__all__ = [
    "AuthenticationError",
    "DestinationCreateError",
    "DestinationHandle",
    "DestinationMissing",
    "DestinationUnavailable",
    "FormNotMappedError",
    "FormSyncOutcome",
    "FormSyncState",
    "ImportResult",
    "MappingStore",
    "PartialBatchFailure",
    "RecordSyncOutcome",
    "RecordSyncStatus",
    "SchemaProvider",
    "SubmissionSource",
    "SyncAllOutcome",
    "SyncError",
    "SyncEventSink",
    "SyncOrchestrator",
    "TabularStore",
    "compose_destination_title",
    "sanitize_destination_title",
]
