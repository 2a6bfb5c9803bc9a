"""Activity log exports."""

from .activity_log import (
    DEFAULT_ERROR_NOTICE_RETENTION,
    DEFAULT_LOG_RETENTION,
    ActivityLog,
    ActivityLogError,
)
from .log_models import ErrorNotice, SyncLogEntry, SyncLogKind

__all__ = [
    "ActivityLog",
    "ActivityLogError",
    "DEFAULT_ERROR_NOTICE_RETENTION",
    "DEFAULT_LOG_RETENTION",
    "ErrorNotice",
    "SyncLogEntry",
    "SyncLogKind",
]
