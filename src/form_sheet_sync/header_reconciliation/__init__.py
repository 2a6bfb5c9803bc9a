"""Header reconciliation exports."""

from .header_changes import HeaderChange
from .header_reconciler import (
    HeaderMutationGuard,
    HeaderRowStore,
    align_row_to_headers,
    reconcile_destination_headers,
    reconcile_headers,
)

__all__ = [
    "HeaderChange",
    "HeaderMutationGuard",
    "HeaderRowStore",
    "align_row_to_headers",
    "reconcile_destination_headers",
    "reconcile_headers",
]
