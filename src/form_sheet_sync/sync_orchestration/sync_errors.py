"""Synchronization error taxonomy."""

from __future__ import annotations


class SyncError(Exception):
    """Base class for failures raised by synchronization collaborators."""


class AuthenticationError(SyncError):
    """No usable credential is available for the tabular store."""


class DestinationUnavailable(SyncError):
    """A call to the tabular store failed at the transport or store level."""


class DestinationCreateError(DestinationUnavailable):
    """The tabular store rejected creation of a new destination."""


class DestinationMissing(SyncError):
    """The tabular store reports that the mapped destination no longer exists."""


class FormNotMappedError(SyncError):
    """The form has no destination yet."""
