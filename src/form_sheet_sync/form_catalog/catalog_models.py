"""Form catalog entities."""

from __future__ import annotations

from dataclasses import dataclass

from form_sheet_sync.schema_management.schema_models import FieldDefinition
from form_sheet_sync.value_resolution.submission_models import SubmissionRecord


@dataclass(frozen=True)
class CatalogForm:
    """One exported form with its field definitions and stored submissions."""

    form_id: int
    title: str
    status: str
    fields: tuple[FieldDefinition, ...]
    submissions: tuple[SubmissionRecord, ...]
