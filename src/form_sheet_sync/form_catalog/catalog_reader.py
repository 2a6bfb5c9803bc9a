"""Form export reader acting as schema provider and submission source."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from form_sheet_sync.schema_management import (
    FieldDefinition,
    build_options_map,
    parse_field_definition,
)
from form_sheet_sync.value_resolution.submission_models import SubmissionRecord

from .catalog_models import CatalogForm


class CatalogError(Exception):
    """Raised when the form export cannot be read."""


class FormCatalog:
    """In-memory view over an exported set of forms."""

    def __init__(self, forms: Sequence[CatalogForm]) -> None:
        self._forms: dict[int, CatalogForm] = {}
        for form in forms:
            if form.form_id in self._forms:
                raise CatalogError(f"Duplicate form id {form.form_id} in catalog.")
            self._forms[form.form_id] = form

    def list_forms(self) -> list[int]:
        return list(self._forms)

    def get_form(self, form_id: int) -> CatalogForm:
        form = self._forms.get(form_id)
        if form is None:
            raise CatalogError(f"Form {form_id} is not present in the catalog.")
        return form

    def get_form_title(self, form_id: int) -> str | None:
        form = self._forms.get(form_id)
        return form.title if form and form.title else None

    def list_fields(self, form_id: int) -> list[FieldDefinition]:
        return list(self.get_form(form_id).fields)

    def get_options_map(self, form_id: int) -> dict[str, dict[str, str]]:
        return build_options_map(self.get_form(form_id).fields)

    def list_historical(self, form_id: int) -> list[SubmissionRecord]:
        return list(self.get_form(form_id).submissions)


def load_form_catalog(catalog_path: Path | str) -> FormCatalog:
    """Read a YAML or JSON form export."""
    path = Path(catalog_path)
    if not path.exists():
        raise CatalogError(f"Form catalog file not found: {path}")
    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise CatalogError(f"Failed to parse form catalog: {exc}") from exc

    if not isinstance(parsed, Mapping):
        raise CatalogError("Form catalog root must be a mapping.")
    raw_forms = parsed.get("forms") or []
    if not isinstance(raw_forms, Sequence) or isinstance(raw_forms, str):
        raise CatalogError("Form catalog 'forms' must be a list.")
    return FormCatalog([_parse_form(raw_form) for raw_form in raw_forms])


def parse_submission_record(raw: Any) -> SubmissionRecord:
    """Build a SubmissionRecord from an exported submission mapping."""
    if not isinstance(raw, Mapping):
        raise CatalogError("Submission entries must be mappings.")
    record_id = raw.get("id")
    if record_id in (None, "") or isinstance(record_id, bool):
        raise CatalogError("Submission entries require an id.")
    values = raw.get("values") or {}
    if not isinstance(values, Mapping):
        raise CatalogError(f"Submission {record_id}: values must be a mapping.")
    requester_address = raw.get("requester_address") or ""
    return SubmissionRecord(
        record_id=str(record_id),
        submitted_at=_parse_timestamp(raw.get("submitted_at"), record_id),
        values={str(key): value for key, value in values.items()},
        requester_address=str(requester_address).strip(),
    )


def _parse_form(raw: Any) -> CatalogForm:
    if not isinstance(raw, Mapping):
        raise CatalogError("Form entries must be mappings.")
    form_id = raw.get("id")
    if isinstance(form_id, bool) or not isinstance(form_id, int):
        raise CatalogError("Form entries require an integer id.")
    raw_fields = raw.get("fields") or []
    raw_submissions = raw.get("submissions") or []
    for value, label in ((raw_fields, "fields"), (raw_submissions, "submissions")):
        if not isinstance(value, Sequence) or isinstance(value, str):
            raise CatalogError(f"Form {form_id}: '{label}' must be a list.")
    fields = []
    for raw_field in raw_fields:
        if not isinstance(raw_field, Mapping):
            raise CatalogError(f"Form {form_id}: field definitions must be mappings.")
        fields.append(parse_field_definition(raw_field))
    title = raw.get("title")
    return CatalogForm(
        form_id=form_id,
        title=title.strip() if isinstance(title, str) else "",
        status=str(raw.get("status") or "publish"),
        fields=tuple(fields),
        submissions=tuple(parse_submission_record(item) for item in raw_submissions),
    )


def _parse_timestamp(value: Any, record_id: object) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise CatalogError(
                f"Submission {record_id}: invalid submitted_at '{value}'."
            ) from exc
    raise CatalogError(f"Submission {record_id}: submitted_at is required.")
