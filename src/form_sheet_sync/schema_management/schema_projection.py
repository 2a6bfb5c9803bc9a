"""Field definition flattening service."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .markup_text import humanize_identifier, strip_markup
from .schema_models import FieldDefinition, FlattenedColumn

_LOGGER = logging.getLogger(__name__)

STANDARD_COLUMNS: tuple[FlattenedColumn, ...] = (
    FlattenedColumn(key="entry_id", label="Entry ID"),
    FlattenedColumn(key="submission_date", label="Submission Date"),
    FlattenedColumn(key="submission_time", label="Submission Time"),
    FlattenedColumn(key="user_ip", label="User IP"),
)

NON_DATA_FIELD_TYPES = frozenset(
    {"section", "page-break", "html", "captcha", "gdprconsent", "stripe", "paypal"}
)
OPTION_FIELD_TYPES = frozenset({"radio", "select", "checkbox", "multiselect"})
LABEL_ATTRIBUTES: tuple[str, ...] = (
    "field_label",
    "field-label",
    "label",
    "title",
    "placeholder",
    "name",
)
_IDENTIFIER_ATTRIBUTES: tuple[str, ...] = ("slug", "element_id", "id")
_TYPE_FALLBACK_LABELS: dict[str, str] = {
    "name": "Name",
    "address": "Address",
    "time": "Time",
    "postdata": "Post",
    "date": "Date",
    "upload": "File Upload",
}


@dataclass(frozen=True)
class _NameComponent:
    part_key: str
    label: str
    setting: str
    enabled_by_default: bool


_NAME_COMPONENTS: tuple[_NameComponent, ...] = (
    _NameComponent("prefix", "Prefix", "prefix", False),
    _NameComponent("first-name", "First Name", "fname", True),
    _NameComponent("middle-name", "Middle Name", "mname", False),
    _NameComponent("last-name", "Last Name", "lname", True),
)
_ADDRESS_PARTS: tuple[tuple[str, str], ...] = (
    ("street-address", "Street Address"),
    ("address-line", "Address Line 2"),
    ("city", "City"),
    ("state", "State/Province"),
    ("zip", "ZIP/Postal Code"),
    ("country", "Country"),
)
_TIME_PARTS: tuple[tuple[str, str], ...] = (("hours", "Hours"), ("minutes", "Minutes"))
_POSTDATA_PARTS: tuple[tuple[str, str], ...] = (
    ("post-title", "Title"),
    ("post-content", "Content"),
    ("post-excerpt", "Excerpt"),
)


def parse_field_definition(raw: Mapping[str, Any]) -> FieldDefinition:
    """Build a FieldDefinition from a raw field mapping as exported by the form builder."""
    field_id = ""
    for attribute in _IDENTIFIER_ATTRIBUTES:
        candidate = raw.get(attribute)
        if candidate not in (None, "") and not isinstance(candidate, bool):
            field_id = str(candidate).strip()
            break
    field_type = raw.get("type")
    return FieldDefinition(
        field_id=field_id,
        field_type=field_type.strip() if isinstance(field_type, str) else "",
        settings=dict(raw),
    )


def resolve_field_label(field: FieldDefinition) -> str:
    """Return the display label, falling back to a human-cased identifier."""
    if field.label and field.label.strip():
        return strip_markup(field.label)
    for attribute in LABEL_ATTRIBUTES:
        value = field.settings.get(attribute)
        if isinstance(value, str) and value.strip():
            return strip_markup(value)
    return humanize_identifier(field.field_id)


def flatten_fields(fields: Sequence[FieldDefinition]) -> list[FlattenedColumn]:
    """Return the standard columns followed by deterministic schema-derived columns."""
    columns: list[FlattenedColumn] = list(STANDARD_COLUMNS)
    seen_keys = {column.key for column in STANDARD_COLUMNS}

    for field in fields:
        if not field.field_id:
            _LOGGER.debug("Skipping field of type %r without identifier", field.field_type)
            continue
        if field.field_type in NON_DATA_FIELD_TYPES:
            continue
        flattener = _FIELD_FLATTENERS.get(field.field_type, _flatten_simple_field)
        for column in flattener(field):
            if column.key in seen_keys:
                _LOGGER.debug("Skipping duplicate column key %s", column.key)
                continue
            seen_keys.add(column.key)
            columns.append(column)

    return columns


def build_headers(columns: Sequence[FlattenedColumn]) -> list[str]:
    """Return the header row for a flattened column list."""
    return [column.label for column in columns]


def build_options_map(fields: Sequence[FieldDefinition]) -> dict[str, dict[str, str]]:
    """Map option-bearing field identifiers to their value-code to label tables."""
    options_map: dict[str, dict[str, str]] = {}
    for field in fields:
        if not field.field_id or field.field_type not in OPTION_FIELD_TYPES:
            continue
        options = field.settings.get("options")
        if not isinstance(options, Sequence) or isinstance(options, str):
            continue
        value_to_label: dict[str, str] = {}
        for option in options:
            if not isinstance(option, Mapping):
                continue
            value = option.get("value")
            label = option.get("label")
            if value in (None, "") or label in (None, ""):
                continue
            value_to_label[str(value)] = str(label)
        if value_to_label:
            options_map[field.field_id] = value_to_label
    return options_map


def _flatten_simple_field(field: FieldDefinition) -> list[FlattenedColumn]:
    return [
        FlattenedColumn(key=field.field_id, label=_base_label(field), field_id=field.field_id)
    ]


def _flatten_name_field(field: FieldDefinition) -> list[FlattenedColumn]:
    base_label = _base_label(field)
    columns = [
        _part_column(field, component.part_key, f"{base_label} - {component.label}")
        for component in _NAME_COMPONENTS
        if _component_enabled(field.settings, component)
    ]
    if not columns:
        return [FlattenedColumn(key=field.field_id, label=base_label, field_id=field.field_id)]
    return columns


def _flatten_group_field(field: FieldDefinition) -> list[FlattenedColumn]:
    return [
        FlattenedColumn(
            key=field.field_id,
            label=f"{_base_label(field)} (JSON)",
            field_id=field.field_id,
        )
    ]


def _fixed_parts_flattener(
    parts: Sequence[tuple[str, str]],
) -> Callable[[FieldDefinition], list[FlattenedColumn]]:
    def flatten(field: FieldDefinition) -> list[FlattenedColumn]:
        base_label = _base_label(field)
        return [
            _part_column(field, part_key, f"{base_label} - {part_label}")
            for part_key, part_label in parts
        ]

    return flatten


def _base_label(field: FieldDefinition) -> str:
    label = resolve_field_label(field)
    if label:
        return label
    return _TYPE_FALLBACK_LABELS.get(field.field_type, field.field_type.capitalize())


def _part_column(field: FieldDefinition, part_key: str, label: str) -> FlattenedColumn:
    return FlattenedColumn(
        key=f"{field.field_id}-{part_key}",
        label=label,
        field_id=field.field_id,
        part_key=part_key,
    )


def _component_enabled(settings: Mapping[str, Any], component: _NameComponent) -> bool:
    if component.setting not in settings:
        return component.enabled_by_default
    value = settings[component.setting]
    return bool(value) and value != "0"


_FIELD_FLATTENERS: dict[str, Callable[[FieldDefinition], list[FlattenedColumn]]] = {
    "name": _flatten_name_field,
    "address": _fixed_parts_flattener(_ADDRESS_PARTS),
    "time": _fixed_parts_flattener(_TIME_PARTS),
    "postdata": _fixed_parts_flattener(_POSTDATA_PARTS),
    "group": _flatten_group_field,
}
