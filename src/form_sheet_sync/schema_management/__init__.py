"""Schema management exports."""

from .markup_text import humanize_identifier, strip_markup
from .schema_models import FieldDefinition, FlattenedColumn
from .schema_projection import (
    NON_DATA_FIELD_TYPES,
    STANDARD_COLUMNS,
    build_headers,
    build_options_map,
    flatten_fields,
    parse_field_definition,
    resolve_field_label,
)

__all__ = [
    "FieldDefinition",
    "FlattenedColumn",
    "NON_DATA_FIELD_TYPES",
    "STANDARD_COLUMNS",
    "build_headers",
    "build_options_map",
    "flatten_fields",
    "humanize_identifier",
    "parse_field_definition",
    "resolve_field_label",
    "strip_markup",
]
