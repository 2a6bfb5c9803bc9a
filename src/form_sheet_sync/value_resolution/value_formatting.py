"""Rendering of raw submitted values as destination cell text."""

from __future__ import annotations

import html
import json
from collections.abc import Mapping

from form_sheet_sync.schema_management.markup_text import strip_markup

_STRUCTURED_TYPES = (Mapping, list, tuple)


def translate_option_codes(value: object, option_labels: Mapping[str, str] | None) -> object:
    """Replace option codes by their labels; unmapped codes pass through unchanged."""
    if not option_labels:
        return value
    if isinstance(value, list | tuple):
        return [_translate_code(item, option_labels) for item in value]
    return _translate_code(value, option_labels)


def format_value(value: object) -> str:
    """Render a raw value as cell text.

    Scalars are stripped of markup and HTML-decoded. Lists of scalars are
    comma-joined; lists containing nested structures, and mappings, are
    serialized as compact JSON so structured answers are kept intact.
    Booleans render as "1" for true and "" for false.
    """
    if value is None:
        return ""
    if isinstance(value, Mapping):
        return _to_json(value)
    if isinstance(value, list | tuple):
        if any(isinstance(item, _STRUCTURED_TYPES) for item in value):
            return _to_json(value)
        return ", ".join(_scalar_text(item) for item in value)
    return html.unescape(strip_markup(_scalar_text(value)))


def _translate_code(code: object, option_labels: Mapping[str, str]) -> object:
    if isinstance(code, bool) or not isinstance(code, str | int):
        return code
    return option_labels.get(str(code), code)


def _scalar_text(value: object) -> str:
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    return str(value)


def _to_json(value: object) -> str:
    if isinstance(value, tuple):
        value = list(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
