"""Value resolution tests."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from form_sheet_sync.schema_management import flatten_fields, parse_field_definition
from form_sheet_sync.value_resolution import (
    SubmissionRecord,
    build_row,
    format_value,
    match_value,
    resolve_column_value,
    translate_option_codes,
)


def test_list_of_scalars_is_comma_joined() -> None:
    assert resolve_column_value("checkbox-1", {"checkbox-1": ["red", "blue"]}) == "red, blue"


def test_nested_values_are_rendered_as_json() -> None:
    value = [{"guest": "Ann", "diet": "veg"}, {"guest": "Bo"}]

    rendered = resolve_column_value("group-1", {"group-1": value})

    assert json.loads(rendered) == value
    assert " " not in rendered


def test_mapping_value_keeps_non_ascii_text() -> None:
    assert format_value({"city": "Zürich"}) == '{"city":"Zürich"}'


def test_option_codes_are_translated_to_labels() -> None:
    options_map = {"select-1": {"a": "Easy", "b": "Hard"}}

    assert resolve_column_value("select-1", {"select-1": "a"}, options_map) == "Easy"
    assert resolve_column_value("select-1", {"select-1": ["a", "c"]}, options_map) == "Easy, c"


def test_integer_option_codes_match_string_keys() -> None:
    assert translate_option_codes(2, {"2": "Two"}) == "Two"
    assert translate_option_codes(True, {"True": "Yes"}) is True


def test_compound_part_is_found_inside_base_field_value() -> None:
    values = {"name-1": {"first-name": "Ada", "last_name": "Lovelace"}}

    assert resolve_column_value("name-1-first-name", values) == "Ada"
    assert resolve_column_value("name-1-last-name", values) == "Lovelace"


def test_exact_key_wins_over_compound_lookup() -> None:
    values = {"name-1-first-name": "Direct", "name-1": {"first-name": "Nested"}}

    match = match_value("name-1-first-name", values)

    assert match is not None
    assert match.raw_value == "Direct"
    assert match.field_id == "name-1-first-name"


def test_missing_value_resolves_to_empty_string() -> None:
    assert resolve_column_value("address-1-city", {}) == ""
    assert resolve_column_value("address-1-city", {"address-1": "flat text"}) == ""
    assert resolve_column_value("text-1", {"text-1": None}) == ""


def test_scalars_are_stripped_of_markup_and_unescaped() -> None:
    assert format_value("<p>Fish &amp; Chips</p>") == "Fish & Chips"
    assert format_value(42) == "42"


def test_booleans_render_as_one_and_empty_text() -> None:
    assert format_value(True) == "1"
    assert format_value(False) == ""
    assert format_value([True, "x", False]) == "1, x, "
    assert format_value({"consent": True}) == '{"consent":true}'


def test_build_row_fills_standard_columns_in_site_timezone() -> None:
    columns = flatten_fields(
        [
            parse_field_definition({"slug": "name-1", "type": "name"}),
            parse_field_definition({"slug": "email-1", "type": "email"}),
        ]
    )
    record = SubmissionRecord(
        record_id="101",
        submitted_at=datetime(2024, 3, 1, 23, 30, tzinfo=UTC),
        values={"name-1": {"first-name": "Ada"}, "email-1": "ada@example.com"},
        requester_address="203.0.113.9",
    )

    row = build_row(record, columns, timezone=ZoneInfo("Europe/Berlin"))

    assert row == [
        "101",
        "2024-03-02",
        "00:30:00",
        "203.0.113.9",
        "Ada",
        "",
        "ada@example.com",
    ]
    assert len(row) == len(columns)


def test_build_row_treats_naive_timestamps_as_utc() -> None:
    columns = flatten_fields([])
    record = SubmissionRecord(record_id="7", submitted_at=datetime(2024, 1, 5, 8, 0, 1))

    assert build_row(record, columns) == ["7", "2024-01-05", "08:00:01", ""]
