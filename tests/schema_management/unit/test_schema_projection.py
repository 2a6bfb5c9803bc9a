"""Field flattening tests."""

from __future__ import annotations

from form_sheet_sync.schema_management import (
    FieldDefinition,
    build_headers,
    build_options_map,
    flatten_fields,
    parse_field_definition,
    resolve_field_label,
)
from form_sheet_sync.schema_management.markup_text import humanize_identifier, strip_markup

_STANDARD_HEADERS = ["Entry ID", "Submission Date", "Submission Time", "User IP"]


def _field(raw: dict) -> FieldDefinition:
    return parse_field_definition(raw)


def test_standard_columns_lead_every_column_list() -> None:
    columns = flatten_fields([_field({"slug": "text-1", "type": "text", "field_label": "Nick"})])

    assert build_headers(columns) == [*_STANDARD_HEADERS, "Nick"]
    assert all(column.is_standard for column in columns[:4])
    assert not columns[4].is_standard


def test_empty_schema_yields_only_standard_columns() -> None:
    assert build_headers(flatten_fields([])) == _STANDARD_HEADERS


def test_name_field_defaults_to_first_and_last_name() -> None:
    columns = flatten_fields([_field({"slug": "name-1", "type": "name", "field_label": "Name"})])

    assert [(column.key, column.label) for column in columns[4:]] == [
        ("name-1-first-name", "Name - First Name"),
        ("name-1-last-name", "Name - Last Name"),
    ]


def test_name_field_honors_component_flags() -> None:
    columns = flatten_fields(
        [
            _field(
                {
                    "slug": "name-1",
                    "type": "name",
                    "field_label": "Name",
                    "prefix": True,
                    "mname": "1",
                    "lname": "0",
                }
            )
        ]
    )

    assert [column.key for column in columns[4:]] == [
        "name-1-prefix",
        "name-1-first-name",
        "name-1-middle-name",
    ]


def test_name_field_with_every_component_disabled_emits_single_column() -> None:
    raw = {"slug": "name-1", "type": "name", "field_label": "Name", "fname": False, "lname": False}
    columns = flatten_fields([_field(raw)])

    assert [(column.key, column.label) for column in columns[4:]] == [("name-1", "Name")]


def test_address_field_emits_six_columns() -> None:
    columns = flatten_fields(
        [_field({"slug": "address-1", "type": "address", "field_label": "Home"})]
    )

    assert build_headers(columns[4:]) == [
        "Home - Street Address",
        "Home - Address Line 2",
        "Home - City",
        "Home - State/Province",
        "Home - ZIP/Postal Code",
        "Home - Country",
    ]


def test_time_postdata_and_group_fields() -> None:
    columns = flatten_fields(
        [
            _field({"slug": "time-1", "type": "time", "field_label": "Pickup"}),
            _field({"slug": "postdata-1", "type": "postdata", "field_label": "Story"}),
            _field({"slug": "group-1", "type": "group", "field_label": "Guests"}),
        ]
    )

    assert build_headers(columns[4:]) == [
        "Pickup - Hours",
        "Pickup - Minutes",
        "Story - Title",
        "Story - Content",
        "Story - Excerpt",
        "Guests (JSON)",
    ]


def test_non_data_and_unidentified_fields_are_skipped() -> None:
    columns = flatten_fields(
        [
            _field({"slug": "section-1", "type": "section"}),
            _field({"slug": "captcha-1", "type": "captcha"}),
            _field({"type": "text", "field_label": "No id"}),
            _field({"slug": "email-1", "type": "email"}),
        ]
    )

    assert [column.key for column in columns[4:]] == ["email-1"]


def test_duplicate_field_keys_are_emitted_once() -> None:
    columns = flatten_fields(
        [
            _field({"slug": "text-1", "type": "text", "field_label": "First"}),
            _field({"slug": "text-1", "type": "text", "field_label": "Second"}),
        ]
    )

    assert build_headers(columns[4:]) == ["First"]


def test_flattening_is_deterministic() -> None:
    fields = [
        _field({"slug": "name-1", "type": "name"}),
        _field({"slug": "address-1", "type": "address"}),
        _field({"slug": "select-1", "type": "select"}),
    ]

    assert flatten_fields(fields) == flatten_fields(list(fields))


def test_label_priority_and_fallback() -> None:
    assert resolve_field_label(_field({"slug": "a", "label": "L", "title": "T"})) == "L"
    assert resolve_field_label(_field({"slug": "a", "placeholder": "P", "name": "N"})) == "P"
    assert resolve_field_label(_field({"slug": "text-1", "field_label": "  "})) == "Text 1"
    assert resolve_field_label(_field({"slug": "a", "field-label": "<b>Bold</b> label"})) == (
        "Bold label"
    )


def test_identifier_is_taken_from_slug_then_element_id_then_id() -> None:
    assert _field({"slug": "text-1", "element_id": "x", "id": 3}).field_id == "text-1"
    assert _field({"element_id": "email-2", "id": 3}).field_id == "email-2"
    assert _field({"id": 3}).field_id == "3"


def test_options_map_covers_option_bearing_fields_only() -> None:
    fields = [
        _field(
            {
                "slug": "select-1",
                "type": "select",
                "options": [{"value": "a", "label": "Easy"}, {"value": "b", "label": "Hard"}],
            }
        ),
        _field({"slug": "text-1", "type": "text", "options": [{"value": "x", "label": "X"}]}),
        _field({"slug": "radio-1", "type": "radio", "options": []}),
    ]

    assert build_options_map(fields) == {"select-1": {"a": "Easy", "b": "Hard"}}


def test_markup_helpers() -> None:
    assert strip_markup("<script>alert(1)</script> <em>Hi</em> ") == "Hi"
    assert humanize_identifier("phone_number-2") == "Phone Number 2"


def test_unlabelled_compound_fields_fall_back_to_type_label() -> None:
    columns = flatten_fields(
        [
            _field({"slug": "--", "type": "name"}),
            _field({"slug": "__", "type": "time"}),
            _field({"slug": "-_", "type": "rating"}),
        ]
    )

    assert build_headers(columns[4:]) == [
        "Name - First Name",
        "Name - Last Name",
        "Time - Hours",
        "Time - Minutes",
        "Rating",
    ]
