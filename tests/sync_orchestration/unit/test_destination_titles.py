"""Destination title tests."""

from __future__ import annotations

from form_sheet_sync.sync_orchestration import (
    compose_destination_title,
    sanitize_destination_title,
)


def test_title_combines_site_form_title_and_id() -> None:
    assert compose_destination_title("Shop", "Orders", 3) == "Shop Orders (Form #3)"


def test_site_name_is_truncated_to_twenty_characters() -> None:
    title = compose_destination_title("A" * 30, "Orders", 3)

    assert title == f"{'A' * 20} Orders (Form #3)"


def test_forbidden_characters_are_removed() -> None:
    assert sanitize_destination_title("Q&A? */\\[draft]") == "Q&A draft"


def test_long_titles_are_capped_with_ellipsis() -> None:
    title = sanitize_destination_title("x" * 150)

    assert len(title) == 100
    assert title.endswith("...")


def test_empty_titles_fall_back() -> None:
    assert sanitize_destination_title("[]/ ") == "Untitled Form"
