"""Destination title composition."""

from __future__ import annotations

import re

SITE_NAME_MAX_LENGTH = 20
TITLE_MAX_LENGTH = 100
FALLBACK_TITLE = "Untitled Form"

_FORBIDDEN_TITLE_CHARACTERS = re.compile(r"[\\/?*\[\]]")


def compose_destination_title(site_name: str, form_title: str, form_id: int) -> str:
    """Build a destination title unique across forms sharing the same title."""
    raw_title = f"[{site_name[:SITE_NAME_MAX_LENGTH]}] {form_title} (Form #{form_id})"
    return sanitize_destination_title(raw_title)


def sanitize_destination_title(title: str) -> str:
    """Drop characters the store rejects and cap the length."""
    cleaned = _FORBIDDEN_TITLE_CHARACTERS.sub("", title)
    if len(cleaned) > TITLE_MAX_LENGTH:
        cleaned = cleaned[: TITLE_MAX_LENGTH - 3] + "..."
    if not cleaned.strip():
        return FALLBACK_TITLE
    return cleaned
