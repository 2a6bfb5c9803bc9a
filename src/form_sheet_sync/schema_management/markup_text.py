"""Text cleanup helpers shared by label resolution and value formatting."""

from __future__ import annotations

import re

_SCRIPT_OR_STYLE = re.compile(r"<(script|style)[^>]*?>.*?</\1>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]*>")
_IDENTIFIER_SEPARATORS = re.compile(r"[-_]+")


def strip_markup(text: str) -> str:
    """Remove HTML tags, including script and style bodies, and trim whitespace."""
    without_code = _SCRIPT_OR_STYLE.sub("", text)
    return _TAG.sub("", without_code).strip()


def humanize_identifier(identifier: str) -> str:
    """Turn ``text-1`` into ``Text 1``."""
    words = _IDENTIFIER_SEPARATORS.sub(" ", identifier).split()
    return " ".join(word[:1].upper() + word[1:] for word in words)
