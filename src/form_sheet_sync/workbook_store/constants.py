"""Shared workbook store constants."""

from __future__ import annotations

SUBMISSIONS_SHEET_NAME = "Submissions"
WORKBOOK_SUFFIX = ".xlsx"

HEADER_FILL_COLOR = "E6E6E6"
MIN_COLUMN_WIDTH = 12
MAX_COLUMN_WIDTH = 40
