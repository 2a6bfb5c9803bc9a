"""Workbook store exports."""

from .constants import SUBMISSIONS_SHEET_NAME
from .workbook_store import WorkbookStore

__all__ = ["SUBMISSIONS_SHEET_NAME", "WorkbookStore"]
