"""Value resolution exports."""

from .compound_part_rules import (
    COMPOUND_PART_RULES,
    CompoundPartRule,
    ValueMatch,
    match_value,
    nested_part_lookup,
)
from .row_resolver import build_row, resolve_column_value
from .submission_models import SubmissionRecord
from .value_formatting import format_value, translate_option_codes

__all__ = [
    "COMPOUND_PART_RULES",
    "CompoundPartRule",
    "SubmissionRecord",
    "ValueMatch",
    "build_row",
    "format_value",
    "match_value",
    "nested_part_lookup",
    "resolve_column_value",
    "translate_option_codes",
]
