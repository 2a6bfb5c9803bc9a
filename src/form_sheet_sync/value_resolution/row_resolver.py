"""Per-record column value resolution service."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime, tzinfo

from form_sheet_sync.schema_management.schema_models import FlattenedColumn

from .compound_part_rules import match_value
from .submission_models import SubmissionRecord
from .value_formatting import format_value, translate_option_codes

OptionsMap = Mapping[str, Mapping[str, str]]


def resolve_column_value(
    column_key: str,
    values: Mapping[str, object],
    options_map: OptionsMap | None = None,
) -> str:
    """Return the formatted cell text for one column.

    A column with no matching submitted value resolves to an empty string;
    absent data is deliberately indistinguishable from an empty answer.
    """
    match = match_value(column_key, values)
    if match is None:
        return ""
    option_labels = (options_map or {}).get(match.field_id)
    return format_value(translate_option_codes(match.raw_value, option_labels))


def build_row(
    record: SubmissionRecord,
    columns: Sequence[FlattenedColumn],
    options_map: OptionsMap | None = None,
    *,
    timezone: tzinfo = UTC,
) -> list[str]:
    """Resolve every column of ``columns`` for one submission, in column order."""
    local_time = _localize(record.submitted_at, timezone)
    row: list[str] = []
    for column in columns:
        if column.is_standard:
            render = _STANDARD_VALUES.get(column.key)
            row.append(render(record, local_time) if render else "")
        else:
            row.append(resolve_column_value(column.key, record.values, options_map))
    return row


def _localize(moment: datetime, timezone: tzinfo) -> datetime:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(timezone)


_STANDARD_VALUES: dict[str, Callable[[SubmissionRecord, datetime], str]] = {
    "entry_id": lambda record, _local: record.record_id,
    "submission_date": lambda _record, local: local.strftime("%Y-%m-%d"),
    "submission_time": lambda _record, local: local.strftime("%H:%M:%S"),
    "user_ip": lambda record, _local: record.requester_address,
}
