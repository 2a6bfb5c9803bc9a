"""Submission domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class SubmissionRecord:
    """One received form submission."""

    record_id: str
    submitted_at: datetime
    values: Mapping[str, object] = field(default_factory=dict)
    requester_address: str = ""
