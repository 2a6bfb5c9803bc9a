"""Schema management entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class FieldDefinition:
    """One form field as declared by the schema provider."""

    field_id: str
    field_type: str
    label: str | None = None
    settings: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FlattenedColumn:
    """One atomic destination column derived from a field or a field sub-component."""

    key: str
    label: str
    field_id: str | None = None
    part_key: str | None = None

    @property
    def is_standard(self) -> bool:
        """Return True for the fixed record-metadata columns."""
        return self.field_id is None
