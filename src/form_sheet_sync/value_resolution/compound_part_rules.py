"""Matching of compound column keys back to submitted values.

Compound fields are flattened into ``{field_id}-{part_key}`` columns, while
submissions carry the whole compound answer under ``field_id`` as a nested
mapping whose keys use either hyphens or underscores. Each rule below names
one known part suffix and the strategy used to pull that part out of the
base field's value. New compound types are supported by extending
``COMPOUND_PART_RULES``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

PartLookup = Callable[[object, str], object | None]


@dataclass(frozen=True)
class ValueMatch:
    """Raw value found for a column, with the field whose option table applies."""

    field_id: str
    raw_value: object


@dataclass(frozen=True)
class CompoundPartRule:
    """Suffix of a compound column key and how to find that part in a submission."""

    suffix: str
    lookup: PartLookup

    def base_field_id(self, column_key: str) -> str | None:
        """Return the owning field identifier when ``column_key`` ends with this part."""
        marker = f"-{self.suffix}"
        if not column_key.endswith(marker):
            return None
        base = column_key[: -len(marker)]
        return base or None


def nested_part_lookup(container: object, part_key: str) -> object | None:
    """Look up ``part_key`` in a nested mapping, trying hyphen then underscore spelling."""
    if not isinstance(container, Mapping):
        return None
    for spelling in _part_spellings(part_key):
        value = container.get(spelling)
        if value is not None:
            return value
    return None


def _part_spellings(part_key: str) -> tuple[str, ...]:
    underscored = part_key.replace("-", "_")
    hyphenated = part_key.replace("_", "-")
    spellings = [hyphenated, underscored]
    return tuple(dict.fromkeys(spellings))


_KNOWN_PART_SUFFIXES: tuple[str, ...] = (
    "first-name",
    "last-name",
    "middle-name",
    "prefix",
    "street-address",
    "address-line",
    "city",
    "state",
    "zip",
    "country",
    "hours",
    "minutes",
    "post-title",
    "post-content",
    "post-excerpt",
)

COMPOUND_PART_RULES: tuple[CompoundPartRule, ...] = tuple(
    CompoundPartRule(suffix=suffix, lookup=nested_part_lookup) for suffix in _KNOWN_PART_SUFFIXES
)


def match_value(
    column_key: str,
    values: Mapping[str, object],
    rules: Sequence[CompoundPartRule] = COMPOUND_PART_RULES,
) -> ValueMatch | None:
    """Find the raw submitted value for ``column_key``; ``None`` when nothing matches."""
    direct = values.get(column_key)
    if direct is not None:
        return ValueMatch(field_id=column_key, raw_value=direct)

    for rule in rules:
        base_field_id = rule.base_field_id(column_key)
        if base_field_id is None:
            continue
        part_value = rule.lookup(values.get(base_field_id), rule.suffix)
        if part_value is not None:
            return ValueMatch(field_id=base_field_id, raw_value=part_value)
    return None
