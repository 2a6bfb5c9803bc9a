"""Header reconciliation entities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HeaderChange:
    """Additive change needed to bring a destination header row up to date."""

    current: tuple[str, ...]
    appended: tuple[str, ...]

    @property
    def is_noop(self) -> bool:
        """Return True when the destination already carries every computed label."""
        return not self.appended

    @property
    def merged(self) -> tuple[str, ...]:
        """Header row after the change: existing labels first, new labels trailing."""
        return self.current + self.appended
