"""Recurring rule repository protocol."""

from __future__ import annotations

from typing import Protocol

from ..records import RecurringItem


class RecurringRepository(Protocol):
    """Source of recurring item records."""

    def list_records(self) -> list[RecurringItem]:
        """Valid recurring items; rows without their anchor date are left out."""
        ...
