"""Variable budget repository protocol."""

from __future__ import annotations

from typing import Protocol

from ..records import VariableBudget


class BudgetRepository(Protocol):
    def list_records(self) -> list[VariableBudget]:
        """Variable envelopes with their default monthly amounts."""
        ...
