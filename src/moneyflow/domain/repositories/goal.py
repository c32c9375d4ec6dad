"""Savings goal repository protocol."""

from __future__ import annotations

from typing import Protocol

from ..records import FinancialGoal


class GoalRepository(Protocol):
    def list_records(self) -> list[FinancialGoal]:
        ...
